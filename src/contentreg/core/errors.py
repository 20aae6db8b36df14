from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Symbolic kinds surfaced to callers of the registry.

    Notes:
    - The value is the only thing that crosses the HTTP boundary.
    - There are no free-form messages attached to a kind.
    """

    NOT_ADMIN = "NotAdmin"
    CONTENT_NOT_FOUND = "ContentNotFound"
    NOT_OWNER = "NotOwner"
    COUNTER_OVERFLOW = "CounterOverflow"
    INVALID_CONTENT = "InvalidContent"

    @classmethod
    def from_any(cls, value: Any) -> "ErrorKind":
        if isinstance(value, cls):
            return value

        v = str(value).strip()
        for kind in cls:
            if v == kind.value or v.upper() == kind.name:
                return kind

        raise ValueError(f"Unknown registry error kind: {value!r}")


class RegistryError(Exception):
    kind: ErrorKind

    def __init__(self) -> None:
        super().__init__(self.kind.value)

    @staticmethod
    def from_kind(kind: str | ErrorKind) -> "RegistryError":
        return _ERRORS_BY_KIND[ErrorKind.from_any(kind)]()


class NotAdmin(RegistryError):
    kind = ErrorKind.NOT_ADMIN


class ContentNotFound(RegistryError):
    kind = ErrorKind.CONTENT_NOT_FOUND


class NotOwner(RegistryError):
    kind = ErrorKind.NOT_OWNER


class CounterOverflow(RegistryError):
    kind = ErrorKind.COUNTER_OVERFLOW


class InvalidContent(RegistryError):
    kind = ErrorKind.INVALID_CONTENT


_ERRORS_BY_KIND: dict[ErrorKind, type[RegistryError]] = {
    cls.kind: cls for cls in (NotAdmin, ContentNotFound, NotOwner, CounterOverflow, InvalidContent)
}
