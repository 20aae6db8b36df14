from __future__ import annotations

import operator
from collections.abc import Hashable
from dataclasses import dataclass, field


ContentId = int
Principal = Hashable

FIRST_CONTENT_ID: ContentId = 1
MAX_CONTENT_ID: ContentId = 2**64 - 1


def as_fingerprint(value: bytes | bytearray | memoryview | str) -> bytes:
    """Normalize a fingerprint to bytes. Text is encoded as UTF-8."""

    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"fingerprint must be bytes or str, got {type(value).__name__}")


def as_content_id(value: object) -> ContentId:
    """Accept only true integers as ids; floats and bools raise TypeError."""

    if isinstance(value, bool):
        raise TypeError("content id must be an integer, got bool")
    return operator.index(value)  # type: ignore[arg-type]


@dataclass(frozen=True)
class ContentRecord:
    """A registered piece of content.

    `fingerprint` never changes after registration; only the owner is
    reassigned, by replacing the record with a copy.
    """

    fingerprint: bytes
    owner: Principal


@dataclass
class RegistryState:
    """Everything the registry persists between calls."""

    admin: Principal
    validation_rule: str = ""
    records: dict[ContentId, ContentRecord] = field(default_factory=dict)
    next_id: ContentId = FIRST_CONTENT_ID
    fingerprint_index: dict[bytes, ContentId] = field(default_factory=dict)

    def copy(self) -> "RegistryState":
        # Records are frozen, so shallow copies of the maps are enough.
        return RegistryState(
            admin=self.admin,
            validation_rule=self.validation_rule,
            records=dict(self.records),
            next_id=self.next_id,
            fingerprint_index=dict(self.fingerprint_index),
        )

    def check_consistency(self) -> None:
        """Raise ValueError if the two maps or the counter disagree."""

        if not isinstance(self.validation_rule, str):
            raise ValueError("validation_rule must be a string")
        if type(self.next_id) is not int:
            raise ValueError(f"next_id must be an int, got {type(self.next_id).__name__}")
        if not (FIRST_CONTENT_ID <= self.next_id <= MAX_CONTENT_ID):
            raise ValueError(f"next_id must be in [{FIRST_CONTENT_ID}, {MAX_CONTENT_ID}], got {self.next_id}")
        if len(self.records) != len(self.fingerprint_index):
            raise ValueError("records and fingerprint_index have different sizes")
        for fingerprint in self.fingerprint_index:
            if type(fingerprint) is not bytes:
                raise ValueError(f"fingerprint_index keys must be bytes, got {type(fingerprint).__name__}")

        for content_id, record in self.records.items():
            if type(content_id) is not int:
                raise ValueError(f"content ids must be ints, got {type(content_id).__name__}")
            if not isinstance(record, ContentRecord) or type(record.fingerprint) is not bytes:
                raise ValueError(f"content id {content_id} must hold a ContentRecord with a bytes fingerprint")
            if not (FIRST_CONTENT_ID <= content_id < self.next_id):
                raise ValueError(f"content id {content_id} is not below next_id {self.next_id}")
            if self.fingerprint_index.get(record.fingerprint) != content_id:
                raise ValueError(f"content id {content_id} is not indexed under its fingerprint")
