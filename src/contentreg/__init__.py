from __future__ import annotations

from .core.errors import (
    ContentNotFound,
    CounterOverflow,
    ErrorKind,
    InvalidContent,
    NotAdmin,
    NotOwner,
    RegistryError,
)
from .core.fingerprint import sha256_fingerprint
from .core.records import ContentId, ContentRecord, RegistryState
from .core.registry import ContentRegistry
from .runtime.server import RegistryServer, run
from .sdk.client import RegistryClient

__all__ = [
    "run",
    "RegistryServer",
    "RegistryClient",
    "ContentRegistry",
    "ContentId",
    "ContentRecord",
    "RegistryState",
    "sha256_fingerprint",
    "ErrorKind",
    "RegistryError",
    "NotAdmin",
    "ContentNotFound",
    "NotOwner",
    "CounterOverflow",
    "InvalidContent",
]
