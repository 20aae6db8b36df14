from __future__ import annotations

from .errors import (
    ContentNotFound,
    CounterOverflow,
    ErrorKind,
    InvalidContent,
    NotAdmin,
    NotOwner,
    RegistryError,
)
from .fingerprint import sha256_fingerprint
from .records import (
    FIRST_CONTENT_ID,
    MAX_CONTENT_ID,
    ContentId,
    ContentRecord,
    Principal,
    RegistryState,
    as_content_id,
    as_fingerprint,
)
from .registry import DEFAULT_VALIDATION_RULE, ContentRegistry, registry_from_env
from .validation import ValidationGate, accept_all, prefix_gate, select_gate

__all__ = [
    "ContentId",
    "ContentRecord",
    "Principal",
    "RegistryState",
    "FIRST_CONTENT_ID",
    "MAX_CONTENT_ID",
    "as_content_id",
    "as_fingerprint",
    "ContentRegistry",
    "DEFAULT_VALIDATION_RULE",
    "registry_from_env",
    "ErrorKind",
    "RegistryError",
    "NotAdmin",
    "ContentNotFound",
    "NotOwner",
    "CounterOverflow",
    "InvalidContent",
    "ValidationGate",
    "prefix_gate",
    "accept_all",
    "select_gate",
    "sha256_fingerprint",
]
