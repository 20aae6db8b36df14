from __future__ import annotations

from typing import Any

from ...core.records import ContentId, ContentRecord, Principal


def fingerprint_to_text(fingerprint: bytes) -> str:
    return fingerprint.decode("utf-8", errors="replace")


def principal_to_json(principal: Principal) -> Any:
    if isinstance(principal, (str, int, float, bool)) or principal is None:
        return principal
    return str(principal)


def record_to_dict(content_id: ContentId, record: ContentRecord) -> dict[str, Any]:
    return {
        "id": int(content_id),
        "fingerprint": fingerprint_to_text(record.fingerprint),
        "fingerprintHex": record.fingerprint.hex(),
        "owner": principal_to_json(record.owner),
    }
