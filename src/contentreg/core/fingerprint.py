from __future__ import annotations

import hashlib


def sha256_fingerprint(data: bytes, prefix: str = "") -> bytes:
    """Content-addressed fingerprint of raw bytes.

    Layout: `<prefix>sha256:<64 hex chars>`, so a prefix such as "ipfs:" can be
    chosen to satisfy the registry's current validation rule.
    """

    digest = hashlib.sha256(bytes(data)).hexdigest()
    return f"{prefix}sha256:{digest}".encode("utf-8")
