from __future__ import annotations

from .records import fingerprint_to_text, principal_to_json, record_to_dict

__all__ = ["fingerprint_to_text", "principal_to_json", "record_to_dict"]
