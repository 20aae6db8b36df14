from __future__ import annotations

from .contents import mount_contents_api, raise_registry_error

__all__ = ["mount_contents_api", "raise_registry_error"]
