from __future__ import annotations

from .service import DEFAULT_VALIDATION_RULE, ContentRegistry, registry_from_env

__all__ = ["ContentRegistry", "DEFAULT_VALIDATION_RULE", "registry_from_env"]
