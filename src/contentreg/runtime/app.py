from __future__ import annotations

from fastapi import FastAPI

from ..api import create_api_app
from ..core.registry import ContentRegistry, registry_from_env


def create_app(registry: ContentRegistry | None = None) -> FastAPI:
    """Create the HTTP app around `registry`, or a registry configured from the environment."""

    if registry is None:
        registry = registry_from_env()
    return create_api_app(registry)
