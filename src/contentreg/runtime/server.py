from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
import webbrowser
from dataclasses import dataclass

import httpx
import uvicorn

from ..core.records import ContentId, ContentRecord
from ..core.registry import ContentRegistry, registry_from_env
from ..sdk.client import RegistryClient
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryServer:
    host: str
    port: int
    url: str
    registry: ContentRegistry

    def as_client(self) -> RegistryClient:
        return RegistryClient(self.url.rstrip("/"))

    # In-process shortcuts: same registry the HTTP app serves, no round-trip.

    def register(self, caller: str, fingerprint: bytes | str) -> ContentId:
        return self.registry.register(caller, fingerprint)

    def transfer_ownership(self, caller: str, content_id: ContentId, new_owner: str) -> None:
        self.registry.transfer_ownership(caller, content_id, new_owner)

    def update_validation_rule(self, caller: str, new_rule: str) -> None:
        self.registry.update_validation_rule(caller, new_rule)

    def get_content(self, content_id: ContentId) -> ContentRecord | None:
        return self.registry.get_content(content_id)

    def get_validation_rule(self) -> str:
        return self.registry.get_validation_rule()


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort check of if a contentreg server is reachable."""

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            data = r.json()
            return bool(data.get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def _wait_until_alive(base_url: str, *, timeout_s: float) -> bool:
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        if _is_server_alive(base_url):
            return True
        time.sleep(0.02)
    return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    admin: str | None = None,
    rule: str | None = None,
    gated: bool | None = None,
    registry: ContentRegistry | None = None,
    open_browser: bool = False,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 5.0,
) -> RegistryServer | RegistryClient:
    """Start a contentreg server with a single Python call.

    Behavior:
    - If CONTENTREG_URL is set, we *attach* to that existing server (client mode) unless
      `new_server=True`.
    - Otherwise, if `port != 0` and a server is already reachable at http://{host}:{port},
      we attach to it (client mode) unless `new_server=True`.
    - Otherwise we start a new local server (server mode) and return a `RegistryServer`.

    Registry configuration (`admin`, `rule`, `gated`) falls back to CONTENTREG_ADMIN,
    CONTENTREG_RULE and CONTENTREG_GATED. It is ignored when attaching.
    """

    env_url = _normalize_base_url(os.getenv("CONTENTREG_URL", ""))

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to contentreg server at %s", env_url)
            if open_browser:
                webbrowser.open(env_url + "/docs")
            return RegistryClient(env_url)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to contentreg server at %s", default_url)
            if open_browser:
                webbrowser.open(default_url + "/docs")
            return RegistryClient(default_url)

    # 3) Start a fresh server.
    if registry is None:
        registry = registry_from_env(admin=admin, rule=rule, gated=gated)

    if port == 0:
        port = _find_free_port(host)

    app = create_app(registry)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    url = f"http://{host}:{port}/"
    if not _wait_until_alive(url.rstrip("/"), timeout_s=startup_timeout_s):
        raise RuntimeError(f"contentreg server did not become reachable at {url} within {startup_timeout_s}s")
    logger.info("contentreg server listening on %s (admin=%r)", url, registry.admin)

    if open_browser:
        webbrowser.open(url + "docs")

    return RegistryServer(host=host, port=port, url=url, registry=registry)
