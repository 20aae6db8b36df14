from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any

import httpx

from ..core.errors import ErrorKind, RegistryError
from ..core.records import ContentId, ContentRecord, as_content_id


def _error_from_response(res: httpx.Response, what: str) -> Exception:
    try:
        body: Any = res.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        try:
            return RegistryError.from_kind(ErrorKind.from_any(detail))
        except ValueError:
            pass
    return RuntimeError(f"{what} failed: {res.status_code} {res.text}")


def _fingerprint_text(fingerprint: bytes | str) -> str:
    if isinstance(fingerprint, bytes):
        try:
            return fingerprint.decode("utf-8")
        except UnicodeDecodeError as ex:
            raise ValueError("HTTP fingerprints must be valid UTF-8 text; use upload() for raw bytes") from ex
    return str(fingerprint)


class RegistryClient:
    """HTTP client for a running contentreg server.

    Every mutating call carries `caller` in the `X-Caller` header. Registry
    rejections come back as the matching `RegistryError` subclass; anything
    else raises `RuntimeError`. Fingerprints travel as text, so bytes that are
    not UTF-8 raise `ValueError` before any request is sent.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        *,
        http_client: httpx.Client | None = None,
        timeout_s: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        # An injected client (e.g. fastapi's TestClient) is used as-is and never closed here.
        self._http_client = http_client

    @contextlib.contextmanager
    def _client(self) -> Iterator[httpx.Client]:
        if self._http_client is not None:
            yield self._http_client
            return
        with httpx.Client(base_url=self.base_url, timeout=self.timeout_s) as client:
            yield client

    @staticmethod
    def _headers(caller: str) -> dict[str, str]:
        return {"x-caller": str(caller)}

    def registry_info(self) -> dict[str, Any]:
        with self._client() as client:
            res = client.get("/api/registry")
            if res.status_code >= 400:
                raise _error_from_response(res, "Registry info request")
            return dict(res.json())

    def get_validation_rule(self) -> str:
        with self._client() as client:
            res = client.get("/api/validation-rule")
            if res.status_code >= 400:
                raise _error_from_response(res, "Validation rule request")
            return str(res.json().get("rule", ""))

    def update_validation_rule(self, caller: str, new_rule: str) -> None:
        with self._client() as client:
            res = client.put("/api/validation-rule", json={"rule": str(new_rule)}, headers=self._headers(caller))
            if res.status_code >= 400:
                raise _error_from_response(res, "Validation rule update")

    def register(self, caller: str, fingerprint: bytes | str) -> ContentId:
        with self._client() as client:
            res = client.post(
                "/api/contents",
                json={"fingerprint": _fingerprint_text(fingerprint)},
                headers=self._headers(caller),
            )
            if res.status_code >= 400:
                raise _error_from_response(res, "Register")
            return int(res.json()["id"])

    def upload(self, caller: str, data: bytes, *, prefix: str = "") -> tuple[ContentId, bytes]:
        """Upload raw content; the server fingerprints it and registers the result.

        Returns (content id, fingerprint).
        """

        with self._client() as client:
            res = client.put(
                "/api/contents/upload",
                params={"prefix": prefix} if prefix else None,
                content=bytes(data),
                headers={**self._headers(caller), "content-type": "application/octet-stream"},
            )
            if res.status_code >= 400:
                raise _error_from_response(res, "Upload")
            out = res.json()
            return int(out["id"]), str(out["fingerprint"]).encode("utf-8")

    def transfer_ownership(self, caller: str, content_id: ContentId, new_owner: str) -> None:
        with self._client() as client:
            res = client.post(
                f"/api/contents/{as_content_id(content_id)}/transfer",
                json={"newOwner": str(new_owner)},
                headers=self._headers(caller),
            )
            if res.status_code >= 400:
                raise _error_from_response(res, "Transfer")

    def get_content(self, content_id: ContentId) -> ContentRecord | None:
        with self._client() as client:
            res = client.get(f"/api/contents/{as_content_id(content_id)}")
            if res.status_code == 404:
                return None
            if res.status_code >= 400:
                raise _error_from_response(res, "Content request")
            data = res.json()
            return ContentRecord(fingerprint=bytes.fromhex(data["fingerprintHex"]), owner=data["owner"])

    def find_by_fingerprint(self, fingerprint: bytes | str) -> ContentId | None:
        with self._client() as client:
            res = client.get("/api/fingerprints", params={"fingerprint": _fingerprint_text(fingerprint)})
            if res.status_code == 404:
                return None
            if res.status_code >= 400:
                raise _error_from_response(res, "Fingerprint lookup")
            return int(res.json()["id"])

    def revision(self) -> int:
        with self._client() as client:
            res = client.get("/api/events")
            if res.status_code >= 400:
                raise _error_from_response(res, "Events request")
            return int(res.json()["revision"])
