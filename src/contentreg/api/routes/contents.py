from __future__ import annotations

from typing import Any, NoReturn

from fastapi import FastAPI, HTTPException, Request

from ...core.errors import ErrorKind, RegistryError
from ...core.fingerprint import sha256_fingerprint
from ...core.registry import ContentRegistry
from ..parsing import CALLER_HEADER, parse_caller, parse_principal_field, parse_text_field
from ..serializers import fingerprint_to_text, principal_to_json, record_to_dict

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_ADMIN: 403,
    ErrorKind.NOT_OWNER: 403,
    ErrorKind.CONTENT_NOT_FOUND: 404,
    ErrorKind.COUNTER_OVERFLOW: 409,
    ErrorKind.INVALID_CONTENT: 422,
}


def raise_registry_error(err: RegistryError) -> NoReturn:
    raise HTTPException(status_code=_STATUS_BY_KIND[err.kind], detail=err.kind.value) from err


def _caller(request: Request) -> str:
    try:
        return parse_caller(request.headers.get(CALLER_HEADER))
    except ValueError as ex:
        raise HTTPException(status_code=400, detail=str(ex))


def mount_contents_api(app: FastAPI, registry: ContentRegistry) -> None:
    """Mount registry endpoints. The caller principal is read from `X-Caller`."""

    @app.get("/api/registry")
    def get_registry_info() -> dict[str, Any]:
        return {
            "admin": principal_to_json(registry.admin),
            "validationRule": registry.get_validation_rule(),
            "nextId": int(registry.next_id()),
            "count": int(registry.count()),
        }

    @app.get("/api/validation-rule")
    def get_validation_rule() -> dict[str, str]:
        return {"rule": registry.get_validation_rule()}

    @app.put("/api/validation-rule")
    def update_validation_rule(request: Request, body: dict) -> dict[str, Any]:
        caller = _caller(request)
        try:
            rule = parse_text_field(body, "rule")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        try:
            registry.update_validation_rule(caller, rule)
        except RegistryError as err:
            raise_registry_error(err)
        return {"ok": True, "rule": registry.get_validation_rule()}

    @app.post("/api/contents")
    def register_content(request: Request, body: dict) -> dict[str, Any]:
        caller = _caller(request)
        try:
            fingerprint = parse_text_field(body, "fingerprint")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        try:
            content_id = registry.register(caller, fingerprint)
        except RegistryError as err:
            raise_registry_error(err)
        return {"ok": True, "id": int(content_id)}

    @app.put("/api/contents/upload")
    async def upload_content(request: Request) -> dict[str, Any]:
        """Fingerprint the raw request body and register it.

        Content-Type: application/octet-stream

        Query params:
          - prefix: str (optional; prepended to the fingerprint, e.g. to satisfy the rule)
        """

        caller = _caller(request)
        prefix = request.query_params.get("prefix", "")
        raw = await request.body()
        fingerprint = sha256_fingerprint(raw, prefix=prefix)
        try:
            content_id = registry.register(caller, fingerprint)
        except RegistryError as err:
            raise_registry_error(err)
        return {
            "ok": True,
            "id": int(content_id),
            "fingerprint": fingerprint_to_text(fingerprint),
            "size": len(raw),
        }

    @app.get("/api/contents/{content_id}")
    def get_content(content_id: int) -> dict[str, Any]:
        record = registry.get_content(content_id)
        if record is None:
            raise HTTPException(status_code=404, detail=ErrorKind.CONTENT_NOT_FOUND.value)
        return record_to_dict(content_id, record)

    @app.get("/api/fingerprints")
    def find_by_fingerprint(request: Request) -> dict[str, Any]:
        """Query params:
          - fingerprint: str (required; sent as a query value so '/' and '..' survive URL normalization)
        """

        fingerprint = request.query_params.get("fingerprint")
        if fingerprint is None:
            raise HTTPException(status_code=400, detail="Missing query param: fingerprint")
        content_id = registry.find_by_fingerprint(fingerprint)
        if content_id is None:
            raise HTTPException(status_code=404, detail=ErrorKind.CONTENT_NOT_FOUND.value)
        return {"id": int(content_id), "fingerprint": fingerprint}

    @app.post("/api/contents/{content_id}/transfer")
    def transfer_ownership(content_id: int, request: Request, body: dict) -> dict[str, Any]:
        caller = _caller(request)
        try:
            new_owner = parse_principal_field(body, "newOwner")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        try:
            registry.transfer_ownership(caller, content_id, new_owner)
        except RegistryError as err:
            raise_registry_error(err)
        return {"ok": True, "id": int(content_id), "owner": new_owner}
