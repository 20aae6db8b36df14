from __future__ import annotations

import hashlib


def _skip(msg: str) -> None:  # pragma: no cover
    try:
        import pytest  # type: ignore

        pytest.skip(msg)
    except Exception:
        raise RuntimeError(msg)


def _client(rule: str = "ipfs:", *, gated: bool = True):
    from contentreg.core.registry import ContentRegistry
    from contentreg.runtime.app import create_app

    try:
        from fastapi.testclient import TestClient
    except Exception as e:  # pragma: no cover
        _skip(f"TestClient not available ({e!r}); install test extras to run this test")
        raise

    reg = ContentRegistry("admin", rule, gated=gated)
    return TestClient(create_app(reg)), reg


def test_register_dedup_and_transfer_over_http() -> None:
    client, reg = _client()

    res = client.post("/api/contents", json={"fingerprint": "ipfs:QmABC"}, headers={"X-Caller": "A"})
    assert res.status_code == 200
    assert res.json() == {"ok": True, "id": 1}

    again = client.post("/api/contents", json={"fingerprint": "ipfs:QmABC"}, headers={"X-Caller": "B"})
    assert again.json()["id"] == 1

    meta = client.get("/api/contents/1")
    assert meta.status_code == 200
    assert meta.json() == {
        "id": 1,
        "fingerprint": "ipfs:QmABC",
        "fingerprintHex": b"ipfs:QmABC".hex(),
        "owner": "A",
    }

    denied = client.post("/api/contents/1/transfer", json={"newOwner": "B"}, headers={"X-Caller": "B"})
    assert denied.status_code == 403
    assert denied.json()["detail"] == "NotOwner"

    ok = client.post("/api/contents/1/transfer", json={"newOwner": "B"}, headers={"X-Caller": "A"})
    assert ok.status_code == 200
    assert client.get("/api/contents/1").json()["owner"] == "B"

    missing = client.post("/api/contents/9/transfer", json={"newOwner": "B"}, headers={"X-Caller": "A"})
    assert missing.status_code == 404
    assert missing.json()["detail"] == "ContentNotFound"

    assert client.get("/api/events").json() == {"revision": reg.revision()}


def test_gate_and_admin_errors_over_http() -> None:
    client, _ = _client("xyz")

    bad = client.post("/api/contents", json={"fingerprint": "abc"}, headers={"X-Caller": "A"})
    assert bad.status_code == 422
    assert bad.json()["detail"] == "InvalidContent"

    not_admin = client.put("/api/validation-rule", json={"rule": ""}, headers={"X-Caller": "A"})
    assert not_admin.status_code == 403
    assert not_admin.json()["detail"] == "NotAdmin"
    assert client.get("/api/validation-rule").json() == {"rule": "xyz"}

    updated = client.put("/api/validation-rule", json={"rule": ""}, headers={"X-Caller": "admin"})
    assert updated.status_code == 200
    assert updated.json() == {"ok": True, "rule": ""}

    good = client.post("/api/contents", json={"fingerprint": "abc"}, headers={"X-Caller": "A"})
    assert good.status_code == 200

    info = client.get("/api/registry").json()
    assert info == {"admin": "admin", "validationRule": "", "nextId": 2, "count": 1}


def test_malformed_requests_are_rejected() -> None:
    client, reg = _client("")

    no_caller = client.post("/api/contents", json={"fingerprint": "x"})
    assert no_caller.status_code == 400

    no_field = client.post("/api/contents", json={"hash": "x"}, headers={"X-Caller": "A"})
    assert no_field.status_code == 400

    bad_type = client.put("/api/validation-rule", json={"rule": 5}, headers={"X-Caller": "admin"})
    assert bad_type.status_code == 400

    empty_owner = client.post("/api/contents/1/transfer", json={"newOwner": ""}, headers={"X-Caller": "A"})
    assert empty_owner.status_code == 400

    blank_owner = client.post("/api/contents/1/transfer", json={"newOwner": "   "}, headers={"X-Caller": "A"})
    assert blank_owner.status_code == 400

    # Bodies that are not JSON objects are bad requests, never the 422 of InvalidContent.
    list_body = client.post("/api/contents", json=["x"], headers={"X-Caller": "A"})
    assert list_body.status_code == 400

    list_body_no_caller = client.post("/api/contents", json=["x"])
    assert list_body_no_caller.status_code == 400

    not_json = client.post(
        "/api/contents",
        content=b"fingerprint=x",
        headers={"X-Caller": "A", "content-type": "application/json"},
    )
    assert not_json.status_code == 400

    bad_id = client.get("/api/contents/not-a-number")
    assert bad_id.status_code == 400

    assert reg.count() == 0
    assert reg.revision() == 0


def test_transfer_owner_is_stripped_like_the_caller_header() -> None:
    client, reg = _client("")
    cid = client.post("/api/contents", json={"fingerprint": "x"}, headers={"X-Caller": "A"}).json()["id"]

    res = client.post(f"/api/contents/{cid}/transfer", json={"newOwner": " bob "}, headers={"X-Caller": "A"})
    assert res.status_code == 200
    assert res.json()["owner"] == "bob"
    assert reg.get_content(cid).owner == "bob"  # type: ignore[union-attr]

    onward = client.post(f"/api/contents/{cid}/transfer", json={"newOwner": "carol"}, headers={"X-Caller": "bob"})
    assert onward.status_code == 200
    assert reg.get_content(cid).owner == "carol"  # type: ignore[union-attr]


def test_upload_fingerprints_raw_body() -> None:
    client, reg = _client("ipfs:")
    payload = b"\x00\x01 some artwork bytes"
    expected = f"ipfs:sha256:{hashlib.sha256(payload).hexdigest()}"

    rejected = client.put(
        "/api/contents/upload",
        content=payload,
        headers={"X-Caller": "A", "content-type": "application/octet-stream"},
    )
    assert rejected.status_code == 422

    res = client.put(
        "/api/contents/upload",
        params={"prefix": "ipfs:"},
        content=payload,
        headers={"X-Caller": "A", "content-type": "application/octet-stream"},
    )
    assert res.status_code == 200
    out = res.json()
    assert out["fingerprint"] == expected
    assert out["size"] == len(payload)

    found = client.get("/api/fingerprints", params={"fingerprint": expected})
    assert found.status_code == 200
    assert found.json()["id"] == out["id"]
    assert reg.get_content(out["id"]).owner == "A"  # type: ignore[union-attr]


def test_lookups_report_absence() -> None:
    client, _ = _client("")

    assert client.get("/api/contents/1").status_code == 404
    assert client.get("/api/fingerprints", params={"fingerprint": "unknown"}).status_code == 404
    assert client.get("/api/fingerprints").status_code == 400
    assert client.get("/healthz").json() == {"ok": True}
