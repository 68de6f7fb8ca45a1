import asyncio
import json
import os

from conftest import ADMIN_KEY, register

from learnportal.admin import access
from learnportal.storage.cache import BLOCKED_IPS

HOUR_MS = 60 * 60 * 1000


def verify(client, code, ip="1.2.3.4"):
    return client.post("/api/verify-admin", json={"code": code}, headers={"X-Forwarded-For": ip})


# ==================== USER ADMIN ====================

def test_list_users_requires_exact_key(client):
    register(client)
    assert client.get("/api/admin/users").status_code == 403
    assert client.get("/api/admin/users", params={"key": "wrong"}).status_code == 403
    assert client.get("/api/admin/users", params={"key": ADMIN_KEY.upper()}).status_code == 403
    assert client.get("/api/admin/users", params={"key": ADMIN_KEY + " "}).status_code == 403

    resp = client.get("/api/admin/users", params={"key": ADMIN_KEY})
    body = resp.json()
    assert body["success"] is True
    assert [u["email"] for u in body["users"]] == ["a@x.com"]
    assert "password" not in body["users"][0]


def test_unset_admin_key_admits_nobody(make_client, config):
    config.admin_key = ""
    with make_client() as c:
        assert c.get("/api/admin/users", params={"key": ""}).status_code == 403


def test_delete_user_removes_user_and_progress(client):
    register(client)
    resp = client.delete("/api/admin/users/a@x.com", params={"key": ADMIN_KEY})
    assert resp.json() == {"success": True, "message": "User deleted"}

    assert client.get("/api/progress/a@x.com").status_code == 404
    assert not client.post("/api/signin", json={"email": "a@x.com", "password": "p"}).json()["success"]
    assert client.get("/api/admin/users", params={"key": ADMIN_KEY}).json()["users"] == []


def test_delete_user_errors(client):
    register(client)
    assert client.delete("/api/admin/users/a@x.com", params={"key": "bad"}).status_code == 403

    resp = client.delete("/api/admin/users/nobody@x.com", params={"key": ADMIN_KEY})
    assert resp.status_code == 404
    assert resp.json()["error"] == "User not found"


# ==================== ACCESS CODE GATE ====================

def test_valid_code_verifies(client):
    resp = verify(client, "africa2025")
    assert resp.status_code == 200
    assert resp.text == "Verified"


def test_wrong_code_blocks_ip_even_for_valid_code(client):
    resp = verify(client, "wrong")
    assert resp.status_code == 403

    resp = verify(client, "africa2025")
    assert resp.status_code == 403
    assert resp.text == access.BLOCKED_MESSAGE

    # other callers are unaffected
    assert verify(client, "africa2025", ip="5.6.7.8").status_code == 200


def test_repeated_failures_stay_blocked_and_are_audited(client, config):
    for _ in range(3):
        assert verify(client, "wrong").status_code == 403

    with open(os.path.join(config.data_dir, "admin_denied.log"), encoding="utf-8") as f:
        lines = f.read().splitlines()
    # only the first attempt reaches the code check; later ones are refused up front
    assert len(lines) == 1
    assert lines[0].endswith("Denied admin access from 1.2.3.4")


def test_block_survives_restart(make_client, config):
    with make_client() as c:
        verify(c, "wrong")

    with open(os.path.join(config.data_dir, "blocked_ips.json"), encoding="utf-8") as f:
        assert "1.2.3.4" in json.load(f)

    with make_client() as c:
        assert verify(c, "africa2025").status_code == 403


def test_block_expires_after_window(client):
    store = client.app.state.store
    start = 1_700_000_000_000

    allowed, _ = asyncio.run(access.verify_admin_code(store, "9.9.9.9", "nope", now_ms=start))
    assert not allowed
    assert store.cache.get(BLOCKED_IPS)["9.9.9.9"] == start + 12 * HOUR_MS

    assert access.is_blocked(store, "9.9.9.9", now_ms=start + 12 * HOUR_MS - 1)
    assert not access.is_blocked(store, "9.9.9.9", now_ms=start + 12 * HOUR_MS)

    allowed, message = asyncio.run(access.verify_admin_code(store, "9.9.9.9", "africa2025", now_ms=start + 13 * HOUR_MS))
    assert allowed
    assert message == "Verified"


def test_failure_after_expiry_restarts_window(client):
    store = client.app.state.store
    start = 1_700_000_000_000
    asyncio.run(access.verify_admin_code(store, "9.9.9.9", "nope", now_ms=start))
    later = start + 20 * HOUR_MS
    asyncio.run(access.verify_admin_code(store, "9.9.9.9", "still-wrong", now_ms=later))
    assert store.cache.get(BLOCKED_IPS)["9.9.9.9"] == later + 12 * HOUR_MS


def denied_lines(config):
    path = os.path.join(config.data_dir, "admin_denied.log")
    if not os.path.exists(path):
        return []
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def test_missing_or_empty_body_blocks_ip(client, config):
    for ip, kwargs in (("7.7.7.7", {"json": {}}), ("7.7.7.8", {})):
        resp = client.post("/api/verify-admin", headers={"X-Forwarded-For": ip}, **kwargs)
        assert resp.status_code == 403
        assert resp.text == access.DENIED_MESSAGE
        assert ip in client.app.state.store.cache.get(BLOCKED_IPS)
        assert verify(client, "africa2025", ip=ip).status_code == 403

    assert len(denied_lines(config)) == 2


def test_non_string_code_blocks_ip(client, config):
    for ip, code in (("3.3.3.3", True), ("3.3.3.4", ["africa2025"]), ("3.3.3.5", {"code": "africa2025"}), ("3.3.3.6", 2025)):
        resp = verify(client, code, ip=ip)
        assert resp.status_code == 403
        assert resp.text == access.DENIED_MESSAGE

        resp = verify(client, "africa2025", ip=ip)
        assert resp.status_code == 403
        assert resp.text == access.BLOCKED_MESSAGE

    assert [line.rsplit(" ", 1)[1] for line in denied_lines(config)] == [
        "3.3.3.3", "3.3.3.4", "3.3.3.5", "3.3.3.6"
    ]


def test_non_object_body_is_treated_as_missing_code(client):
    resp = client.post("/api/verify-admin", json="africa2025", headers={"X-Forwarded-For": "4.4.4.4"})
    assert resp.status_code == 403
