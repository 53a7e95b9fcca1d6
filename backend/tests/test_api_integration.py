from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from skladito.api.errors import install_error_handlers
from skladito.core.config import settings
from skladito.core.database import Base, get_db
from skladito.core.logging_middleware import RequestLoggingMiddleware
from skladito.core.store import SqlRecordStore
from skladito.main import include_routers
from skladito.services.seed import seed_defaults

ADMIN_CODE = "0000"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    with testing_session_local() as db:
        seed_defaults(SqlRecordStore(db), settings.model_copy(update={"bootstrap_admin_code": ADMIN_CODE}))

    app = FastAPI(title="Skladito API - Test")
    app.add_middleware(RequestLoggingMiddleware)
    install_error_handlers(app)
    include_routers(app)

    def override_get_db() -> Generator[Session, None, None]:
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


def _login(client: TestClient, code: str) -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"code": code})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _invite_and_activate(client: TestClient, admin_headers: dict[str, str], name: str, code: str) -> tuple[str, dict[str, str]]:
    invite = client.post("/api/v1/users", json={"name": name}, headers=admin_headers)
    assert invite.status_code == 201
    body = invite.json()

    activated = client.post("/api/v1/auth/activate", json={"invite_token": body["invite_token"], "code": code})
    assert activated.status_code == 200
    return body["id"], {"Authorization": f"Bearer {activated.json()['access_token']}"}


def _create_container(client: TestClient, headers: dict[str, str], name: str, parent: str | None = None) -> str:
    response = client.post("/api/v1/containers", json={"name": name, "parent": parent}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


def test_protected_endpoints_require_auth(client: TestClient) -> None:
    assert client.get("/api/v1/sync").status_code == 401
    assert client.get("/api/v1/containers").status_code == 401
    assert client.get("/api/v1/search", params={"q": "x"}).status_code == 401
    assert client.post("/api/v1/items", json={"name": "x", "container": "c1"}).status_code == 401

    bad_token = client.get("/api/v1/sync", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad_token.status_code == 401
    assert bad_token.json()["detail"] == "Invalid token"


def test_login_me_and_redaction(client: TestClient) -> None:
    headers = _login(client, ADMIN_CODE)

    me = client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["is_admin"] is True
    assert "code" not in me.json()

    users = client.get("/api/v1/users", headers=headers).json()
    assert all("code" not in user and "invite_token" not in user for user in users)

    assert client.post("/api/v1/auth/login", json={"code": "9999"}).status_code == 401


def test_warehouse_sharing_scenario(client: TestClient) -> None:
    admin_headers = _login(client, ADMIN_CODE)
    c1 = _create_container(client, admin_headers, "c1")
    c2 = _create_container(client, admin_headers, "c2", parent=c1)
    bob_id, bob_headers = _invite_and_activate(client, admin_headers, "bob", "1234")

    assert client.get("/api/v1/sync", headers=bob_headers).json()["containers"] == []

    grant = client.post(f"/api/v1/containers/{c1}/access", json={"user_id": bob_id}, headers=admin_headers)
    assert grant.status_code == 201
    duplicate = client.post(f"/api/v1/containers/{c1}/access", json={"user_id": bob_id}, headers=admin_headers)
    assert duplicate.status_code == 409

    item = client.post("/api/v1/items", json={"name": "i1", "container": c2}, headers=admin_headers)
    assert item.status_code == 201
    i1 = item.json()["id"]

    body = client.get("/api/v1/sync", headers=bob_headers).json()
    assert {c["id"] for c in body["containers"]} == {c1, c2}
    assert [i["id"] for i in body["items"]] == [i1]
    assert len(body["categories"]) == 5

    access = client.get(f"/api/v1/containers/{c1}/access", headers=admin_headers).json()
    assert [grant["user"]["name"] for grant in access] == ["bob"]
    assert client.get(f"/api/v1/containers/{c1}/access", headers=bob_headers).status_code == 403

    blocked = client.delete(f"/api/v1/containers/{c1}", headers=admin_headers)
    assert blocked.status_code == 409
    assert blocked.json()["detail"] == "Container has nested containers"

    revoke = client.delete(f"/api/v1/containers/{c1}/access/{bob_id}", headers=admin_headers)
    assert revoke.status_code == 204
    assert client.get("/api/v1/sync", headers=bob_headers).json()["containers"] == []


def test_activation_errors(client: TestClient) -> None:
    admin_headers = _login(client, ADMIN_CODE)
    invite = client.post("/api/v1/users", json={"name": "bob"}, headers=admin_headers).json()

    for code in (ADMIN_CODE, "0001"):
        bogus = client.post("/api/v1/auth/activate", json={"invite_token": "no-such-token", "code": code})
        assert bogus.status_code == 404

    bad_format = client.post("/api/v1/auth/activate", json={"invite_token": invite["invite_token"], "code": "12"})
    assert bad_format.status_code == 400
    taken = client.post("/api/v1/auth/activate", json={"invite_token": invite["invite_token"], "code": ADMIN_CODE})
    assert taken.status_code == 409

    first = client.post("/api/v1/auth/activate", json={"invite_token": invite["invite_token"], "code": "1234"})
    assert first.status_code == 200
    second = client.post("/api/v1/auth/activate", json={"invite_token": invite["invite_token"], "code": "5678"})
    assert second.status_code == 404


def test_reset_invite_revokes_issued_tokens(client: TestClient) -> None:
    admin_headers = _login(client, ADMIN_CODE)
    bob_id, bob_headers = _invite_and_activate(client, admin_headers, "bob", "1234")
    assert client.get("/api/v1/auth/me", headers=bob_headers).status_code == 200

    reset = client.post(f"/api/v1/users/{bob_id}/reset-invite", headers=admin_headers)
    assert reset.status_code == 200
    assert reset.json()["is_active"] is False

    assert client.get("/api/v1/auth/me", headers=bob_headers).status_code == 401

    reactivated = client.post(
        "/api/v1/auth/activate",
        json={"invite_token": reset.json()["invite_token"], "code": "2468"},
    )
    assert reactivated.status_code == 200
    assert client.get("/api/v1/auth/me", headers=bob_headers).status_code == 401


def test_regular_users_cannot_administer(client: TestClient) -> None:
    admin_headers = _login(client, ADMIN_CODE)
    _, bob_headers = _invite_and_activate(client, admin_headers, "bob", "1234")

    assert client.post("/api/v1/users", json={"name": "eve"}, headers=bob_headers).status_code == 403
    categories = client.get("/api/v1/categories", headers=bob_headers).json()
    assert client.delete(f"/api/v1/categories/{categories[0]['id']}", headers=bob_headers).status_code == 403


def test_item_patch_and_category_cascade(client: TestClient) -> None:
    headers = _login(client, ADMIN_CODE)
    shelf = _create_container(client, headers, "Shelf")
    category = client.post("/api/v1/categories", json={"name": "Spare parts"}, headers=headers).json()
    assert category["order"] == 6
    assert category["icon"] == "📁"

    item = client.post(
        "/api/v1/items",
        json={"name": "Fuse", "container": shelf, "category": category["id"], "quantity": 2, "min_quantity": 5},
        headers=headers,
    ).json()
    assert item["is_low_stock"] is True

    patched = client.patch(f"/api/v1/items/{item['id']}", json={"quantity": 10}, headers=headers).json()
    assert patched["quantity"] == 10
    assert patched["category"] == category["id"]
    assert patched["is_low_stock"] is False

    assert client.delete(f"/api/v1/categories/{category['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/items/{item['id']}", headers=headers).json()["category"] is None

    alerts = client.get("/api/v1/items/alerts/low-stock", headers=headers).json()
    assert alerts["count"] == 0


def test_search_endpoint(client: TestClient) -> None:
    headers = _login(client, ADMIN_CODE)
    shelf = _create_container(client, headers, "Tool shelf")
    client.post("/api/v1/items", json={"name": "Toolbox", "container": shelf}, headers=headers)

    body = client.get("/api/v1/search", params={"q": "TOOL"}, headers=headers).json()
    assert [c["name"] for c in body["containers"]] == ["Tool shelf"]
    assert [i["name"] for i in body["items"]] == ["Toolbox"]

    assert client.get("/api/v1/search", params={"q": "[unclosed"}, headers=headers).status_code == 400


def test_unavailable_store_maps_to_503() -> None:
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    app = FastAPI(title="Skladito API - Test")
    install_error_handlers(app)
    include_routers(app)

    def override_get_db() -> Generator[Session, None, None]:
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        response = test_client.post("/api/v1/auth/login", json={"code": ADMIN_CODE})

    assert response.status_code == 503
    assert response.json()["detail"] == "Record store is unavailable"
    engine.dispose()
