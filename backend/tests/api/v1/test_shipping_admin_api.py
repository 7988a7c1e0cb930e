"""店铺后台运费配置接口：权限 / CRUD / 错误码"""

from __future__ import annotations
from typing import Any, Dict

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# === 被测路由 ===
from storefront.api.v1.shipping_admin import router as shipping_admin_router

# === 依赖函数（用于覆盖） ===
from storefront.api.v1.deps import get_db
from storefront.services.auth_service import get_current_user


@pytest.fixture()
def current_user() -> Dict[str, Any]:
    return {"user_id": 1, "store_ids": []}


@pytest.fixture()
def client(db_session, store, current_user) -> TestClient:
    """
    只挂后台运费路由的 FastAPI 应用；
    get_db -> 测试用内存库，get_current_user -> 可管理 `store` 的假用户。
    """
    current_user["store_ids"] = [store.id]
    app = FastAPI()
    app.include_router(shipping_admin_router)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: current_user
    return TestClient(app)


def _base(store) -> str:
    return f"/stores/{store.id}/shipping"


def test_store_not_in_token_is_forbidden(client, other_store):
    r = client.get(f"{_base(other_store)}/zones")
    assert r.status_code == 403


def test_superuser_can_manage_any_store(client, other_store, current_user):
    current_user["is_superuser"] = True
    assert client.get(f"{_base(other_store)}/zones").status_code == 200


def test_unauthenticated_request_is_rejected(db_session, store):
    app = FastAPI()
    app.include_router(shipping_admin_router)
    app.dependency_overrides[get_db] = lambda: db_session
    r = TestClient(app).get(f"{_base(store)}/zones")
    assert r.status_code == 401


def test_zone_and_rate_lifecycle(client, store):
    base = _base(store)

    r = client.post(f"{base}/zones", json={"name": "Nacional", "countries": ["CO"]})
    assert r.status_code == 201
    zone = r.json()
    assert zone["rate_count"] == 0

    r = client.post(f"{base}/zones/{zone['id']}/rates", json={
        "name": "Por peso", "type": "weight_based", "price": "7.5", "min_weight": 2, "max_weight": "5",
    })
    assert r.status_code == 201
    rate = r.json()
    assert rate["price"] == "7.50"
    assert rate["min_weight"] == "2.00"

    r = client.get(f"{base}/zones")
    assert [(z["name"], z["rate_count"]) for z in r.json()] == [("Nacional", 1)]

    r = client.get(f"{base}/zones/{zone['id']}")
    assert r.status_code == 200
    assert [x["name"] for x in r.json()["rates"]] == ["Por peso"]

    # 区域下还有规则，不能删
    r = client.delete(f"{base}/zones/{zone['id']}")
    assert r.status_code == 409
    assert r.json()["detail"] == "Cannot delete shipping zone with existing rates"

    r = client.patch(f"{base}/rates/{rate['id']}", json={"price": "9"})
    assert r.status_code == 200
    assert r.json()["price"] == "9.00"

    assert client.delete(f"{base}/rates/{rate['id']}").status_code == 204
    assert client.delete(f"{base}/zones/{zone['id']}").status_code == 204
    assert client.get(f"{base}/zones/{zone['id']}").status_code == 404


def test_invalid_rate_is_422(client, store):
    base = _base(store)
    zone = client.post(f"{base}/zones", json={"name": "Nacional"}).json()

    r = client.post(f"{base}/zones/{zone['id']}/rates", json={"name": "Plano", "type": "flat_rate"})
    assert r.status_code == 422
    assert r.json()["detail"] == "Flat rate shipping must have a price"

    # pydantic 层拒绝未知类型
    r = client.post(f"{base}/zones/{zone['id']}/rates", json={"name": "x", "type": "pickup", "price": "1"})
    assert r.status_code == 422


def test_patch_zone_of_other_store_is_404(client, store, other_store, current_user, db_session):
    from storefront.services.shipping import admin_service

    foreign = admin_service.create_zone(db_session, other_store.id, {"name": "Ajena"})
    r = client.patch(f"{_base(store)}/zones/{foreign.id}", json={"name": "Mía"})
    assert r.status_code == 404


def test_methods_crud(client, store):
    base = _base(store)
    r = client.post(f"{base}/methods", json={"name": "Servientrega", "carrier": "SERVIENTREGA"})
    assert r.status_code == 201
    method = r.json()

    r = client.patch(f"{base}/methods/{method['id']}", json={"code": "SER"})
    assert r.json()["code"] == "SER"

    assert [m["name"] for m in client.get(f"{base}/methods").json()] == ["Servientrega"]
    assert client.delete(f"{base}/methods/{method['id']}").status_code == 204
    assert client.delete(f"{base}/methods/{method['id']}").status_code == 404
