"""
tests.test_catalog

Catalog flows through the public API: categories (tree, conflicts, hierarchy
rules) and products (pagination, quantity rules, toggles).
"""

from __future__ import annotations

import httpx
import pytest

from bakery_api.auth.roles import Role


@pytest.fixture
def admin(auth_headers) -> dict[str, str]:
    return auth_headers(Role.admin)


async def _create_category(client: httpx.AsyncClient, admin: dict[str, str], **body) -> dict:
    r = await client.post("/api/categories", json=body, headers=admin)
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_create_category_applies_defaults(client: httpx.AsyncClient, admin) -> None:
    r = await client.post("/api/categories", json={"name": "Pains", "displayOrder": 0}, headers=admin)

    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Category created successfully"
    assert body["data"]["description"] == ""
    assert body["data"]["displayOrder"] == 0
    assert body["data"]["active"] is True


@pytest.mark.asyncio
async def test_duplicate_category_name_is_conflict(client: httpx.AsyncClient, admin) -> None:
    await _create_category(client, admin, name="Tartes")
    r = await client.post("/api/categories", json={"name": "Tartes"}, headers=admin)

    assert r.status_code == 409
    assert r.json()["error"] == "ConflictError"


@pytest.mark.asyncio
async def test_unknown_parent_is_not_found(client: httpx.AsyncClient, admin) -> None:
    r = await client.post("/api/categories", json={"name": "Orphan", "parentId": 99}, headers=admin)

    assert r.status_code == 404
    assert r.json()["details"] == {"id": 99}


@pytest.mark.asyncio
async def test_public_tree_nests_and_orders_active_categories(client: httpx.AsyncClient, admin) -> None:
    root = await _create_category(client, admin, name="Pâtisseries", displayOrder=2)
    bread = await _create_category(client, admin, name="Pains", displayOrder=1)
    await _create_category(client, admin, name="Tartes", parentId=root["id"], displayOrder=1)
    await _create_category(client, admin, name="Éclairs", parentId=root["id"], displayOrder=0)
    hidden = await _create_category(client, admin, name="Saisonnier")
    await client.patch(f"/api/categories/{hidden['id']}/toggle-status", headers=admin)

    r = await client.get("/api/categories")

    tree = r.json()["data"]["categories"]
    assert [n["name"] for n in tree] == ["Pains", "Pâtisseries"]
    assert tree[0]["id"] == bread["id"]
    assert [c["name"] for c in tree[1]["children"]] == ["Éclairs", "Tartes"]


@pytest.mark.asyncio
async def test_update_rejects_hierarchy_cycles(client: httpx.AsyncClient, admin) -> None:
    parent = await _create_category(client, admin, name="A")
    child = await _create_category(client, admin, name="B", parentId=parent["id"])

    own = await client.put(f"/api/categories/{parent['id']}", json={"parentId": parent["id"]}, headers=admin)
    cycle = await client.put(f"/api/categories/{parent['id']}", json={"parentId": child["id"]}, headers=admin)

    assert own.status_code == 400
    assert cycle.status_code == 400
    assert cycle.json()["details"][0]["field"] == "parentId"


@pytest.mark.asyncio
async def test_admin_listing_is_paginated_and_guarded(client: httpx.AsyncClient, admin, auth_headers) -> None:
    for name in ("A", "B", "C"):
        await _create_category(client, admin, name=name)

    denied = await client.get("/api/categories/admin/all", headers=auth_headers(Role.staff))
    r = await client.get("/api/categories/admin/all", params={"page": "2", "limit": "2", "order": "asc"}, headers=admin)

    assert denied.status_code == 403
    data = r.json()["data"]
    assert [c["name"] for c in data["categories"]] == ["C"]
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}


@pytest.mark.asyncio
async def test_category_id_must_be_numeric(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/categories/abc")

    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "id"


@pytest.mark.asyncio
async def test_delete_category_then_get_is_404(client: httpx.AsyncClient, admin) -> None:
    category = await _create_category(client, admin, name="Temp")

    deleted = await client.delete(f"/api/categories/{category['id']}", headers=admin)
    missing = await client.get(f"/api/categories/{category['id']}")

    assert deleted.status_code == 200
    assert missing.status_code == 404
    assert missing.json()["error"] == "NotFoundError"


@pytest.mark.asyncio
async def test_product_lifecycle(client: httpx.AsyncClient, admin) -> None:
    created = await client.post(
        "/api/products",
        json={
            "name": "Croissant",
            "category": "viennoiseries",
            "price": 2.5,
            "customOptions": [{"name": "Garniture", "choices": ["Beurre", "Amandes"]}],
        },
        headers=admin,
    )
    assert created.status_code == 201
    product = created.json()["data"]
    assert product["available"] is True
    assert (product["minOrderQuantity"], product["maxOrderQuantity"]) == (1, 10)
    assert product["customOptions"][0]["choices"] == ["Beurre", "Amandes"]

    updated = await client.put(f"/api/products/{product['id']}", json={"price": 2.75}, headers=admin)
    assert updated.json()["data"]["price"] == 2.75

    toggled = await client.patch(f"/api/products/{product['id']}/toggle-availability", headers=admin)
    assert toggled.json()["data"]["available"] is False

    fetched = await client.get(f"/api/products/{product['id']}")
    assert fetched.json()["data"]["name"] == "Croissant"


@pytest.mark.asyncio
async def test_product_quantity_bounds_are_consistent(client: httpx.AsyncClient, admin) -> None:
    r = await client.post(
        "/api/products",
        json={"name": "Kouign", "category": "viennoiseries", "price": 4, "minOrderQuantity": 12},
        headers=admin,
    )

    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "minOrderQuantity"


@pytest.mark.asyncio
async def test_product_body_types_are_strict(client: httpx.AsyncClient, admin) -> None:
    r = await client.post(
        "/api/products",
        json={"name": "Brioche", "category": "viennoiseries", "price": "4.00", "available": "yes"},
        headers=admin,
    )

    assert r.status_code == 400
    assert {d["field"] for d in r.json()["details"]} == {"price", "available"}


@pytest.mark.asyncio
async def test_product_listing_pagination_and_search(client: httpx.AsyncClient, admin) -> None:
    for name, price in (("Baguette", 1.5), ("Pain de campagne", 4.0), ("Pain au chocolat", 1.8)):
        await client.post("/api/products", json={"name": name, "category": "breads", "price": price}, headers=admin)

    page = await client.get("/api/products", params={"page": "1", "limit": "2", "sort": "price", "order": "asc"})
    search = await client.get("/api/products/search", params={"q": "pain"})
    bad = await client.get("/api/products", params={"limit": "1000"})

    data = page.json()["data"]
    assert [p["name"] for p in data["products"]] == ["Baguette", "Pain au chocolat"]
    assert data["pagination"]["totalPages"] == 2
    assert [p["name"] for p in search.json()["data"]["products"]] == ["Pain au chocolat", "Pain de campagne"]
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_profile_and_dev_token(client: httpx.AsyncClient) -> None:
    issued = await client.post("/api/dev/token", json={"subject": "client-7", "role": "staff"})
    assert issued.status_code == 201
    token = issued.json()["data"]["accessToken"]

    me = await client.get("/api/profile/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    data = me.json()["data"]
    assert data["id"] == "client-7"
    assert data["role"] == "staff"
    assert data["grantedRoles"] == ["customer", "staff"]


@pytest.mark.asyncio
async def test_dev_token_rejects_unknown_role(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/dev/token", json={"subject": "x", "role": "root"})

    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "role"


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    assert (await client.get("/healthz")).json() == {"status": "ok"}
    assert (await client.get("/readyz")).json() == {"status": "ready"}
    assert (await client.get("/api/health")).json()["success"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("term", ["%", "_", "\\"])
async def test_search_wildcards_match_literally(client: httpx.AsyncClient, admin, term: str) -> None:
    for name in ("Baguette", "Ficelle"):
        await client.post("/api/products", json={"name": name, "category": "breads", "price": 1.5}, headers=admin)

    r = await client.get("/api/products/search", params={"q": term})

    assert r.status_code == 200
    assert r.json()["data"]["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_search_matches_literal_percent_in_names(client: httpx.AsyncClient, admin) -> None:
    await client.post("/api/products", json={"name": "Pain 100% seigle", "category": "breads", "price": 5}, headers=admin)
    await client.post("/api/products", json={"name": "Pain 100 grammes", "category": "breads", "price": 2}, headers=admin)

    r = await client.get("/api/products/search", params={"q": "100%"})

    assert [p["name"] for p in r.json()["data"]["products"]] == ["Pain 100% seigle"]


@pytest.mark.asyncio
async def test_timestamps_are_serialized_as_utc(client: httpx.AsyncClient, admin) -> None:
    category = await _create_category(client, admin, name="Horodatage")

    fetched = (await client.get(f"/api/categories/{category['id']}")).json()["data"]

    assert fetched["createdAt"].endswith("+00:00")
    assert fetched["updatedAt"].endswith("+00:00")
