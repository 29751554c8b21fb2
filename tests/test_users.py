"""
tests.test_users

Account flows: profile sync, self-service updates, lookup and admin management
bounded by the role hierarchy.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import httpx
import pytest
from fastapi import FastAPI

from bakery_api.auth.models import Identity
from bakery_api.auth.roles import Role
from bakery_api.errors import ForbiddenError
from bakery_api.services.users import UserService


@pytest.fixture
def as_user(token_for):
    def _headers(role: Role, subject: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(role, subject=subject)}"}

    return _headers


async def _sync(client: httpx.AsyncClient, headers: dict[str, str], email: str, name: str) -> dict:
    r = await client.post("/api/profile/sync", json={"email": email, "name": name}, headers=headers)
    assert r.status_code in (200, 201), r.text
    return r.json()["data"]


def _identity(role: Role, subject: str) -> Identity:
    now = datetime.now(tz=UTC)
    return Identity(subject=subject, role=role, issued_at=now, expires_at=now + timedelta(hours=1))


@pytest.mark.asyncio
async def test_profile_sync_creates_once(client: httpx.AsyncClient, as_user) -> None:
    headers = as_user(Role.customer, "sub-camille")

    first = await client.post(
        "/api/profile/sync", json={"email": "Camille@Example.com", "name": "Camille"}, headers=headers
    )
    second = await client.post(
        "/api/profile/sync", json={"email": "camille@example.com", "name": "Camille"}, headers=headers
    )

    assert first.status_code == 201
    assert first.json()["data"]["email"] == "camille@example.com"
    assert first.json()["data"]["role"] == "customer"
    assert second.status_code == 200
    assert second.json()["data"]["id"] == first.json()["data"]["id"]


@pytest.mark.asyncio
async def test_profile_sync_rejects_taken_email(client: httpx.AsyncClient, as_user) -> None:
    await _sync(client, as_user(Role.customer, "sub-a"), "shared@example.com", "Alex")

    r = await client.post(
        "/api/profile/sync",
        json={"email": "shared@example.com", "name": "Sam"},
        headers=as_user(Role.customer, "sub-b"),
    )

    assert r.status_code == 409


@pytest.mark.asyncio
async def test_current_user_requires_a_synced_profile(client: httpx.AsyncClient, as_user) -> None:
    r = await client.get("/api/users/me", headers=as_user(Role.customer, "sub-ghost"))

    assert r.status_code == 404
    assert r.json()["message"] == "User profile not found"


@pytest.mark.asyncio
async def test_update_current_user_merges_profile(client: httpx.AsyncClient, as_user) -> None:
    headers = as_user(Role.customer, "sub-lea")
    await _sync(client, headers, "lea@example.com", "Léa")

    await client.put("/api/users/me", json={"profile": {"bio": "Aime les croissants"}}, headers=headers)
    r = await client.put(
        "/api/users/me",
        json={"name": "Léa B.", "profile": {"phoneNumber": "+33612345678"}},
        headers=headers,
    )

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "Léa B."
    assert data["profile"] == {"bio": "Aime les croissants", "phoneNumber": "+33612345678"}


@pytest.mark.asyncio
async def test_update_current_user_validates_profile(client: httpx.AsyncClient, as_user) -> None:
    headers = as_user(Role.customer, "sub-max")
    await _sync(client, headers, "max@example.com", "Max")

    r = await client.put("/api/users/me", json={"profile": {"phoneNumber": "012"}}, headers=headers)

    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "profile.phoneNumber"


@pytest.mark.asyncio
async def test_user_listing_requires_admin_and_paginates(client: httpx.AsyncClient, as_user) -> None:
    for i in range(3):
        await _sync(client, as_user(Role.customer, f"sub-{i}"), f"user{i}@example.com", f"User {i}")

    denied = await client.get("/api/users", headers=as_user(Role.staff, "sub-staff"))
    r = await client.get("/api/users", params={"page": "2", "limit": "2"}, headers=as_user(Role.admin, "sub-admin"))

    assert denied.status_code == 403
    data = r.json()["data"]
    assert len(data["users"]) == 1
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}


@pytest.mark.asyncio
async def test_search_matches_name_or_email(client: httpx.AsyncClient, as_user) -> None:
    await _sync(client, as_user(Role.customer, "sub-1"), "julie@boulangerie.fr", "Julie")
    await _sync(client, as_user(Role.customer, "sub-2"), "marc@example.com", "Marc Boulanger")
    await _sync(client, as_user(Role.customer, "sub-3"), "nina@example.com", "Nina")

    r = await client.get("/api/users/search", params={"q": "boulang"}, headers=as_user(Role.customer, "sub-1"))
    anonymous = await client.get("/api/users/search", params={"q": "boulang"})

    assert [u["name"] for u in r.json()["data"]] == ["Julie", "Marc Boulanger"]
    assert anonymous.status_code == 401


@pytest.mark.asyncio
async def test_get_user_by_id(client: httpx.AsyncClient, as_user) -> None:
    user = await _sync(client, as_user(Role.customer, "sub-1"), "paul@example.com", "Paul")

    found = await client.get(f"/api/users/{user['id']}", headers=as_user(Role.customer, "sub-1"))
    missing = await client.get("/api/users/999", headers=as_user(Role.customer, "sub-1"))

    assert found.json()["data"]["email"] == "paul@example.com"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_changes_role(client: httpx.AsyncClient, as_user) -> None:
    user = await _sync(client, as_user(Role.customer, "sub-1"), "zoe@example.com", "Zoé")

    r = await client.put(
        f"/api/users/{user['id']}", json={"role": "staff"}, headers=as_user(Role.admin, "sub-admin")
    )
    bad = await client.put(
        f"/api/users/{user['id']}", json={"role": "owner"}, headers=as_user(Role.admin, "sub-admin")
    )

    assert r.status_code == 200
    assert r.json()["data"]["role"] == "staff"
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_admin_cannot_delete_own_account(client: httpx.AsyncClient, as_user) -> None:
    admin = as_user(Role.admin, "sub-admin")
    me = await _sync(client, admin, "admin@example.com", "Admin")
    other = await _sync(client, as_user(Role.customer, "sub-1"), "ines@example.com", "Inès")

    own = await client.delete(f"/api/users/{me['id']}", headers=admin)
    deleted = await client.delete(f"/api/users/{other['id']}", headers=admin)
    gone = await client.get(f"/api/users/{other['id']}", headers=admin)

    assert own.status_code == 400
    assert deleted.status_code == 200
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_managers_cannot_touch_higher_roles(app: FastAPI, client: httpx.AsyncClient, as_user) -> None:
    target = await _sync(client, as_user(Role.admin, "sub-boss"), "boss@example.com", "Boss")
    peer = await _sync(client, as_user(Role.staff, "sub-peer"), "peer@example.com", "Peer")
    staff = _identity(Role.staff, "sub-staff")

    async with app.state.sessionmaker() as session:
        service = UserService(session)
        with pytest.raises(ForbiddenError):
            await service.update_user(staff, target["id"], {"name": "Renamed"})
        with pytest.raises(ForbiddenError):
            await service.update_user(staff, peer["id"], {"role": "admin"})
        with pytest.raises(ForbiddenError):
            await service.delete_user(staff, target["id"])

        updated = await service.update_user(staff, peer["id"], {"role": "customer"})
        assert updated.role == "customer"
