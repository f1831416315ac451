"""
Tests for joining and leaving groups one member at a time.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_add_member_to_open_group(client: AsyncClient, test_event, make_group):
    group = await make_group(test_event, size=1, accepts_others=True)

    response = await client.post(
        "/api/members",
        json={"group_id": group.id, "name": "Newcomer", "email": "new@example.com"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["group_id"] == group.id
    assert data["email"] == "new@example.com"

    members = (await client.get(f"/api/groups/{group.id}/members")).json()
    assert len(members) == 2


@pytest.mark.asyncio
async def test_add_member_to_closed_group(client: AsyncClient, test_event, make_group):
    """Groups that don't accept others refuse new members."""
    group = await make_group(test_event, size=1, accepts_others=False)

    response = await client.post("/api/members", json={"group_id": group.id, "name": "Newcomer"})
    assert response.status_code == 400
    assert response.json()["error"]["message"] == f"Group with ID {group.id} does not accept new members"


@pytest.mark.asyncio
async def test_add_member_to_full_group(client: AsyncClient, test_event, make_group):
    group = await make_group(test_event, size=3, accepts_others=True)

    response = await client.post("/api/members", json={"group_id": group.id, "name": "Fourth"})
    assert response.status_code == 400
    assert "group size limit" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_add_member_to_full_event(client: AsyncClient, small_event, make_group):
    """The event cap applies to single joins as well."""
    await make_group(small_event, size=1, group_name="Closed")
    group = await make_group(small_event, size=1, group_name="Open", accepts_others=True)

    response = await client.post("/api/members", json={"group_id": group.id, "name": "Third"})
    assert response.status_code == 409
    assert "maximum participant limit" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_add_member_unknown_group(client: AsyncClient):
    response = await client.post("/api/members", json={"group_id": 999, "name": "Nobody"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_member(client: AsyncClient, test_event, make_group):
    group = await make_group(test_event, size=2)
    members = (await client.get(f"/api/groups/{group.id}/members")).json()

    response = await client.delete(f"/api/members/{members[0]['id']}")
    assert response.status_code == 204

    remaining = (await client.get(f"/api/groups/{group.id}/members")).json()
    assert [m["name"] for m in remaining] == ["Member 2"]


@pytest.mark.asyncio
async def test_delete_nonexistent_member(client: AsyncClient):
    response = await client.delete("/api/members/999")
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Member with ID 999 not found"
