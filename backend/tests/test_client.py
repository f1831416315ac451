"""
Tests for the typed API client and its error mapping.
"""

from datetime import datetime, timezone, timedelta

import httpx
import pytest

from eventgroups.client import EventGroupsClient
from eventgroups.client.errors import (
    ApiError,
    NotFoundError,
    RejectedError,
    TransportError,
    error_from_response,
    extract_message,
)
from eventgroups.schemas.event import EventCreate
from eventgroups.schemas.group import GroupCreate, GroupUpdate, MemberCreate


def test_extract_message_from_envelope():
    response = httpx.Response(409, json={"error": {"status": 409, "message": "Event is full"}})
    assert extract_message(response) == "Event is full"


def test_extract_message_falls_back_to_body():
    assert extract_message(httpx.Response(400, json={"detail": "Bad input"})) == "Bad input"
    assert extract_message(httpx.Response(502, text="upstream down")) == "upstream down"


def test_error_from_response_classes():
    assert isinstance(error_from_response(httpx.Response(404, json={})), NotFoundError)
    assert isinstance(error_from_response(httpx.Response(400, json={})), RejectedError)
    assert isinstance(error_from_response(httpx.Response(409, json={})), RejectedError)
    error = error_from_response(httpx.Response(500, json={}))
    assert type(error) is ApiError
    assert error.status == 500


@pytest.mark.asyncio
async def test_create_and_fetch_event(api: EventGroupsClient):
    created = await api.create_event(EventCreate(
        name="Robotics Day",
        date_time=datetime.now(timezone.utc) + timedelta(days=7),
        location="Lab 3",
        group_size_limit=4,
        max_participants=12,
    ))
    fetched = await api.get_event(created.id)
    assert fetched.name == "Robotics Day"
    assert fetched.groups == []
    assert fetched.total_participants == 0

    listed = await api.list_events()
    assert [e.id for e in listed] == [created.id]


@pytest.mark.asyncio
async def test_group_lifecycle(api: EventGroupsClient, test_event):
    group = await api.create_group(GroupCreate(
        event_id=test_event.id,
        creator_name="Alice",
        creator_email="alice@example.com",
        group_name="Team Alpha",
        members=[MemberCreate(name="Alice"), MemberCreate(name="Bob")],
    ))
    assert len(group.members) == 2

    updated = await api.update_group(group.id, GroupUpdate(group_name="Team Omega"))
    assert updated.group_name == "Team Omega"
    assert len(updated.members) == 2

    groups = await api.get_groups(test_event.id)
    assert [g.id for g in groups] == [group.id]

    await api.delete_group(group.id)
    with pytest.raises(NotFoundError):
        await api.get_group(group.id)


@pytest.mark.asyncio
async def test_rejection_carries_server_message(api: EventGroupsClient, test_event):
    with pytest.raises(RejectedError) as excinfo:
        await api.create_group({
            "event_id": test_event.id,
            "creator_name": "Alice",
            "creator_email": "alice@example.com",
            "group_name": "Too Many",
            "members": [{"name": f"Member {i}"} for i in range(5)],
        })
    assert excinfo.value.status == 400
    assert "group size limit" in excinfo.value.message


@pytest.mark.asyncio
async def test_missing_event_raises_not_found(api: EventGroupsClient):
    with pytest.raises(NotFoundError) as excinfo:
        await api.get_event("missing-event")
    assert excinfo.value.message == "Event with ID missing-event not found"


@pytest.mark.asyncio
async def test_transport_failure():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with EventGroupsClient("http://test/api", transport=httpx.MockTransport(refuse)) as api:
        with pytest.raises(TransportError):
            await api.list_events()
