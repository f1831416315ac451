"""
Tests for the server-rendered pages, end to end through the in-process API.
"""

import pytest
from httpx import AsyncClient


def group_form_data(size: int = 1, **overrides) -> dict:
    data = {
        "creator_name": "Alice",
        "creator_email": "alice@example.com",
        "group_name": "Team Alpha",
        "project_description": "",
        "action": "submit",
    }
    for i in range(size):
        data[f"members-{i}-name"] = f"Member {i + 1}"
        data[f"members-{i}-email"] = ""
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_landing_lists_events(client: AsyncClient, test_event):
    response = await client.get("/")
    assert response.status_code == 200
    assert "Hack Night" in response.text
    assert f"/event/{test_event.id}" in response.text


@pytest.mark.asyncio
async def test_create_event_form_defaults(client: AsyncClient):
    response = await client.get("/create")
    assert response.status_code == 200
    assert 'name="group_size_limit" type="number" value="5"' in response.text
    assert 'name="max_participants" type="number" value="50"' in response.text


@pytest.mark.asyncio
async def test_create_event_redirects_to_event(client: AsyncClient):
    response = await client.post("/create", data={
        "name": "Robotics Day",
        "date_time": "2026-11-01T18:30",
        "location": "Lab 3",
        "group_size_limit": "4",
        "max_participants": "12",
    })
    assert response.status_code == 303
    location = response.headers["location"]
    assert location.startswith("/event/")

    page = await client.get(location)
    assert page.status_code == 200
    assert "Robotics Day" in page.text
    assert "0 / 12 participants" in page.text


@pytest.mark.asyncio
async def test_create_event_invalid_rerenders(client: AsyncClient):
    response = await client.post("/create", data={
        "name": "Robotics Day",
        "date_time": "",
        "location": "Lab 3",
        "group_size_limit": "4",
        "max_participants": "12",
    })
    assert response.status_code == 200
    assert "Please enter a valid date and time" in response.text
    assert 'value="Robotics Day"' in response.text


@pytest.mark.asyncio
async def test_event_page(client: AsyncClient, test_event, make_group):
    await make_group(test_event, size=2, group_name="Robot Builders")

    response = await client.get(f"/event/{test_event.id}")
    assert response.status_code == 200
    assert "2 / 10 participants" in response.text
    assert "Robot Builders" in response.text
    assert f'href="/event/{test_event.id}/register"' in response.text


@pytest.mark.asyncio
async def test_event_page_no_groups(client: AsyncClient, test_event):
    response = await client.get(f"/event/{test_event.id}")
    assert 'id="no-groups"' in response.text


@pytest.mark.asyncio
async def test_event_page_filters(client: AsyncClient, test_event, make_group):
    await make_group(test_event, size=1, group_name="Robot Builders", accepts_others=True)
    await make_group(test_event, size=1, group_name="Data Wranglers")

    response = await client.get(f"/event/{test_event.id}", params={"status": "open"})
    assert "Robot Builders" in response.text
    assert "Data Wranglers" not in response.text

    response = await client.get(f"/event/{test_event.id}", params={"q": "zzz"})
    assert 'id="no-matches"' in response.text


@pytest.mark.asyncio
async def test_event_page_full_event_disables_register(client: AsyncClient, small_event, make_group):
    await make_group(small_event, size=2)

    response = await client.get(f"/event/{small_event.id}")
    assert '<button id="register-group" type="button" disabled>' in response.text
    assert f'href="/event/{small_event.id}/register"' not in response.text


@pytest.mark.asyncio
async def test_event_page_not_found(client: AsyncClient):
    response = await client.get("/event/missing-event")
    assert response.status_code == 404
    assert "Event not found" in response.text


@pytest.mark.asyncio
async def test_register_group_page(client: AsyncClient, test_event):
    response = await client.get(f"/event/{test_event.id}/register")
    assert response.status_code == 200
    assert "1 / 3 members" in response.text
    assert 'name="members-0-name"' in response.text
    assert "Register Group" in response.text


@pytest.mark.asyncio
async def test_register_add_member_row(client: AsyncClient, test_event):
    """The add button re-renders with one more row and keeps what was typed."""
    response = await client.post(
        f"/event/{test_event.id}/register",
        data=group_form_data(size=1, action="add_member"),
    )
    assert response.status_code == 200
    assert 'name="members-1-name"' in response.text
    assert 'value="Team Alpha"' in response.text


@pytest.mark.asyncio
async def test_register_group_submit(client: AsyncClient, test_event):
    response = await client.post(f"/event/{test_event.id}/register", data=group_form_data(size=2))
    assert response.status_code == 303
    assert response.headers["location"] == f"/event/{test_event.id}"

    page = await client.get(f"/event/{test_event.id}")
    assert "2 / 10 participants" in page.text
    assert "Team Alpha" in page.text


@pytest.mark.asyncio
async def test_register_group_validation_errors(client: AsyncClient, test_event):
    response = await client.post(
        f"/event/{test_event.id}/register",
        data=group_form_data(size=1, creator_email="not-an-email"),
    )
    assert response.status_code == 200
    assert "Please enter a valid email address" in response.text


@pytest.mark.asyncio
async def test_register_group_participant_limit_hint(client: AsyncClient, small_event, make_group):
    """A capacity rejection shows its hint and keeps the typed values."""
    await make_group(small_event, size=1, group_name="Early Birds")

    response = await client.post(
        f"/event/{small_event.id}/register",
        data=group_form_data(size=2, group_name="Latecomers"),
    )
    assert response.status_code == 200
    assert 'id="submit-error"' in response.text
    assert 'id="hint-participant-limit"' in response.text
    assert "maximum participant limit" in response.text
    assert 'value="Latecomers"' in response.text
    assert 'value="Member 2"' in response.text


@pytest.mark.asyncio
async def test_register_unknown_event(client: AsyncClient):
    response = await client.get("/event/missing-event/register")
    assert response.status_code == 404
    assert "Event not found" in response.text


@pytest.mark.asyncio
async def test_edit_without_group_id(client: AsyncClient, test_event):
    response = await client.get(f"/event/{test_event.id}/edit")
    assert response.status_code == 400
    assert "No group ID provided" in response.text


@pytest.mark.asyncio
async def test_edit_unknown_group(client: AsyncClient, test_event):
    response = await client.get(f"/event/{test_event.id}/edit", params={"groupId": 999})
    assert response.status_code == 404
    assert "Failed to load group or event data" in response.text


@pytest.mark.asyncio
async def test_edit_group(client: AsyncClient, test_event, make_group):
    group = await make_group(test_event, size=2)

    response = await client.get(f"/event/{test_event.id}/edit", params={"groupId": group.id})
    assert response.status_code == 200
    assert "Update Group" in response.text
    assert 'value="Member 2"' in response.text

    response = await client.post(
        f"/event/{test_event.id}/edit",
        params={"groupId": group.id},
        data=group_form_data(size=3, group_name="Team Omega"),
    )
    assert response.status_code == 303

    updated = (await client.get(f"/api/groups/{group.id}")).json()
    assert updated["group_name"] == "Team Omega"
    assert len(updated["members"]) == 3


@pytest.mark.asyncio
async def test_delete_group_requires_exact_name(client: AsyncClient, test_event, make_group):
    group = await make_group(test_event, size=2)
    url = f"/event/{test_event.id}/delete"

    response = await client.get(url, params={"groupId": group.id})
    assert response.status_code == 200
    assert 'id="confirm-delete" type="submit" disabled' in response.text

    response = await client.post(url, params={"groupId": group.id}, data={"confirm_text": "team alpha"})
    assert response.status_code == 200
    assert "Type the exact group name to confirm." in response.text
    assert (await client.get(f"/api/groups/{group.id}")).status_code == 200

    response = await client.post(url, params={"groupId": group.id}, data={"confirm_text": "Team Alpha"})
    assert response.status_code == 303
    assert (await client.get(f"/api/groups/{group.id}")).status_code == 404


@pytest.mark.asyncio
async def test_group_form_default_button_submits(client: AsyncClient, test_event):
    """The first action button in the form is submit, so Enter never edits the roster."""
    response = await client.post(
        f"/event/{test_event.id}/register",
        data=group_form_data(size=1, action="add_member"),
    )
    html = response.text
    form_html = html[html.index("<form"):]
    first_action = form_html.index('name="action"')
    assert form_html[first_action:].startswith('name="action" value="submit"')
    assert form_html.index('value="submit"') < form_html.index('value="remove_member:0"')
    assert form_html.index('value="submit"') < form_html.index('value="add_member"')


@pytest.mark.asyncio
async def test_delete_group_of_another_event(client: AsyncClient, test_event, small_event, make_group):
    """A group id from a different event is refused and left in place."""
    other = await make_group(small_event, size=1, group_name="Victim")
    url = f"/event/{test_event.id}/delete"

    response = await client.get(url, params={"groupId": other.id})
    assert response.status_code == 404
    assert "Group not found" in response.text

    response = await client.post(url, params={"groupId": other.id}, data={"confirm_text": "Victim"})
    assert response.status_code == 404
    assert "Group not found" in response.text
    assert (await client.get(f"/api/groups/{other.id}")).status_code == 200
