"""
Tests for the typed-name confirmation before deleting a group.
"""

from datetime import datetime, timezone

import pytest

from eventgroups.client.errors import ApiError
from eventgroups.schemas.group import GroupResponse
from eventgroups.web.dialogs import DeleteGroupDialog

GROUP = GroupResponse(
    id=7,
    event_id="evt-1",
    creator_name="Alice",
    creator_email="alice@example.com",
    group_name="Team Alpha",
    accepts_others=False,
    project_description=None,
    created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
)


def test_confirm_requires_exact_name():
    dialog = DeleteGroupDialog(GROUP)
    dialog.open()
    assert not dialog.can_confirm

    dialog.set_confirm_text("team alpha")
    assert not dialog.can_confirm

    dialog.set_confirm_text("Team Alpha ")
    assert not dialog.can_confirm

    dialog.set_confirm_text("Team Alpha")
    assert dialog.can_confirm


def test_open_resets_state():
    dialog = DeleteGroupDialog(GROUP)
    dialog.set_confirm_text("Team Alpha")
    dialog.error = "previous failure"
    dialog.open()
    assert dialog.is_open
    assert dialog.confirm_text == ""
    assert dialog.error is None


@pytest.mark.asyncio
async def test_confirm_with_wrong_name_does_nothing():
    calls = []

    async def on_confirm():
        calls.append(True)

    dialog = DeleteGroupDialog(GROUP)
    dialog.open()
    dialog.set_confirm_text("Team")
    assert not await dialog.confirm(on_confirm)
    assert calls == []
    assert dialog.is_open


@pytest.mark.asyncio
async def test_confirm_deletes_and_closes():
    calls = []

    async def on_confirm():
        calls.append(True)

    dialog = DeleteGroupDialog(GROUP)
    dialog.open()
    dialog.set_confirm_text("Team Alpha")
    assert await dialog.confirm(on_confirm)
    assert calls == [True]
    assert not dialog.is_open
    assert not dialog.is_deleting


@pytest.mark.asyncio
async def test_failed_delete_stays_open_with_error():
    async def on_confirm():
        raise ApiError("Internal server error", 500)

    dialog = DeleteGroupDialog(GROUP)
    dialog.open()
    dialog.set_confirm_text("Team Alpha")
    assert not await dialog.confirm(on_confirm)
    assert dialog.is_open
    assert dialog.error == "Internal server error"
    assert dialog.can_confirm
