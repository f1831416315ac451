"""
Page routes. Each view fetches through the API client, renders, and after
a successful mutation redirects so the next page load refetches.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from eventgroups.client.api import EventGroupsClient
from eventgroups.client.errors import ApiError, NotFoundError
from eventgroups.core.logging import get_logger
from eventgroups.schemas.event import EventCreate
from eventgroups.schemas.group import GroupCreate, GroupUpdate
from eventgroups.web.deps import get_api_client, templates
from eventgroups.web.dialogs import DeleteGroupDialog
from eventgroups.web.forms import EventForm, EventFormValues, GroupForm, GroupFormValues
from eventgroups.web.views import EventView, StatusFilter

logger = get_logger(__name__)
router = APIRouter(tags=["Pages"], include_in_schema=False)


def render(request: Request, template: str, status_code: int = status.HTTP_200_OK, **context) -> HTMLResponse:
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def render_error(request: Request, message: str, event_id: Optional[str] = None, status_code: int = 404) -> HTMLResponse:
    return render(request, "error.html", status_code=status_code, message=message, event_id=event_id)


def redirect_to_event(event_id: str) -> RedirectResponse:
    return RedirectResponse(f"/event/{event_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse)
async def landing(request: Request, api: EventGroupsClient = Depends(get_api_client)):
    try:
        events = await api.list_events(limit=6)
    except ApiError as e:
        logger.error("landing_events_failed", message=e.message)
        events = []
    return render(request, "landing.html", events=events)


@router.get("/create", response_class=HTMLResponse)
async def create_event_page(request: Request):
    return render(request, "create_event.html", form=EventForm())


@router.post("/create", response_class=HTMLResponse)
async def create_event_submit(request: Request, api: EventGroupsClient = Depends(get_api_client)):
    form = EventForm(await request.form())
    created = {}

    async def handler(values: EventFormValues) -> None:
        created["event"] = await api.create_event(EventCreate(**values.model_dump()))

    if await form.submit(handler):
        return redirect_to_event(created["event"].id)
    return render(request, "create_event.html", form=form)


@router.get("/event/{event_id}", response_class=HTMLResponse)
async def event_page(
    request: Request,
    event_id: str,
    q: str = "",
    status_filter: str = Query(StatusFilter.ALL.value, alias="status"),
    view: str = "list",
    api: EventGroupsClient = Depends(get_api_client),
):
    try:
        page = await EventView.load(api, event_id, search_query=q, status_filter=status_filter, view_mode=view)
    except NotFoundError:
        return render_error(request, "Event not found")
    except ApiError as e:
        logger.error("event_page_failed", event_id=event_id, message=e.message)
        return render_error(request, "Failed to load event data", status_code=status.HTTP_502_BAD_GATEWAY)
    return render(request, "event.html", view=page, event=page.event)


async def _group_form_page(
    request: Request,
    api: EventGroupsClient,
    event_id: str,
    group_id: Optional[int] = None,
) -> HTMLResponse:
    """Shared GET/POST handling for the register and edit pages."""
    is_edit = request.url.path.endswith("/edit")
    if is_edit and group_id is None:
        return render_error(request, "No group ID provided", event_id=event_id, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        event = await api.get_event(event_id)
        group = await api.get_group(group_id) if is_edit else None
    except ApiError as e:
        logger.error("group_form_load_failed", event_id=event_id, group_id=group_id, message=e.message)
        if is_edit:
            return render_error(request, "Failed to load group or event data", event_id=event_id)
        if isinstance(e, NotFoundError):
            return render_error(request, "Event not found")
        return render_error(request, "Failed to load event data", status_code=status.HTTP_502_BAD_GATEWAY)

    if group is not None and group.event_id != event.id:
        return render_error(request, "Failed to load group or event data", event_id=event_id)

    if request.method == "GET":
        return render(request, "group_form.html", form=GroupForm(event, group), event=event)

    data = await request.form()
    form = GroupForm.from_form_data(event, data, group)
    if form.apply_action(str(data.get("action", "submit"))):
        return render(request, "group_form.html", form=form, event=event)

    async def handler(values: GroupFormValues) -> None:
        if group is None:
            await api.create_group(GroupCreate(event_id=event_id, **values.model_dump()))
        else:
            await api.update_group(group.id, GroupUpdate(**values.model_dump()))

    if await form.submit(handler):
        return redirect_to_event(event_id)
    return render(request, "group_form.html", form=form, event=event)


@router.api_route("/event/{event_id}/register", methods=["GET", "POST"], response_class=HTMLResponse)
async def register_group_page(
    request: Request,
    event_id: str,
    api: EventGroupsClient = Depends(get_api_client),
):
    return await _group_form_page(request, api, event_id)


@router.api_route("/event/{event_id}/edit", methods=["GET", "POST"], response_class=HTMLResponse)
async def edit_group_page(
    request: Request,
    event_id: str,
    group_id: Optional[int] = Query(None, alias="groupId"),
    api: EventGroupsClient = Depends(get_api_client),
):
    return await _group_form_page(request, api, event_id, group_id)


@router.api_route("/event/{event_id}/delete", methods=["GET", "POST"], response_class=HTMLResponse)
async def delete_group_page(
    request: Request,
    event_id: str,
    group_id: Optional[int] = Query(None, alias="groupId"),
    api: EventGroupsClient = Depends(get_api_client),
):
    if group_id is None:
        return render_error(request, "No group ID provided", event_id=event_id, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        group = await api.get_group(group_id)
    except ApiError as e:
        logger.error("delete_dialog_load_failed", group_id=group_id, message=e.message)
        return render_error(request, "Group not found", event_id=event_id)

    if group.event_id != event_id:
        logger.warning("delete_dialog_event_mismatch", group_id=group_id, event_id=event_id)
        return render_error(request, "Group not found", event_id=event_id)

    dialog = DeleteGroupDialog(group)
    dialog.open()
    if request.method == "GET":
        return render(request, "delete_group.html", dialog=dialog, event_id=event_id)

    data = await request.form()
    dialog.set_confirm_text(str(data.get("confirm_text", "")))
    if await dialog.confirm(lambda: api.delete_group(group.id)):
        return redirect_to_event(event_id)
    if dialog.error is None:
        dialog.error = "Type the exact group name to confirm."
    return render(request, "delete_group.html", dialog=dialog, event_id=event_id)
