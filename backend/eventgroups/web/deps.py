"""
Dependencies shared by the page routes.
"""

from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator, Union

import httpx
import structlog
from fastapi import Request
from fastapi.templating import Jinja2Templates

from eventgroups.client.api import EventGroupsClient
from eventgroups.core.config import get_settings

# Host used for in-process API calls; never resolved over the network
LOCAL_API_HOST = "http://eventgroups.local"


def format_date(value: Union[str, datetime, None]) -> str:
    """Long human date, e.g. "Monday, October 19, 2026 at 06:30 PM"."""
    if value is None or value == "":
        return "Invalid date"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "Invalid date"
    return value.strftime("%A, %B %d, %Y at %I:%M %p")


templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["format_date"] = format_date


async def get_api_client(request: Request) -> AsyncGenerator[EventGroupsClient, None]:
    """
    Client for the REST API. A relative API_BASE_URL is served by this very
    application, so requests go through an in-process ASGI transport.
    """
    settings = get_settings()
    base_url = settings.API_BASE_URL
    transport = None
    if base_url.startswith("/"):
        transport = httpx.ASGITransport(app=request.app)
        base_url = f"{LOCAL_API_HOST}{base_url}"

    headers = {}
    # Carry the page request id into the API calls it triggers
    request_id = structlog.contextvars.get_contextvars().get("request_id")
    if request_id:
        headers["X-Request-ID"] = request_id

    async with EventGroupsClient(base_url, transport=transport, headers=headers) as client:
        yield client
