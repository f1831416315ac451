"""
Async client for the Event Groups REST API.

Wraps the event and group resources behind typed methods. Every call is a
single request: no caching, no retries. Failures surface as `ApiError`
subclasses so callers can show the server's message to the user.

    async with EventGroupsClient("http://localhost:3000/api") as api:
        event = await api.get_event(event_id)
        groups = await api.get_groups(event_id)
"""

from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel

from eventgroups.client.errors import TransportError, error_from_response
from eventgroups.core.logging import get_logger
from eventgroups.schemas.event import EventCreate, EventResponse, EventWithGroupsResponse
from eventgroups.schemas.group import GroupCreate, GroupUpdate, GroupWithMembersResponse

logger = get_logger(__name__)

Payload = Union[BaseModel, dict]


def _to_json(data: Payload, partial: bool = False) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_unset=partial)
    return data


class EventGroupsClient:
    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        headers: Optional[dict] = None,
    ):
        self.base_url = base_url.rstrip("/")
        kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "headers": {"Content-Type": "application/json", **(headers or {})},
            "transport": transport,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._http = httpx.AsyncClient(**kwargs)

    async def __aenter__(self) -> "EventGroupsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("api_transport_failed", method=method, path=path, error=str(e))
            raise TransportError(f"Could not reach the server: {e}") from e

        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                message=error.message,
            )
            raise error
        return response

    # Events

    async def create_event(self, event_data: Union[EventCreate, dict]) -> EventResponse:
        response = await self._request("POST", "/events", json=_to_json(event_data))
        return EventResponse.model_validate(response.json())

    async def get_event(self, event_id: str) -> EventWithGroupsResponse:
        response = await self._request("GET", f"/events/{event_id}")
        return EventWithGroupsResponse.model_validate(response.json())

    async def list_events(self, page: int = 1, limit: int = 10) -> list[EventResponse]:
        response = await self._request("GET", "/events", params={"page": page, "limit": limit})
        return [EventResponse.model_validate(item) for item in response.json()]

    # Groups

    async def get_groups(self, event_id: str) -> list[GroupWithMembersResponse]:
        response = await self._request("GET", f"/events/{event_id}/groups")
        return [GroupWithMembersResponse.model_validate(item) for item in response.json()]

    async def create_group(self, group_data: Union[GroupCreate, dict]) -> GroupWithMembersResponse:
        response = await self._request("POST", "/groups", json=_to_json(group_data))
        return GroupWithMembersResponse.model_validate(response.json())

    async def update_group(
        self,
        group_id: int,
        group_data: Union[GroupUpdate, dict],
    ) -> GroupWithMembersResponse:
        response = await self._request("PUT", f"/groups/{group_id}", json=_to_json(group_data, partial=True))
        return GroupWithMembersResponse.model_validate(response.json())

    async def get_group(self, group_id: int) -> GroupWithMembersResponse:
        response = await self._request("GET", f"/groups/{group_id}")
        return GroupWithMembersResponse.model_validate(response.json())

    async def delete_group(self, group_id: int) -> None:
        await self._request("DELETE", f"/groups/{group_id}")
