from eventgroups.client.api import EventGroupsClient
from eventgroups.client.errors import ApiError, TransportError, NotFoundError, RejectedError

__all__ = ["EventGroupsClient", "ApiError", "TransportError", "NotFoundError", "RejectedError"]
