"""
Errors raised by the API client.

    ApiError            any failed call; carries `status` and `message`
    ├── TransportError  the request never got an HTTP response
    ├── NotFoundError   404, a missing event, group or member
    └── RejectedError   400/409/422, the server refused the payload
                        (validation or a capacity rule)
"""

from typing import Optional

import httpx


class ApiError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class TransportError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class RejectedError(ApiError):
    pass


REJECTION_STATUSES = {400, 409, 422}


def extract_message(response: httpx.Response) -> str:
    """Read `error.message` from the API's error envelope, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("detail"):
            return str(body["detail"])

    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


def error_from_response(response: httpx.Response) -> ApiError:
    message = extract_message(response)
    if response.status_code == 404:
        return NotFoundError(message, response.status_code)
    if response.status_code in REJECTION_STATUSES:
        return RejectedError(message, response.status_code)
    return ApiError(message, response.status_code)
