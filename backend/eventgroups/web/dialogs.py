"""
Confirmation gate for deleting a group: the user has to type the group's
exact name before the destructive action is enabled.
"""

from typing import Any, Awaitable, Callable, Optional

from eventgroups.client.errors import ApiError
from eventgroups.core.logging import get_logger
from eventgroups.schemas.group import GroupResponse

logger = get_logger(__name__)


class DeleteGroupDialog:
    def __init__(self, group: GroupResponse):
        self.group = group
        self.is_open = False
        self.is_deleting = False
        self.confirm_text = ""
        self.error: Optional[str] = None

    def open(self) -> None:
        self.is_open = True
        self.confirm_text = ""
        self.error = None

    def close(self) -> None:
        self.is_open = False

    def set_confirm_text(self, text: str) -> None:
        self.confirm_text = text

    @property
    def can_confirm(self) -> bool:
        return self.confirm_text == self.group.group_name and not self.is_deleting

    async def confirm(self, on_confirm: Callable[[], Awaitable[Any]]) -> bool:
        if not self.can_confirm:
            return False

        self.is_deleting = True
        self.error = None
        try:
            await on_confirm()
        except ApiError as e:
            self.error = e.message
            logger.warning(
                "group_delete_failed",
                group_id=self.group.id,
                status_code=e.status,
                message=e.message,
            )
            return False
        finally:
            self.is_deleting = False

        self.close()
        return True
