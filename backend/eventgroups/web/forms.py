"""
Form validation and form state for the web views.

The `*Values` models are the declarative rules a form must satisfy before
anything is sent to the API. `GroupForm` and `EventForm` hold what the user
typed between requests, so a failed submit re-renders with every value
intact.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Awaitable, Callable, Mapping, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, BeforeValidator, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from eventgroups.client.errors import ApiError
from eventgroups.core.logging import get_logger
from eventgroups.schemas.event import EventResponse
from eventgroups.schemas.group import GroupWithMembersResponse

logger = get_logger(__name__)


# Rules

def length_rule(minimum: Optional[int], maximum: int, too_short: str, too_long: str) -> AfterValidator:
    def check(value: str) -> str:
        if minimum is not None and len(value) < minimum:
            raise PydanticCustomError("too_short", too_short)
        if len(value) > maximum:
            raise PydanticCustomError("too_long", too_long)
        return value
    return AfterValidator(check)


def range_rule(minimum: int, maximum: int, label: str) -> AfterValidator:
    def check(value: int) -> int:
        if value < minimum:
            raise PydanticCustomError("too_small", f"{label} must be at least {minimum}")
        if value > maximum:
            raise PydanticCustomError("too_large", f"{label} must be at most {maximum}")
        return value
    return AfterValidator(check)


def whole_number(label: str) -> BeforeValidator:
    def coerce(value: Any) -> int:
        if isinstance(value, bool):
            raise PydanticCustomError("not_a_number", f"{label} must be a number")
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise PydanticCustomError("not_a_number", f"{label} must be a number")
    return BeforeValidator(coerce)


def _check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("email", "Please enter a valid email address")
    return value


def _optional_email(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    return _check_email(value)


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > 500:
        raise PydanticCustomError("too_long", "Project description must be at most 500 characters long")
    return value


PersonName = Annotated[str, length_rule(
    2, 100,
    "Name must be at least 2 characters long",
    "Name must be at most 100 characters long",
)]
Email = Annotated[str, AfterValidator(_check_email)]
OptionalEmail = Annotated[Optional[str], AfterValidator(_optional_email)]


class EventFormValues(BaseModel):
    name: Annotated[str, length_rule(
        3, 100,
        "Event name must be at least 3 characters long",
        "Event name must be at most 100 characters long",
    )]
    date_time: datetime
    group_size_limit: Annotated[int, whole_number("Group size limit"), range_rule(1, 100, "Group size limit")]
    max_participants: Annotated[int, whole_number("Maximum participants"), range_rule(1, 1000, "Maximum participants")]
    location: Annotated[str, length_rule(
        3, 200,
        "Location must be at least 3 characters long",
        "Location must be at most 200 characters long",
    )]

    @field_validator("date_time", mode="before")
    @classmethod
    def parse_date_time(cls, value: Any) -> datetime:
        """Accept ISO 8601 (as sent by datetime-local inputs); naive values are UTC."""
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
            except ValueError:
                raise PydanticCustomError("date_time", "Please enter a valid date and time")
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)


class GroupMemberValues(BaseModel):
    name: PersonName
    email: OptionalEmail = None


class GroupFormValues(BaseModel):
    creator_name: PersonName
    creator_email: Email
    group_name: Annotated[str, length_rule(
        2, 100,
        "Group name must be at least 2 characters long",
        "Group name must be at most 100 characters long",
    )]
    accepts_others: bool = False
    project_description: Annotated[Optional[str], AfterValidator(_check_description)] = None
    members: list[GroupMemberValues] = []


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a ValidationError to {"members.0.name": "message"}; first error per field wins."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"])
        errors.setdefault(path or "__all__", err["msg"])
    return errors


# Server rejections

class RejectionHint(str, Enum):
    PARTICIPANT_LIMIT = "participant_limit"
    GROUP_SIZE_LIMIT = "group_size_limit"
    GENERIC = "generic"


def classify_rejection(message: str) -> RejectionHint:
    """Pick the remediation hint for a server error message."""
    text = (message or "").lower()
    if "maximum participant limit" in text:
        return RejectionHint.PARTICIPANT_LIMIT
    if "group size limit" in text:
        return RejectionHint.GROUP_SIZE_LIMIT
    return RejectionHint.GENERIC


# Group form

@dataclass
class MemberRow:
    name: str = ""
    email: str = ""


GroupSubmitHandler = Callable[[GroupFormValues], Awaitable[Any]]


def _is_checked(value: Any) -> bool:
    return str(value).lower() in ("on", "true", "1", "yes")


class GroupForm:
    """
    Editable roster for one group: contact fields plus 1..group_size_limit
    member rows.
    """

    def __init__(
        self,
        event: EventResponse,
        existing_group: Optional[GroupWithMembersResponse] = None,
    ):
        self.event = event
        self.existing_group = existing_group
        self.errors: dict[str, str] = {}
        self.rejection: Optional[str] = None
        self.rejection_hint: Optional[RejectionHint] = None
        self.is_submitting = False

        if existing_group:
            self.creator_name = existing_group.creator_name
            self.creator_email = existing_group.creator_email
            self.group_name = existing_group.group_name
            self.accepts_others = existing_group.accepts_others
            self.project_description = existing_group.project_description or ""
            rows = [MemberRow(m.name, m.email or "") for m in existing_group.members]
        else:
            self.creator_name = ""
            self.creator_email = ""
            self.group_name = ""
            self.accepts_others = False
            self.project_description = ""
            rows = []
        self.members = self._clamp(rows)

    @classmethod
    def from_form_data(
        cls,
        event: EventResponse,
        data: Mapping[str, Any],
        existing_group: Optional[GroupWithMembersResponse] = None,
    ) -> "GroupForm":
        """Rebuild form state from a posted HTML form (`members-<i>-name` rows)."""
        form = cls(event, existing_group)
        form.creator_name = str(data.get("creator_name", ""))
        form.creator_email = str(data.get("creator_email", ""))
        form.group_name = str(data.get("group_name", ""))
        form.project_description = str(data.get("project_description", ""))
        form.accepts_others = _is_checked(data.get("accepts_others", ""))

        indices = set()
        for key in data.keys():
            parts = key.split("-")
            if len(parts) == 3 and parts[0] == "members" and parts[1].isdigit():
                indices.add(int(parts[1]))
        rows = [
            MemberRow(
                str(data.get(f"members-{i}-name", "")),
                str(data.get(f"members-{i}-email", "")),
            )
            for i in sorted(indices)
        ]
        form.members = form._clamp(rows)
        return form

    @property
    def group_size_limit(self) -> int:
        return self.event.group_size_limit

    @property
    def is_edit(self) -> bool:
        return self.existing_group is not None

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def can_add_member(self) -> bool:
        return self.member_count < self.group_size_limit

    @property
    def can_remove_member(self) -> bool:
        return self.member_count > 1

    def _clamp(self, rows: list[MemberRow]) -> list[MemberRow]:
        rows = rows[: max(self.group_size_limit, 1)]
        return rows or [MemberRow()]

    def add_member(self) -> bool:
        if not self.can_add_member:
            return False
        self.members.append(MemberRow())
        return True

    def remove_member(self, index: int) -> bool:
        if not self.can_remove_member or not 0 <= index < self.member_count:
            return False
        del self.members[index]
        return True

    def apply_action(self, action: str) -> bool:
        """
        Handle a non-submit button. Returns True if the action was a roster
        edit, False if it should be treated as a submit.
        """
        if action == "add_member":
            self.add_member()
            return True
        if action.startswith("remove_member:"):
            index = action.partition(":")[2]
            if index.isdigit():
                self.remove_member(int(index))
            return True
        return False

    def raw_values(self) -> dict:
        return {
            "creator_name": self.creator_name,
            "creator_email": self.creator_email,
            "group_name": self.group_name,
            "accepts_others": self.accepts_others,
            "project_description": self.project_description or None,
            "members": [{"name": m.name, "email": m.email} for m in self.members],
        }

    def validate(self) -> Optional[GroupFormValues]:
        try:
            values = GroupFormValues.model_validate(self.raw_values())
        except ValidationError as e:
            self.errors = field_errors(e)
            return None
        self.errors = {}
        return values

    async def submit(self, handler: GroupSubmitHandler) -> bool:
        """
        Validate and hand the values to `handler`. Server rejections are kept
        on the form along with the hint that matches them; nothing is retried
        and no field is cleared.
        """
        self.rejection = None
        self.rejection_hint = None

        values = self.validate()
        if values is None:
            logger.info("group_form_invalid", event_id=self.event.id, fields=sorted(self.errors))
            return False

        self.is_submitting = True
        try:
            await handler(values)
        except ApiError as e:
            self.rejection = e.message
            self.rejection_hint = classify_rejection(e.message)
            logger.warning(
                "group_submit_failed",
                event_id=self.event.id,
                group_id=self.existing_group.id if self.existing_group else None,
                status_code=e.status,
                hint=self.rejection_hint.value,
                message=e.message,
            )
            return False
        finally:
            self.is_submitting = False
        return True


# Event form

EventSubmitHandler = Callable[[EventFormValues], Awaitable[Any]]


class EventForm:
    defaults = {
        "name": "",
        "date_time": "",
        "location": "",
        "group_size_limit": "5",
        "max_participants": "50",
    }

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        data = data or {}
        self.values = {key: str(data.get(key, default)) for key, default in self.defaults.items()}
        self.errors: dict[str, str] = {}
        self.failure: Optional[str] = None

    def validate(self) -> Optional[EventFormValues]:
        try:
            values = EventFormValues.model_validate(self.values)
        except ValidationError as e:
            self.errors = field_errors(e)
            return None
        self.errors = {}
        return values

    async def submit(self, handler: EventSubmitHandler) -> bool:
        self.failure = None
        values = self.validate()
        if values is None:
            return False
        try:
            await handler(values)
        except ApiError as e:
            self.failure = e.message
            logger.warning("event_create_failed", status_code=e.status, message=e.message)
            return False
        return True
