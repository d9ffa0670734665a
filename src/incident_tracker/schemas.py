from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from incident_tracker.models.incident import (
    OWNER_MAX_LENGTH,
    SERVICE_MAX_LENGTH,
    SUMMARY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Incident,
    Severity,
    Status,
)
from incident_tracker.query import IncidentPage

# Error type carried by every incident field rule; its message is shown to callers verbatim.
RULE_ERROR_TYPE = "incident_rule"


def rule_violation(message: str) -> PydanticCustomError:
    return PydanticCustomError(RULE_ERROR_TYPE, message)


def _required_text(v: Optional[str], label: str, max_length: int) -> str:
    if v is None or not v.strip():
        raise rule_violation(f"{label} is required")
    return _max_length(v, label, max_length)


def _max_length(v: Optional[str], label: str, max_length: int) -> Optional[str]:
    if v is not None and len(v) > max_length:
        raise rule_violation(f"{label} must not exceed {max_length} characters")
    return v


def _member(v: Any, enum_cls: type, invalid_message: str, required_message: str | None = None):
    if v is None:
        if required_message:
            raise rule_violation(required_message)
        return None
    if isinstance(v, enum_cls):
        return v
    try:
        return enum_cls(v)
    except ValueError:
        raise rule_violation(invalid_message) from None


# --- Request Schemas ---

class IncidentCreate(BaseModel):
    # Required fields default to None so a missing field reports its own rule message.
    title: Optional[str] = Field(default=None, validate_default=True)
    service: Optional[str] = Field(default=None, validate_default=True)
    severity: Optional[Severity] = Field(default=None, validate_default=True)
    status: Optional[Status] = Field(default=None, validate_default=True)
    owner: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_valid(cls, v: Optional[str]) -> str:
        return _required_text(v, "Title", TITLE_MAX_LENGTH)

    @field_validator("service")
    @classmethod
    def service_valid(cls, v: Optional[str]) -> str:
        return _required_text(v, "Service", SERVICE_MAX_LENGTH)

    @field_validator("severity", mode="before")
    @classmethod
    def severity_valid(cls, v: Any) -> Severity:
        return _member(v, Severity, "Invalid severity level", "Severity is required")

    @field_validator("status", mode="before")
    @classmethod
    def status_valid(cls, v: Any) -> Status:
        return _member(v, Status, "Invalid status", "Status is required")

    @field_validator("owner")
    @classmethod
    def owner_valid(cls, v: Optional[str]) -> Optional[str]:
        return _max_length(v, "Owner", OWNER_MAX_LENGTH)

    @field_validator("summary")
    @classmethod
    def summary_valid(cls, v: Optional[str]) -> Optional[str]:
        return _max_length(v, "Summary", SUMMARY_MAX_LENGTH)


class IncidentUpdate(BaseModel):
    """Partial update body.

    Every field is optional and only fields that are present get validated. JSON
    cannot tell an omitted field from one sent as null, so both are treated as
    "not provided"; an empty string is a provided value.
    """

    title: Optional[str] = None
    service: Optional[str] = None
    severity: Optional[Severity] = None
    status: Optional[Status] = None
    owner: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_valid(cls, v: Optional[str]) -> Optional[str]:
        return _max_length(v, "Title", TITLE_MAX_LENGTH)

    @field_validator("service")
    @classmethod
    def service_valid(cls, v: Optional[str]) -> Optional[str]:
        return _max_length(v, "Service", SERVICE_MAX_LENGTH)

    @field_validator("severity", mode="before")
    @classmethod
    def severity_valid(cls, v: Any) -> Optional[Severity]:
        return _member(v, Severity, "Invalid severity level")

    @field_validator("status", mode="before")
    @classmethod
    def status_valid(cls, v: Any) -> Optional[Status]:
        return _member(v, Status, "Invalid status")

    @field_validator("owner")
    @classmethod
    def owner_valid(cls, v: Optional[str]) -> Optional[str]:
        return _max_length(v, "Owner", OWNER_MAX_LENGTH)

    @field_validator("summary")
    @classmethod
    def summary_valid(cls, v: Optional[str]) -> Optional[str]:
        return _max_length(v, "Summary", SUMMARY_MAX_LENGTH)

    def provided_fields(self) -> dict[str, Any]:
        """Fields the caller supplied with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# --- Response Schemas ---

class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class IncidentResponse(CamelModel):
    id: str
    title: str
    service: str
    severity: Severity
    status: Status
    owner: Optional[str] = None
    summary: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class IncidentPageResponse(CamelModel):
    data: list[IncidentResponse]
    page: int
    page_size: int
    total_count: int
    total_pages: int


def to_incident_response(incident: Incident) -> IncidentResponse:
    return IncidentResponse.model_validate(incident)


def to_page_response(page: IncidentPage) -> IncidentPageResponse:
    return IncidentPageResponse(
        data=[to_incident_response(i) for i in page.items],
        page=page.page,
        page_size=page.page_size,
        total_count=page.total_count,
        total_pages=page.total_pages,
    )
