import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column

from incident_tracker.database import Base

TITLE_MAX_LENGTH = 200
SERVICE_MAX_LENGTH = 100
OWNER_MAX_LENGTH = 100
SUMMARY_MAX_LENGTH = 2000


class Severity(str, enum.Enum):
    """Criticality tier, SEV1 being the most severe."""

    SEV1 = "SEV1"
    SEV2 = "SEV2"
    SEV3 = "SEV3"
    SEV4 = "SEV4"


class Status(str, enum.Enum):
    OPEN = "OPEN"
    MITIGATED = "MITIGATED"
    RESOLVED = "RESOLVED"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Incident(Base):
    __tablename__ = "incidents"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    service: Mapped[str] = mapped_column(String(SERVICE_MAX_LENGTH), nullable=False, index=True)
    # Stored by name so that ordering on the column follows SEV1 < SEV2 < ...
    severity: Mapped[Severity] = mapped_column(
        Enum(Severity, native_enum=False, length=10), nullable=False, index=True
    )
    status: Mapped[Status] = mapped_column(
        Enum(Status, native_enum=False, length=20), nullable=False, index=True
    )
    owner: Mapped[str | None] = mapped_column(String(OWNER_MAX_LENGTH), nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
