"""
Partial-update merge policy for incidents.

Each field of an update is in one of three states: omitted, provided empty, or
provided with a value. Explicit nulls arrive as omitted (see
``IncidentUpdate.provided_fields``). Required text fields only change on a
non-blank value, so they can never be cleared; optional text fields change on
any provided value, so an empty string clears them.
"""
import logging
from datetime import datetime

from incident_tracker.models.incident import Incident, utcnow
from incident_tracker.schemas import IncidentUpdate

logger = logging.getLogger("incidenttracker.merge")


class _Omitted:
    def __repr__(self) -> str:
        return "OMITTED"


OMITTED = _Omitted()

REQUIRED_TEXT_FIELDS = ("title", "service")
ENUM_FIELDS = ("severity", "status")
OPTIONAL_TEXT_FIELDS = ("owner", "summary")


def should_apply(field: str, value) -> bool:
    if value is OMITTED:
        return False
    if field in REQUIRED_TEXT_FIELDS:
        # Stored title/service must stay non-empty after trimming, so blank values never apply.
        return bool(value.strip())
    return True


def apply_incident_update(
    incident: Incident, update: IncidentUpdate, now: datetime | None = None
) -> Incident:
    """Merge ``update`` into ``incident`` in place and stamp ``updated_at``.

    ``updated_at`` is refreshed even when no field changes.
    """
    provided = update.provided_fields()
    applied = []
    for field in REQUIRED_TEXT_FIELDS + ENUM_FIELDS + OPTIONAL_TEXT_FIELDS:
        value = provided.get(field, OMITTED)
        if should_apply(field, value):
            setattr(incident, field, value)
            applied.append(field)

    incident.updated_at = now or utcnow()
    logger.debug(f"Merged incident {incident.id}: applied {applied or 'no fields'}")
    return incident
