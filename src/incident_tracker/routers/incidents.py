import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from incident_tracker.database import get_db
from incident_tracker.errors import IncidentNotFoundError
from incident_tracker.merge import apply_incident_update
from incident_tracker.models.incident import Incident, Severity, Status, utcnow
from incident_tracker.query import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    IncidentQuery,
    fetch_incident_page,
)
from incident_tracker.schemas import (
    IncidentCreate,
    IncidentPageResponse,
    IncidentResponse,
    IncidentUpdate,
    to_incident_response,
    to_page_response,
)

logger = logging.getLogger("incidenttracker.incidents")

router = APIRouter(prefix="/api/incidents", tags=["incidents"])


async def _get_incident_or_404(db: AsyncSession, incident_id: str) -> Incident:
    incident = await db.get(Incident, incident_id)
    if incident is None:
        raise IncidentNotFoundError(incident_id)
    return incident


@router.post("", response_model=IncidentResponse, status_code=status.HTTP_201_CREATED)
async def create_incident(
    body: IncidentCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    incident = Incident(
        id=str(uuid.uuid4()),
        title=body.title,
        service=body.service,
        severity=body.severity,
        status=body.status,
        owner=body.owner,
        summary=body.summary,
        created_at=now,
        updated_at=now,
    )
    db.add(incident)
    await db.commit()
    await db.refresh(incident)

    logger.info(f"Created incident {incident.id}: {incident.title}")

    response.headers["Location"] = str(request.url_for("get_incident", incident_id=incident.id))
    return to_incident_response(incident)


@router.get("", response_model=IncidentPageResponse)
async def list_incidents(
    page: int = 1,
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    search: Optional[str] = None,
    service: Optional[str] = None,
    severity: Optional[Severity] = None,
    incident_status: Optional[Status] = Query(None, alias="status"),
    sort_by: str = Query(DEFAULT_SORT_BY, alias="sortBy"),
    sort_order: str = Query(DEFAULT_SORT_ORDER, alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    query = IncidentQuery(
        page=page,
        page_size=page_size,
        search=search,
        service=service,
        severity=severity,
        status=incident_status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    page_result = await fetch_incident_page(db, query)
    return to_page_response(page_result)


@router.get("/{incident_id}", response_model=IncidentResponse)
async def get_incident(
    incident_id: str,
    db: AsyncSession = Depends(get_db),
):
    incident = await _get_incident_or_404(db, incident_id)
    return to_incident_response(incident)


@router.patch("/{incident_id}", response_model=IncidentResponse)
async def update_incident(
    incident_id: str,
    body: IncidentUpdate,
    db: AsyncSession = Depends(get_db),
):
    incident = await _get_incident_or_404(db, incident_id)

    apply_incident_update(incident, body)
    await db.commit()
    await db.refresh(incident)

    logger.info(f"Updated incident {incident.id}")
    return to_incident_response(incident)
