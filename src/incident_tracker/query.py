"""
Incident list query engine: turns list parameters into a filtered, sorted and paged selection.
"""
import math
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from incident_tracker.models.incident import Incident, Severity, Status

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

# Keys are lower-cased sortBy values; anything else sorts by created_at.
SORT_COLUMNS = {
    "title": Incident.title,
    "service": Incident.service,
    "severity": Incident.severity,
    "status": Incident.status,
    "updatedat": Incident.updated_at,
}

SEARCH_COLUMNS = (Incident.title, Incident.service, Incident.owner, Incident.summary)


@dataclass
class IncidentQuery:
    """List parameters, normalized on construction."""

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    service: Optional[str] = None
    severity: Optional[Severity] = None
    status: Optional[Status] = None
    sort_by: Optional[str] = DEFAULT_SORT_BY
    sort_order: Optional[str] = DEFAULT_SORT_ORDER

    def __post_init__(self) -> None:
        self.page = max(1, self.page)
        self.page_size = min(max(self.page_size, 1), MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def descending(self) -> bool:
        return (self.sort_order or "").lower() != "asc"

    def sort_column(self):
        return SORT_COLUMNS.get((self.sort_by or "").lower(), Incident.created_at)

    def conditions(self) -> list:
        """Filter predicates; every one of them must hold for an incident to match."""
        conditions = []
        if self.search and self.search.strip():
            needle = self.search.lower()
            # lower(NULL) never matches, so unset owner/summary drop out of the OR.
            conditions.append(
                or_(*(func.lower(col).contains(needle, autoescape=True) for col in SEARCH_COLUMNS))
            )
        if self.service and self.service.strip():
            conditions.append(Incident.service == self.service)
        if self.severity is not None:
            conditions.append(Incident.severity == self.severity)
        if self.status is not None:
            conditions.append(Incident.status == self.status)
        return conditions

    def count_statement(self) -> Select:
        return select(func.count(Incident.id)).where(*self.conditions())

    def statement(self) -> Select:
        column = self.sort_column()
        # No secondary key: ties keep whatever order the store returns them in.
        return (
            select(Incident)
            .where(*self.conditions())
            .order_by(column.desc() if self.descending else column.asc())
            .offset(self.offset)
            .limit(self.page_size)
        )


@dataclass
class IncidentPage:
    items: list[Incident] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)


async def fetch_incident_page(db: AsyncSession, query: IncidentQuery) -> IncidentPage:
    """Count the filtered set, then load the requested window of it."""
    count_result = await db.execute(query.count_statement())
    total_count = count_result.scalar() or 0

    page = IncidentPage(page=query.page, page_size=query.page_size, total_count=total_count)
    # Past the last row: nothing to load, and the offset may not fit in an SQL integer.
    if query.offset >= total_count:
        return page

    result = await db.execute(query.statement())
    page.items = list(result.scalars().all())
    return page
