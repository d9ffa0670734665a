"""Unit tests for list parameter normalization and statement construction."""
from incident_tracker.models.incident import Incident, Severity, Status
from incident_tracker.query import MAX_PAGE_SIZE, IncidentPage, IncidentQuery


def test_defaults():
    query = IncidentQuery()
    assert query.page == 1
    assert query.page_size == 10
    assert query.offset == 0
    assert query.descending is True
    assert query.sort_column() is Incident.created_at
    assert query.conditions() == []


def test_page_and_size_are_normalized():
    query = IncidentQuery(page=-3, page_size=0)
    assert (query.page, query.page_size) == (1, 1)

    query = IncidentQuery(page=4, page_size=5000)
    assert (query.page, query.page_size) == (4, MAX_PAGE_SIZE)
    assert query.offset == 3 * MAX_PAGE_SIZE


def test_sort_column_resolution():
    assert IncidentQuery(sort_by="title").sort_column() is Incident.title
    assert IncidentQuery(sort_by="Service").sort_column() is Incident.service
    assert IncidentQuery(sort_by="SEVERITY").sort_column() is Incident.severity
    assert IncidentQuery(sort_by="status").sort_column() is Incident.status
    assert IncidentQuery(sort_by="updatedat").sort_column() is Incident.updated_at
    assert IncidentQuery(sort_by="owner").sort_column() is Incident.created_at
    assert IncidentQuery(sort_by=None).sort_column() is Incident.created_at


def test_sort_direction():
    assert IncidentQuery(sort_order="asc").descending is False
    assert IncidentQuery(sort_order="AsC").descending is False
    assert IncidentQuery(sort_order="desc").descending is True
    assert IncidentQuery(sort_order="up").descending is True
    assert IncidentQuery(sort_order=None).descending is True


def test_conditions_only_for_supplied_filters():
    assert len(IncidentQuery(search="  ", service="").conditions()) == 0
    assert len(IncidentQuery(search="db").conditions()) == 1
    query = IncidentQuery(
        search="db", service="DB", severity=Severity.SEV1, status=Status.OPEN
    )
    assert len(query.conditions()) == 4


def test_statement_applies_window():
    statement = IncidentQuery(page=2, page_size=20).statement()
    sql = str(statement.compile(compile_kwargs={"literal_binds": True}))
    assert "LIMIT 20" in sql
    assert "OFFSET 20" in sql
    assert "ORDER BY incidents.created_at DESC" in sql


def test_total_pages():
    assert IncidentPage(total_count=0, page_size=10).total_pages == 0
    assert IncidentPage(total_count=10, page_size=10).total_pages == 1
    assert IncidentPage(total_count=11, page_size=10).total_pages == 2
    assert IncidentPage(total_count=1, page_size=100).total_pages == 1


def test_timestamp_columns_are_timezone_aware():
    assert Incident.__table__.c.created_at.type.timezone is True
    assert Incident.__table__.c.updated_at.type.timezone is True


def test_page_maps_to_wire_envelope():
    from incident_tracker.schemas import to_page_response

    body = to_page_response(IncidentPage(page=3, page_size=5, total_count=11))
    assert body.model_dump(by_alias=True) == {
        "data": [], "page": 3, "pageSize": 5, "totalCount": 11, "totalPages": 3,
    }
