"""
Demo data seeder: fills an empty incident store with plausible random incidents.
"""
import logging
import random
import uuid
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from incident_tracker.models.incident import Incident, Severity, Status, utcnow

logger = logging.getLogger("incidenttracker.seeder")

SERVICES = [
    "Auth Service", "Payment Gateway", "User Service", "API Gateway",
    "Database Cluster", "Cache Layer", "Search Service", "Email Service",
    "Notification Service", "Analytics Engine", "CDN", "Load Balancer",
    "Message Queue", "Storage Service", "Logging Service",
]

TITLE_TEMPLATES = [
    "High latency detected in {service}",
    "{service} experiencing connection timeouts",
    "Database deadlock in {service}",
    "Memory leak detected in {service}",
    "{service} returning 5xx errors",
    "Service degradation in {service}",
    "API rate limit exceeded for {service}",
    "Disk space critical on {service}",
    "Network connectivity issues with {service}",
    "Configuration error in {service}",
    "Security vulnerability found in {service}",
    "Data corruption detected in {service}",
    "Performance degradation on {service}",
    "{service} failed health check",
    "Deployment rollback needed for {service}",
]

# None entries leave some incidents without an owner.
OWNERS = [
    "John Doe", "Jane Smith", "Bob Johnson", "Alice Williams",
    "Charlie Brown", "Diana Prince", "Ethan Hunt", "Fiona Gallagher",
    None, None,
]

SUMMARY_TEMPLATES = [
    "Investigating {severity} incident affecting {service}. Initial diagnostics show elevated error rates.",
    "Multiple users reporting issues with {service}. Team is actively investigating root cause.",
    "Automated alerts triggered for {service}. Monitoring metrics indicate abnormal behavior.",
    "Production incident detected in {service}. Engineering team has been paged.",
    "Service degradation observed in {service}. Impact assessment in progress.",
    None,
]

HISTORY_DAYS = 90


def _pick_status(rng: random.Random) -> Status:
    roll = rng.random()
    if roll < 0.6:
        return Status.RESOLVED
    if roll < 0.8:
        return Status.MITIGATED
    return Status.OPEN


def build_incident(rng: random.Random, now=None) -> Incident:
    now = now or utcnow()
    service = rng.choice(SERVICES)
    severity = rng.choice(list(Severity))
    status = _pick_status(rng)
    summary = rng.choice(SUMMARY_TEMPLATES)
    created_at = now - timedelta(days=HISTORY_DAYS) + timedelta(days=rng.random() * HISTORY_DAYS)
    if status == Status.OPEN:
        updated_at = created_at
    else:
        updated_at = created_at + timedelta(hours=rng.random() * 48)

    return Incident(
        id=str(uuid.uuid4()),
        title=rng.choice(TITLE_TEMPLATES).format(service=service),
        service=service,
        severity=severity,
        status=status,
        owner=rng.choice(OWNERS),
        summary=summary.format(service=service, severity=severity.value) if summary else None,
        created_at=created_at,
        updated_at=updated_at,
    )


async def seed_incidents(
    session_factory: async_sessionmaker[AsyncSession],
    count: int = 200,
    rng: random.Random | None = None,
) -> int:
    """Insert ``count`` random incidents unless the store already has some."""
    rng = rng or random.Random()
    async with session_factory() as db:
        existing = await db.execute(select(func.count(Incident.id)))
        if existing.scalar():
            logger.info("Incident store already populated, skipping seed")
            return 0

        now = utcnow()
        db.add_all([build_incident(rng, now) for _ in range(count)])
        await db.commit()

    logger.info(f"Seeded {count} demo incident(s)")
    return count
