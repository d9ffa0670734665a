from incident_tracker.models.incident import Incident, Severity, Status

__all__ = ["Incident", "Severity", "Status"]
