import json
import logging
from dataclasses import dataclass

from fastapi import BackgroundTasks, Request

from app.hrhub.core.context import Principal
from app.hrhub.core.logging import log_json
from app.hrhub.core.metrics import metrics
from app.hrhub.db import session as db_session
from app.hrhub.db.models import AuditLog, utcnow
from app.hrhub.repos.audit import AuditRepository
from app.hrhub.repos.base import as_uuid

logger = logging.getLogger("hrhub.audit")

UNKNOWN = "unknown"


@dataclass
class AuditEntry:
    action: str
    resource_type: str
    resource_id: str | None
    company_id: str | None
    actor_id: str | None
    changes: dict | None = None
    ip: str = UNKNOWN
    user_agent: str = UNKNOWN
    trace_id: str | None = None


def extract_request_meta(request: Request) -> tuple[str, str]:
    forwarded = request.headers.get("x-forwarded-for")
    ip = None
    if forwarded:
        ip = forwarded.split(",", 1)[0].strip() or None
    ip = ip or request.headers.get("x-real-ip") or UNKNOWN
    user_agent = request.headers.get("user-agent") or UNKNOWN
    return ip, user_agent


def build_audit_entry(
    request: Request,
    principal: Principal,
    *,
    action: str,
    resource_type: str,
    resource_id,
    company_id,
    changes: dict | None = None,
) -> AuditEntry:
    ip, user_agent = extract_request_meta(request)
    return AuditEntry(
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        company_id=str(company_id) if company_id is not None else None,
        actor_id=principal.employee_id or principal.user_id,
        changes=changes,
        ip=ip,
        user_agent=user_agent,
        trace_id=getattr(request.state, "trace_id", None),
    )


def _json_changes(changes: dict | None) -> dict | None:
    if changes is None:
        return None
    return json.loads(json.dumps(changes, default=str))


def _to_row(entry: AuditEntry) -> AuditLog:
    return AuditLog(
        company_id=as_uuid(entry.company_id),
        actor_id=as_uuid(entry.actor_id),
        action=entry.action,
        resource_type=entry.resource_type,
        resource_id=entry.resource_id,
        changes=_json_changes(entry.changes),
        ip_address=entry.ip,
        user_agent=entry.user_agent[:500] if entry.user_agent else None,
        trace_id=entry.trace_id,
        created_at=utcnow(),
    )


def write_audit_entry(entry: AuditEntry) -> None:
    """Persist one entry on its own session; failures are logged, not raised."""
    db = db_session.SessionLocal()
    try:
        AuditRepository(db).create(_to_row(entry))
    except Exception as exc:
        db.rollback()
        metrics.increment_audit_failure()
        log_json(
            logger,
            {
                "event": "audit_write_failed",
                "action": entry.action,
                "resource_type": entry.resource_type,
                "resource_id": entry.resource_id,
                "company_id": entry.company_id,
                "trace_id": entry.trace_id,
                "error_class": exc.__class__.__name__,
            },
            level=logging.ERROR,
        )
    finally:
        db.close()


class AuditSink:
    """Audit writer bound to one request.

    ``log`` defers the write until after the response has been sent;
    ``log_sync`` stages the row in the caller's transaction.
    """

    def __init__(self, background_tasks: BackgroundTasks):
        self.background_tasks = background_tasks

    def log(self, entry: AuditEntry) -> None:
        self.background_tasks.add_task(write_audit_entry, entry)

    def log_sync(self, db, entry: AuditEntry) -> AuditLog:
        return AuditRepository(db).add(_to_row(entry))


def get_audit_sink(background_tasks: BackgroundTasks) -> AuditSink:
    return AuditSink(background_tasks)
