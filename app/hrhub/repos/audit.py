from datetime import datetime

from app.hrhub.db.models import AuditLog
from app.hrhub.repos.base import ScopedRepository, as_uuid


class AuditRepository:
    def __init__(self, db):
        self.db = db

    def add(self, entry: AuditLog) -> AuditLog:
        self.db.add(entry)
        return entry

    def create(self, entry: AuditLog) -> AuditLog:
        self.db.add(entry)
        self.db.commit()
        return entry


class AuditLogQueryRepository(ScopedRepository):
    model = AuditLog

    def list_logs(
        self,
        *,
        action: str | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        actor_id: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        offset: int,
        limit: int,
    ):
        stmt = self.select_scoped()
        if action:
            stmt = stmt.where(AuditLog.action == action)
        if resource_type:
            stmt = stmt.where(AuditLog.resource_type == resource_type)
        if resource_id:
            stmt = stmt.where(AuditLog.resource_id == resource_id)
        if actor_id:
            stmt = stmt.where(AuditLog.actor_id == as_uuid(actor_id))
        if created_from:
            stmt = stmt.where(AuditLog.created_at >= created_from)
        if created_to:
            stmt = stmt.where(AuditLog.created_at <= created_to)
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(AuditLog.created_at.desc(), AuditLog.id.desc()),
        )
