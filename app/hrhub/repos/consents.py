from datetime import datetime

from sqlalchemy import select

from app.hrhub.db.models import GdprConsent
from app.hrhub.repos.base import ScopedRepository, as_uuid


class ConsentRepository(ScopedRepository):
    model = GdprConsent

    def list_consents(
        self,
        *,
        employee_id=None,
        purpose: str | None = None,
        status: str | None = None,
        offset: int,
        limit: int,
    ):
        stmt = self.select_scoped()
        if employee_id is not None:
            stmt = stmt.where(GdprConsent.employee_id == as_uuid(employee_id))
        if purpose:
            stmt = stmt.where(GdprConsent.purpose == purpose)
        if status:
            stmt = stmt.where(GdprConsent.status == status)
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(GdprConsent.created_at.desc(), GdprConsent.id.desc()),
        )


def list_expired_active_consents(db, now: datetime):
    """Cross-company sweep used by the scheduler only."""
    stmt = select(GdprConsent).where(
        GdprConsent.status == "ACTIVE",
        GdprConsent.expires_at.is_not(None),
        GdprConsent.expires_at <= now,
    )
    return db.execute(stmt).scalars().all()
