from datetime import datetime

from app.hrhub.core.error_catalog import bad_request, not_found
from app.hrhub.core.scope import TenantScope
from app.hrhub.db.models import GdprConsent, utcnow
from app.hrhub.repos.consents import ConsentRepository, list_expired_active_consents
from app.hrhub.repos.employees import EmployeeRepository


class ConsentService:
    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = ConsentRepository(db, scope)
        self.employees = EmployeeRepository(db, scope)

    def create(self, payload) -> GdprConsent:
        employee = self.employees.get(payload.employee_id)
        if employee is None:
            raise not_found("Employee not found")
        consent = GdprConsent(
            company_id=employee.company_id,
            employee_id=employee.id,
            purpose=payload.purpose,
            legal_basis=payload.legal_basis,
            status="ACTIVE",
            consented_at=utcnow(),
            expires_at=payload.expires_at,
        )
        self.db.add(consent)
        self.db.commit()
        return consent

    def revoke(self, consent_id, reason: str | None) -> GdprConsent:
        consent = self.repo.get(consent_id)
        if consent is None:
            raise not_found("Consent not found")
        if consent.status != "ACTIVE":
            raise bad_request(f"Consent is already {consent.status}")
        consent.status = "REVOKED"
        consent.revoked_at = utcnow()
        consent.revoke_reason = reason
        self.db.commit()
        return consent


def expire_due_consents(db, now: datetime | None = None) -> list[GdprConsent]:
    now = now or utcnow()
    expired = list_expired_active_consents(db, now)
    for consent in expired:
        consent.status = "EXPIRED"
    db.commit()
    return expired
