from sqlalchemy import select

import app.hrhub.services.audit as audit_service
from app.hrhub.core.metrics import metrics
from app.hrhub.db.models import AuditLog
from tests.hr_helpers import API, create_employee, login_as, seed_companies


def _setup(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-EU"], username="dpo", role="HR_ADMIN")
    employee = create_employee(db_session, companies["CTR-EU"], employee_no="EU-1")
    return headers, employee


def test_consent_create_list_and_revoke(client, db_session):
    headers, employee = _setup(client, db_session)

    created = client.post(
        f"{API}/compliance/gdpr/consents",
        headers=headers,
        json={"employee_id": str(employee.id), "purpose": "PAYROLL_PROCESSING", "legal_basis": "Art. 6(1)(b)"},
    )
    assert created.status_code == 201
    consent = created.json()["data"]
    assert consent["status"] == "ACTIVE"

    listing = client.get(f"{API}/compliance/gdpr/consents", headers=headers, params={"status": "ACTIVE"}).json()
    assert [row["id"] for row in listing["data"]] == [consent["id"]]

    revoked = client.put(
        f"{API}/compliance/gdpr/consents/{consent['id']}/revoke",
        headers=headers,
        json={"reason": "Employee request"},
    )
    assert revoked.status_code == 200
    body = revoked.json()["data"]
    assert body["status"] == "REVOKED"
    assert body["revoke_reason"] == "Employee request"
    assert body["revoked_at"] is not None

    again = client.put(f"{API}/compliance/gdpr/consents/{consent['id']}/revoke", headers=headers, json={})
    assert again.status_code == 400
    assert again.json()["error"]["message"] == "Consent is already REVOKED"

    actions = db_session.execute(select(AuditLog.action).order_by(AuditLog.created_at)).scalars().all()
    assert "gdpr.consent.create" in actions
    assert "gdpr.consent.revoke" in actions


def test_unknown_purpose_is_rejected(client, db_session):
    headers, employee = _setup(client, db_session)

    response = client.post(
        f"{API}/compliance/gdpr/consents",
        headers=headers,
        json={"employee_id": str(employee.id), "purpose": "ADVERTISING"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"]["issues"][0]["field"] == "purpose"


def test_consent_for_other_company_employee_is_not_found(client, db_session):
    headers, _ = _setup(client, db_session)
    companies = seed_companies(db_session)
    outsider = create_employee(db_session, companies["CTR-US"], employee_no="US-1")

    response = client.post(
        f"{API}/compliance/gdpr/consents",
        headers=headers,
        json={"employee_id": str(outsider.id), "purpose": "EMPLOYMENT_PROCESSING"},
    )
    assert response.status_code == 404


def test_audit_failure_does_not_fail_revocation(client, db_session, monkeypatch):
    headers, employee = _setup(client, db_session)
    consent = client.post(
        f"{API}/compliance/gdpr/consents",
        headers=headers,
        json={"employee_id": str(employee.id), "purpose": "HEALTH_SAFETY"},
    ).json()["data"]
    metrics.reset()

    def broken_create(self, entry):
        raise RuntimeError("audit store down")

    monkeypatch.setattr(audit_service.AuditRepository, "create", broken_create)

    response = client.put(
        f"{API}/compliance/gdpr/consents/{consent['id']}/revoke",
        headers=headers,
        json={"reason": "Withdrawn"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "REVOKED"
    assert "audit_failures_total 1.0" in metrics.render().content.decode()
    assert db_session.scalar(select(AuditLog).where(AuditLog.action == "gdpr.consent.revoke")) is None
