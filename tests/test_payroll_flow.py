import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.hrhub.db.models import AuditLog, PayrollRun
from app.hrhub.services import payroll as payroll_service
from tests.hr_helpers import API, create_employee, login_as, seed_companies

RUN_PAYLOAD = {
    "name": "2026-03 monthly",
    "year_month": "2026-03",
    "period_start": "2026-03-01T00:00:00",
    "period_end": "2026-03-31T23:59:59",
    "currency": "KRW",
}


def _setup(client, db_session):
    companies = seed_companies(db_session)
    company = companies["CTR-KR"]
    _, hr_headers = login_as(client, db_session, company, username="hr", role="HR_ADMIN", with_employee=False)
    _, exec_headers = login_as(client, db_session, company, username="ceo", role="EXECUTIVE", with_employee=False)
    return companies, hr_headers, exec_headers


def _create_run(client, headers) -> dict:
    response = client.post(f"{API}/payroll/runs", headers=headers, json=RUN_PAYLOAD)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_calculate_builds_items_for_active_staff(client, db_session):
    companies, hr_headers, _ = _setup(client, db_session)
    company = companies["CTR-KR"]
    create_employee(db_session, company, employee_no="P-1", base_salary=Decimal("3000000"))
    create_employee(db_session, company, employee_no="P-2", base_salary=Decimal("4500000"))
    create_employee(db_session, company, employee_no="P-3", hire_date=date(2026, 4, 1))
    create_employee(db_session, company, employee_no="P-4", status="RESIGNED")
    run = _create_run(client, hr_headers)
    assert run["status"] == "DRAFT"

    response = client.post(f"{API}/payroll/runs/{run['id']}/calculate", headers=hr_headers)

    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["status"] == "REVIEW"
    # SA-0001 from the seed is active with a zero salary
    assert detail["headcount"] == 3
    assert detail["total_gross"] == 7500000
    assert [item["base_salary"] for item in detail["items"]] == [3000000, 4500000, 0]


def test_calculate_requires_draft(client, db_session):
    _, hr_headers, _ = _setup(client, db_session)
    run = _create_run(client, hr_headers)
    client.post(f"{API}/payroll/runs/{run['id']}/calculate", headers=hr_headers)

    again = client.post(f"{API}/payroll/runs/{run['id']}/calculate", headers=hr_headers)

    assert again.status_code == 400
    assert again.json()["error"]["details"] == {"current_status": "REVIEW", "target_status": "CALCULATING"}


def test_failed_calculation_returns_run_to_draft(client, db_session, monkeypatch):
    _, hr_headers, _ = _setup(client, db_session)
    run = _create_run(client, hr_headers)

    def _boom(base_salary):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(payroll_service, "calculate_item_amounts", _boom)
    response = client.post(f"{API}/payroll/runs/{run['id']}/calculate", headers=hr_headers)

    assert response.status_code == 503
    db_session.expire_all()
    assert db_session.get(PayrollRun, uuid.UUID(run["id"])).status == "DRAFT"


def test_adjust_item_recomputes_totals(client, db_session):
    companies, hr_headers, _ = _setup(client, db_session)
    create_employee(db_session, companies["CTR-KR"], employee_no="P-1", base_salary=Decimal("3000000"))
    run = _create_run(client, hr_headers)
    detail = client.post(f"{API}/payroll/runs/{run['id']}/calculate", headers=hr_headers).json()["data"]
    item = next(row for row in detail["items"] if row["base_salary"] == 3000000)

    response = client.put(
        f"{API}/payroll/runs/{run['id']}/items/{item['id']}",
        headers=hr_headers,
        json={"deductions": 250000, "adjustment_reason": "Tax withholding"},
    )

    assert response.status_code == 200
    adjusted = response.json()["data"]
    assert adjusted["net_pay"] == 2750000
    assert adjusted["is_manually_adjusted"] is True
    refreshed = client.get(f"{API}/payroll/runs/{run['id']}", headers=hr_headers).json()["data"]
    assert refreshed["total_deductions"] == 250000

    negative = client.put(
        f"{API}/payroll/runs/{run['id']}/items/{item['id']}",
        headers=hr_headers,
        json={"deductions": 9000000, "adjustment_reason": "Typo"},
    )
    assert negative.status_code == 400


def test_approval_belongs_to_executives(client, db_session):
    _, hr_headers, exec_headers = _setup(client, db_session)
    run = _create_run(client, hr_headers)
    client.post(f"{API}/payroll/runs/{run['id']}/calculate", headers=hr_headers)

    assert client.post(f"{API}/payroll/runs/{run['id']}/approve", headers=hr_headers).status_code == 403

    approved = client.post(f"{API}/payroll/runs/{run['id']}/approve", headers=exec_headers)
    assert approved.status_code == 200
    assert approved.json()["data"]["status"] == "APPROVED"
    audit = db_session.execute(select(AuditLog).where(AuditLog.action == "payroll.run.approve")).scalars().one()
    assert audit.changes == {"before": {"status": "REVIEW"}, "after": {"status": "APPROVED"}}

    paid = client.post(f"{API}/payroll/runs/{run['id']}/pay", headers=exec_headers)
    assert paid.status_code == 200
    assert paid.json()["data"]["paid_at"]

    cancel_paid = client.post(f"{API}/payroll/runs/{run['id']}/cancel", headers=exec_headers)
    assert cancel_paid.status_code == 400


def test_approve_from_draft_is_rejected(client, db_session):
    _, hr_headers, exec_headers = _setup(client, db_session)
    run = _create_run(client, hr_headers)

    response = client.post(f"{API}/payroll/runs/{run['id']}/approve", headers=exec_headers)
    assert response.status_code == 400
    assert db_session.execute(select(AuditLog).where(AuditLog.action == "payroll.run.approve")).first() is None


def test_cancel_draft_run(client, db_session):
    _, hr_headers, exec_headers = _setup(client, db_session)
    run = _create_run(client, hr_headers)

    response = client.post(f"{API}/payroll/runs/{run['id']}/cancel", headers=exec_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "CANCELLED"


def test_list_runs_filters_by_month(client, db_session):
    _, hr_headers, _ = _setup(client, db_session)
    _create_run(client, hr_headers)
    client.post(f"{API}/payroll/runs", headers=hr_headers, json={**RUN_PAYLOAD, "year_month": "2026-04"})

    body = client.get(f"{API}/payroll/runs", headers=hr_headers, params={"year_month": "2026-04"}).json()
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["year_month"] == "2026-04"


def test_invalid_period_is_bad_request(client, db_session):
    _, hr_headers, _ = _setup(client, db_session)
    payload = {**RUN_PAYLOAD, "period_end": "2026-02-01T00:00:00"}

    assert client.post(f"{API}/payroll/runs", headers=hr_headers, json=payload).status_code == 400
