from sqlalchemy import select

from app.hrhub.db.models import AuditLog
from tests.hr_helpers import API, create_employee, login_as, seed_companies


def test_create_and_fetch_employee(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-RU"], username="hr-ru", role="HR_ADMIN")

    created = client.post(
        f"{API}/employees",
        headers={**headers, "User-Agent": "pytest-agent", "X-Forwarded-For": "10.1.2.3, 10.0.0.1"},
        json={
            "employee_no": "RU-001",
            "name": "Ivanov",
            "email": "ivanov@example.com",
            "department": "Sales",
            "hire_date": "2024-05-01",
            "base_salary": 150000,
        },
    )
    assert created.status_code == 201
    employee = created.json()["data"]
    assert employee["company_id"] == str(companies["CTR-RU"].id)
    assert employee["status"] == "ACTIVE"

    fetched = client.get(f"{API}/employees/{employee['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["employee_no"] == "RU-001"

    audit = db_session.execute(select(AuditLog).where(AuditLog.action == "employees.create")).scalars().one()
    assert audit.resource_id == employee["id"]
    assert audit.ip_address == "10.1.2.3"
    assert audit.user_agent == "pytest-agent"
    assert audit.trace_id


def test_list_filters(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-MX"], username="hr-mx", role="HR_ADMIN", with_employee=False)
    create_employee(db_session, companies["CTR-MX"], employee_no="MX-1", name="Garcia", department="Finance")
    create_employee(db_session, companies["CTR-MX"], employee_no="MX-2", name="Lopez", department="Plant")
    create_employee(db_session, companies["CTR-MX"], employee_no="MX-3", name="Perez", status="ON_LEAVE")

    by_department = client.get(f"{API}/employees", headers=headers, params={"department": "Plant"}).json()
    assert [row["employee_no"] for row in by_department["data"]] == ["MX-2"]

    by_search = client.get(f"{API}/employees", headers=headers, params={"search": "garc"}).json()
    assert [row["employee_no"] for row in by_search["data"]] == ["MX-1"]

    by_status = client.get(f"{API}/employees", headers=headers, params={"status": "ON_LEAVE"}).json()
    assert [row["employee_no"] for row in by_status["data"]] == ["MX-3"]


def test_patch_employee_records_before_and_after(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="KR-9", department="People")

    response = client.patch(
        f"{API}/employees/{employee.id}",
        headers=headers,
        json={"department": "Finance", "job_title": None},
    )

    assert response.status_code == 200
    assert response.json()["data"]["department"] == "Finance"
    audit = db_session.execute(select(AuditLog).where(AuditLog.action == "employees.update")).scalars().one()
    assert audit.changes["before"]["department"] == "People"
    assert audit.changes["after"]["department"] == "Finance"


def test_manager_must_belong_to_scope(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    foreign_manager = create_employee(db_session, companies["CTR-CN"], employee_no="CN-M")

    response = client.post(
        f"{API}/employees",
        headers=headers,
        json={
            "employee_no": "KR-10",
            "name": "Lee",
            "email": "lee@example.com",
            "hire_date": "2024-01-01",
            "manager_id": str(foreign_manager.id),
        },
    )
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Manager not found"
