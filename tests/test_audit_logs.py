from tests.hr_helpers import API, login_as, seed_companies

NEW_EMPLOYEE = {"employee_no": "A-1", "name": "Lee Jiwoo", "email": "jiwoo@example.com", "hire_date": "2025-03-01"}


def test_audit_logs_are_company_scoped(client, db_session):
    companies = seed_companies(db_session)
    _, kr_headers = login_as(client, db_session, companies["CTR-KR"], username="hr-kr", role="HR_ADMIN")
    _, us_headers = login_as(client, db_session, companies["CTR-US"], username="hr-us", role="HR_ADMIN")

    created = client.post(f"{API}/employees", headers=kr_headers, json=NEW_EMPLOYEE)
    assert created.status_code == 201

    kr_logs = client.get(f"{API}/audit-logs", headers=kr_headers, params={"action": "employees.create"}).json()
    assert kr_logs["pagination"]["total"] == 1
    row = kr_logs["data"][0]
    assert row["resource_id"] == created.json()["data"]["id"]
    assert row["company_id"] == str(companies["CTR-KR"].id)
    assert row["trace_id"]

    us_logs = client.get(f"{API}/audit-logs", headers=us_headers, params={"action": "employees.create"}).json()
    assert us_logs["data"] == []


def test_audit_logs_require_audit_view(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="boss", role="MANAGER")

    assert client.get(f"{API}/audit-logs", headers=headers).status_code == 403
