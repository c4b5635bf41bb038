import uuid
from dataclasses import fields

from app.hrhub.core.context import Principal
from app.hrhub.core.scope import TenantScope, build_tenant_scope
from tests.hr_helpers import API, create_employee, login_as, seed_companies


def test_hr_admin_only_sees_own_company(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr-kr", role="HR_ADMIN")
    create_employee(db_session, companies["CTR-KR"], employee_no="KR-100")
    create_employee(db_session, companies["CTR-CN"], employee_no="CN-100")

    response = client.get(f"{API}/employees", headers=headers, params={"limit": 100})

    assert response.status_code == 200
    company_ids = {row["company_id"] for row in response.json()["data"]}
    assert company_ids == {str(companies["CTR-KR"].id)}
    numbers = {row["employee_no"] for row in response.json()["data"]}
    assert "CN-100" not in numbers


def test_foreign_company_record_is_not_found(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr-kr", role="HR_ADMIN")
    foreign = create_employee(db_session, companies["CTR-CN"], employee_no="CN-200")

    assert client.get(f"{API}/employees/{foreign.id}", headers=headers).status_code == 404
    patch = client.patch(f"{API}/employees/{foreign.id}", headers=headers, json={"name": "Hijack"})
    assert patch.status_code == 404

    db_session.refresh(foreign)
    assert foreign.name != "Hijack"


def test_explicit_foreign_company_filter_is_forbidden(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr-kr", role="HR_ADMIN")

    response = client.get(
        f"{API}/employees",
        headers=headers,
        params={"company_id": str(companies["CTR-US"].id)},
    )
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Cross-company access denied"


def test_own_company_filter_is_allowed(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr-kr", role="HR_ADMIN")

    response = client.get(
        f"{API}/employees",
        headers=headers,
        params={"company_id": str(companies["CTR-KR"].id)},
    )
    assert response.status_code == 200


def test_malformed_company_filter_is_bad_request(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="root2", role="SUPER_ADMIN")

    response = client.get(f"{API}/employees", headers=headers, params={"company_id": "not-a-uuid"})
    assert response.status_code == 400
    assert response.json()["error"]["details"]["issues"][0]["field"] == "company_id"


def test_superadmin_reads_across_companies_and_can_narrow(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="root2", role="SUPER_ADMIN")
    create_employee(db_session, companies["CTR-CN"], employee_no="CN-300")
    create_employee(db_session, companies["CTR-MX"], employee_no="MX-300")

    everything = client.get(f"{API}/employees", headers=headers, params={"limit": 100}).json()["data"]
    assert {"CN-300", "MX-300"} <= {row["employee_no"] for row in everything}

    narrowed = client.get(
        f"{API}/employees",
        headers=headers,
        params={"company_id": str(companies["CTR-MX"].id)},
    ).json()["data"]
    assert [row["employee_no"] for row in narrowed] == ["MX-300"]


def test_superadmin_write_requires_target_company(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="root2", role="SUPER_ADMIN")
    payload = {"employee_no": "VN-1", "name": "Nguyen", "email": "nguyen@example.com", "hire_date": "2024-03-01"}

    missing = client.post(f"{API}/employees", headers=headers, json=payload)
    assert missing.status_code == 400
    assert missing.json()["error"]["message"] == "company_id is required"

    created = client.post(
        f"{API}/employees",
        headers=headers,
        params={"company_id": str(companies["CTR-VN"].id)},
        json=payload,
    )
    assert created.status_code == 201
    assert created.json()["data"]["company_id"] == str(companies["CTR-VN"].id)


def test_scope_only_carries_the_company_filter():
    kr = uuid.uuid4()
    root = Principal(user_id="u1", employee_id=None, role="SUPER_ADMIN", company_id=str(kr))
    staff = Principal(user_id="u2", employee_id=None, role="HR_ADMIN", company_id=str(kr))

    assert build_tenant_scope(root) == TenantScope(company_id=None)
    assert build_tenant_scope(root, str(kr)) == TenantScope(company_id=kr)
    assert build_tenant_scope(staff) == TenantScope(company_id=kr)
    assert [f.name for f in fields(TenantScope)] == ["company_id"]
