import pytest

from app.hrhub.core.pagination import PaginationParams, build_pagination, total_pages
from tests.hr_helpers import API, create_employee, login_as, seed_companies


@pytest.mark.parametrize(
    "total,limit,expected",
    [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (45, 20, 3)],
)
def test_total_pages(total, limit, expected):
    assert total_pages(total, limit) == expected


def test_limit_is_capped_not_rejected():
    params = PaginationParams(page=2, limit=5000)
    assert params.limit == 100
    assert params.offset == 100


def test_build_pagination_shape():
    assert build_pagination(2, 20, 45) == {"page": 2, "limit": 20, "total": 45, "total_pages": 3}


def _hr_admin_without_record(client, db_session, company):
    _, headers = login_as(client, db_session, company, username="hr-us", role="HR_ADMIN", with_employee=False)
    return headers


def test_empty_listing(client, db_session):
    companies = seed_companies(db_session)
    headers = _hr_admin_without_record(client, db_session, companies["CTR-US"])

    body = client.get(f"{API}/employees", headers=headers).json()
    assert body["data"] == []
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 0, "totalPages": 0}


def test_pages_over_forty_five_rows(client, db_session):
    companies = seed_companies(db_session)
    headers = _hr_admin_without_record(client, db_session, companies["CTR-US"])
    for index in range(45):
        create_employee(db_session, companies["CTR-US"], employee_no=f"US-{index:03d}")

    first = client.get(f"{API}/employees", headers=headers, params={"page": 1, "limit": 20}).json()
    assert len(first["data"]) == 20
    assert first["pagination"] == {"page": 1, "limit": 20, "total": 45, "totalPages": 3}
    assert first["data"][0]["employee_no"] == "US-000"

    last = client.get(f"{API}/employees", headers=headers, params={"page": 3, "limit": 20}).json()
    assert len(last["data"]) == 5
    assert last["data"][-1]["employee_no"] == "US-044"

    beyond = client.get(f"{API}/employees", headers=headers, params={"page": 4, "limit": 20}).json()
    assert beyond["data"] == []
    assert beyond["pagination"]["total"] == 45


def test_oversized_limit_is_clamped_over_http(client, db_session):
    companies = seed_companies(db_session)
    headers = _hr_admin_without_record(client, db_session, companies["CTR-US"])

    body = client.get(f"{API}/employees", headers=headers, params={"limit": 1000}).json()
    assert body["pagination"]["limit"] == 100


def test_page_zero_is_rejected(client, db_session):
    companies = seed_companies(db_session)
    headers = _hr_admin_without_record(client, db_session, companies["CTR-US"])

    response = client.get(f"{API}/employees", headers=headers, params={"page": 0})
    assert response.status_code == 400
    issues = response.json()["error"]["details"]["issues"]
    assert issues[0]["field"] == "page"
