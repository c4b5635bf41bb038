from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from app.hrhub.core.error_catalog import AppError, ErrorCatalog
from app.hrhub.core.errors import translate_storage_error
from app.hrhub.core.validation import parse_model
from app.hrhub.schemas.leave import LeaveRequestCreate
from tests.hr_helpers import API, login_as, seed_companies


class _PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def test_body_validation_returns_issue_list(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")

    response = client.post(
        f"{API}/employees",
        headers=headers,
        json={"employee_no": "", "name": "Kim", "email": "not-an-email", "hire_date": "2024-01-01"},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "BAD_REQUEST"
    fields = {issue["field"] for issue in error["details"]["issues"]}
    assert {"employee_no", "email"} <= fields
    assert all({"field", "message", "type"} <= set(issue) for issue in error["details"]["issues"])


def test_cross_field_rule_is_reported():
    try:
        parse_model(
            LeaveRequestCreate,
            {
                "policy_id": "7a1a2b9e-8d0e-4c4c-9a55-4bb1f4d3a001",
                "start_date": "2026-03-10",
                "end_date": "2026-03-01",
                "days": 1,
                "reason": "trip",
            },
        )
    except AppError as exc:
        assert exc.error is ErrorCatalog.BAD_REQUEST
        assert "end_date must be on or after start_date" in exc.details["issues"][0]["message"]
    else:
        raise AssertionError("expected a validation failure")


def test_duplicate_employee_number_is_conflict(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    payload = {"employee_no": "KR-777", "name": "Park", "email": "park@example.com", "hire_date": "2024-01-01"}

    assert client.post(f"{API}/employees", headers=headers, json=payload).status_code == 201
    duplicate = client.post(f"{API}/employees", headers=headers, json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "CONFLICT"


def test_translate_unique_violation():
    exc = IntegrityError("INSERT", {}, _PgError("duplicate key value violates unique constraint", "23505"))
    assert translate_storage_error(exc).error is ErrorCatalog.CONFLICT


def test_translate_foreign_key_violation():
    exc = IntegrityError("INSERT", {}, _PgError("violates foreign key constraint", "23503"))
    translated = translate_storage_error(exc)
    assert translated.error is ErrorCatalog.BAD_REQUEST
    assert translated.message_for(None) == "Referenced record does not exist"


def test_translate_sqlite_unique_message():
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: employees.employee_no"))
    assert translate_storage_error(exc).error is ErrorCatalog.CONFLICT


def test_translate_not_found_and_unavailable():
    assert translate_storage_error(NoResultFound()).error is ErrorCatalog.NOT_FOUND
    unavailable = OperationalError("SELECT 1", {}, Exception("could not connect to server"))
    assert translate_storage_error(unavailable).error is ErrorCatalog.SERVICE_UNAVAILABLE


def test_translate_unknown_is_internal():
    assert translate_storage_error(RuntimeError("boom")).error is ErrorCatalog.INTERNAL_ERROR


def test_localized_message_falls_back_to_english():
    assert ErrorCatalog.NOT_FOUND.localized_message("ko") == "리소스를 찾을 수 없습니다."
    assert ErrorCatalog.NOT_FOUND.localized_message("fr") == "Resource not found"
