from tests.hr_helpers import API, login_as, seed_companies

CYCLE = {
    "name": "2026 H1",
    "year": 2026,
    "half": "H1",
    "goal_start": "2026-01-01T00:00:00",
    "goal_end": "2026-02-28T00:00:00",
    "eval_start": "2026-06-01T00:00:00",
    "eval_end": "2026-06-30T00:00:00",
}


def test_cycle_advances_through_every_stage(client, db_session):
    companies = seed_companies(db_session)
    _, hr_headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    created = client.post(f"{API}/performance/cycles", headers=hr_headers, json=CYCLE)
    assert created.status_code == 201
    cycle_id = created.json()["data"]["id"]

    seen = []
    for _ in range(4):
        response = client.put(f"{API}/performance/cycles/{cycle_id}/advance", headers=hr_headers)
        assert response.status_code == 200
        seen.append(response.json()["data"]["status"])
    assert seen == ["ACTIVE", "EVAL_OPEN", "CALIBRATION", "CLOSED"]

    closed = client.put(f"{API}/performance/cycles/{cycle_id}/advance", headers=hr_headers)
    assert closed.status_code == 400
    assert closed.json()["error"]["details"] == {"current_status": "CLOSED"}


def test_manager_cannot_advance(client, db_session):
    companies = seed_companies(db_session)
    _, hr_headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    _, manager_headers = login_as(client, db_session, companies["CTR-KR"], username="boss", role="MANAGER")
    cycle_id = client.post(f"{API}/performance/cycles", headers=hr_headers, json=CYCLE).json()["data"]["id"]

    assert client.put(f"{API}/performance/cycles/{cycle_id}/advance", headers=manager_headers).status_code == 403
    detail = client.get(f"{API}/performance/cycles/{cycle_id}", headers=manager_headers)
    assert detail.json()["data"]["status"] == "DRAFT"


def test_windows_must_be_ordered(client, db_session):
    companies = seed_companies(db_session)
    _, hr_headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")

    response = client.post(
        f"{API}/performance/cycles",
        headers=hr_headers,
        json={**CYCLE, "goal_end": "2025-12-01T00:00:00"},
    )
    assert response.status_code == 400


def test_list_filters_by_year(client, db_session):
    companies = seed_companies(db_session)
    _, hr_headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    client.post(f"{API}/performance/cycles", headers=hr_headers, json=CYCLE)
    client.post(f"{API}/performance/cycles", headers=hr_headers, json={**CYCLE, "name": "2025 H2", "year": 2025})

    body = client.get(f"{API}/performance/cycles", headers=hr_headers, params={"year": 2025}).json()
    assert [row["name"] for row in body["data"]] == ["2025 H2"]


def test_offset_windows_are_stored_in_utc(client, db_session):
    companies = seed_companies(db_session)
    _, hr_headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")

    response = client.post(
        f"{API}/performance/cycles",
        headers=hr_headers,
        json={**CYCLE, "goal_start": "2026-01-01T09:00:00+09:00"},
    )

    assert response.status_code == 201
    assert response.json()["data"]["goal_start"] == "2026-01-01T00:00:00"
