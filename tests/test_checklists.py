import uuid

from sqlalchemy import select

from app.hrhub.db.models import AuditLog, Employee
from tests.hr_helpers import API, create_employee, login_as, seed_companies


def _hr(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="hr", role="HR_ADMIN")
    return companies, headers


def test_onboarding_completes_when_required_tasks_are_done(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="N-1")

    started = client.post(f"{API}/onboarding", headers=headers, json={"employee_id": str(employee.id)})
    assert started.status_code == 201
    onboarding = started.json()["data"]
    assert onboarding["status"] == "IN_PROGRESS"
    tasks = onboarding["tasks"]
    assert [task["is_required"] for task in tasks] == [True, True, True, False]

    duplicate = client.post(f"{API}/onboarding", headers=headers, json={"employee_id": str(employee.id)})
    assert duplicate.status_code == 409

    skip_required = client.put(f"{API}/onboarding/tasks/{tasks[0]['id']}/skip", headers=headers)
    assert skip_required.status_code == 400

    skipped = client.put(f"{API}/onboarding/tasks/{tasks[3]['id']}/skip", headers=headers)
    assert skipped.json()["data"]["status"] == "SKIPPED"

    first = client.put(f"{API}/onboarding/tasks/{tasks[0]['id']}/complete", headers=headers)
    assert first.json()["data"]["status"] == "DONE"
    again = client.put(f"{API}/onboarding/tasks/{tasks[0]['id']}/complete", headers=headers)
    assert again.status_code == 400
    assert again.json()["error"]["message"] == "Task is already completed"

    for task in tasks[1:3]:
        done = client.put(f"{API}/onboarding/tasks/{task['id']}/complete", headers=headers)
        assert done.status_code == 200

    detail = client.get(f"{API}/onboarding/{onboarding['id']}", headers=headers).json()["data"]
    assert detail["status"] == "COMPLETED"
    db_session.expire_all()
    assert db_session.get(Employee, employee.id).onboarded_at is not None


def test_onboarding_list_filters_by_status(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="N-2")
    client.post(f"{API}/onboarding", headers=headers, json={"employee_id": str(employee.id)})

    body = client.get(f"{API}/onboarding", headers=headers, params={"status": "IN_PROGRESS"}).json()
    assert body["pagination"]["total"] == 1
    assert client.get(f"{API}/onboarding", headers=headers, params={"status": "COMPLETED"}).json()["data"] == []


def test_offboarding_resigns_employee_on_completion(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-1")

    started = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "VOLUNTARY", "last_working_date": "2026-06-30", "reason": "Relocation"},
    )
    assert started.status_code == 201
    offboarding = started.json()["data"]
    db_session.expire_all()
    assert db_session.get(Employee, employee.id).status == "OFFBOARDING"

    for task in offboarding["tasks"]:
        if task["is_required"]:
            response = client.put(
                f"{API}/offboarding/{offboarding['id']}/tasks/{task['id']}/complete",
                headers=headers,
            )
            assert response.status_code == 200

    detail = client.get(f"{API}/offboarding/{offboarding['id']}", headers=headers).json()["data"]
    assert detail["status"] == "COMPLETED"
    db_session.expire_all()
    refreshed = db_session.get(Employee, employee.id)
    assert refreshed.status == "RESIGNED"
    assert str(refreshed.resign_date) == "2026-06-30"


def test_involuntary_offboarding_terminates(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-2")
    offboarding = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "INVOLUNTARY", "last_working_date": "2026-05-31"},
    ).json()["data"]

    for task in offboarding["tasks"][:3]:
        client.put(f"{API}/offboarding/{offboarding['id']}/tasks/{task['id']}/complete", headers=headers)

    db_session.expire_all()
    assert db_session.get(Employee, employee.id).status == "TERMINATED"


def test_cancel_offboarding_restores_status(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-3")
    offboarding = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "RETIREMENT", "last_working_date": "2026-12-31"},
    ).json()["data"]

    cancelled = client.put(f"{API}/offboarding/{offboarding['id']}/cancel", headers=headers)

    assert cancelled.status_code == 200
    assert cancelled.json()["data"]["status"] == "CANCELLED"
    db_session.expire_all()
    refreshed = db_session.get(Employee, employee.id)
    assert refreshed.status == "ACTIVE"
    assert refreshed.resign_date is None

    task_id = offboarding["tasks"][0]["id"]
    late = client.put(f"{API}/offboarding/{offboarding['id']}/tasks/{task_id}/complete", headers=headers)
    assert late.status_code == 400


def test_offboarding_requires_active_employee(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-4", status="RESIGNED")

    response = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "VOLUNTARY", "last_working_date": "2026-06-30"},
    )
    assert response.status_code == 404


def test_offboarding_task_of_other_checklist_is_not_found(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-5")
    offboarding = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "CONTRACT_END", "last_working_date": "2026-06-30"},
    ).json()["data"]

    response = client.put(
        f"{API}/offboarding/{offboarding['id']}/tasks/{uuid.uuid4()}/complete",
        headers=headers,
    )
    assert response.status_code == 404


def test_manager_cannot_start_offboarding(client, db_session):
    companies = seed_companies(db_session)
    _, headers = login_as(client, db_session, companies["CTR-KR"], username="boss", role="MANAGER")
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-6")

    response = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "VOLUNTARY", "last_working_date": "2026-06-30"},
    )
    assert response.status_code == 403


def test_force_complete_skips_pending_tasks(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="N-3")
    onboarding = client.post(f"{API}/onboarding", headers=headers, json={"employee_id": str(employee.id)}).json()[
        "data"
    ]
    first = onboarding["tasks"][0]["id"]
    client.put(f"{API}/onboarding/tasks/{first}/complete", headers=headers)

    forced = client.put(
        f"{API}/onboarding/{onboarding['id']}/force-complete",
        headers=headers,
        json={"reason": "Transferred from affiliate with prior onboarding"},
    )

    assert forced.status_code == 200
    body = forced.json()["data"]
    assert body["status"] == "COMPLETED"
    assert body["completed_at"]
    assert [task["status"] for task in body["tasks"]] == ["DONE", "SKIPPED", "SKIPPED", "SKIPPED"]
    db_session.expire_all()
    assert db_session.get(Employee, employee.id).onboarded_at is not None
    audit = db_session.execute(select(AuditLog).where(AuditLog.action == "onboarding.force_complete")).scalars().one()
    assert audit.changes == {"reason": "Transferred from affiliate with prior onboarding", "skipped_tasks": 3}

    again = client.put(
        f"{API}/onboarding/{onboarding['id']}/force-complete",
        headers=headers,
        json={"reason": "Twice"},
    )
    assert again.status_code == 400
    assert again.json()["error"]["message"] == "Onboarding is already COMPLETED"


def test_force_complete_needs_approve_permission_and_own_company(client, db_session):
    companies, hr_headers = _hr(client, db_session)
    _, boss_headers = login_as(client, db_session, companies["CTR-KR"], username="boss", role="MANAGER")
    _, cn_headers = login_as(client, db_session, companies["CTR-CN"], username="cn-hr", role="HR_ADMIN")
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="N-4")
    onboarding = client.post(f"{API}/onboarding", headers=hr_headers, json={"employee_id": str(employee.id)}).json()[
        "data"
    ]
    url = f"{API}/onboarding/{onboarding['id']}/force-complete"

    assert client.put(url, headers=boss_headers, json={"reason": "Skip it"}).status_code == 403
    assert client.put(url, headers=cn_headers, json={"reason": "Skip it"}).status_code == 404
    assert client.put(url, headers=hr_headers, json={"reason": ""}).status_code == 400
    assert client.get(f"{API}/onboarding/{onboarding['id']}", headers=hr_headers).json()["data"]["status"] == (
        "IN_PROGRESS"
    )


def test_status_is_locked_while_offboarding_is_open(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-7")
    offboarding = client.post(
        f"{API}/employees/{employee.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "VOLUNTARY", "last_working_date": "2026-06-30"},
    ).json()["data"]

    blocked = client.patch(f"{API}/employees/{employee.id}", headers=headers, json={"status": "ACTIVE"})

    assert blocked.status_code == 400
    assert blocked.json()["error"]["details"] == {"status": "OFFBOARDING"}
    renamed = client.patch(f"{API}/employees/{employee.id}", headers=headers, json={"department": "Sales"})
    assert renamed.status_code == 200
    assert renamed.json()["data"]["status"] == "OFFBOARDING"

    client.put(f"{API}/offboarding/{offboarding['id']}/cancel", headers=headers)
    restored = client.patch(f"{API}/employees/{employee.id}", headers=headers, json={"status": "ON_LEAVE"})
    assert restored.status_code == 200
    assert restored.json()["data"]["status"] == "ON_LEAVE"


def test_status_of_separated_employee_cannot_change(client, db_session):
    companies, headers = _hr(client, db_session)
    employee = create_employee(db_session, companies["CTR-KR"], employee_no="O-8", status="RESIGNED")

    response = client.patch(f"{API}/employees/{employee.id}", headers=headers, json={"status": "ACTIVE"})

    assert response.status_code == 400
    db_session.expire_all()
    assert db_session.get(Employee, employee.id).status == "RESIGNED"


def test_published_onboarding_template_replaces_previous(client, db_session):
    companies, headers = _hr(client, db_session)
    _, boss_headers = login_as(client, db_session, companies["CTR-KR"], username="boss", role="MANAGER")
    payload = {
        "name": "Engineering onboarding",
        "tasks": [
            {"title": "Sign contract"},
            {"title": "Laptop setup"},
            {"title": "Lunch with buddy", "is_required": False},
        ],
    }

    assert client.post(f"{API}/onboarding/templates", headers=boss_headers, json=payload).status_code == 403
    published = client.post(f"{API}/onboarding/templates", headers=headers, json=payload)

    assert published.status_code == 201
    template = published.json()["data"]
    assert template["kind"] == "ONBOARDING"
    assert [task["sort_order"] for task in template["tasks"]] == [0, 1, 2]
    active = client.get(f"{API}/onboarding/templates", headers=headers).json()["data"]
    assert [row["id"] for row in active] == [template["id"]]
    everything = client.get(f"{API}/onboarding/templates", headers=headers, params={"include_inactive": "true"})
    assert len(everything.json()["data"]) == 2

    employee = create_employee(db_session, companies["CTR-KR"], employee_no="N-5")
    started = client.post(f"{API}/onboarding", headers=headers, json={"employee_id": str(employee.id)}).json()["data"]
    assert [task["title"] for task in started["tasks"]] == ["Sign contract", "Laptop setup", "Lunch with buddy"]
    audit = db_session.execute(select(AuditLog).where(AuditLog.action == "onboarding.template.publish")).scalars().one()
    assert audit.changes["tasks"] == 3
    assert audit.changes["replaced_template_id"] is not None


def test_offboarding_checklist_is_published_per_resign_type(client, db_session):
    companies, headers = _hr(client, db_session)
    _, cn_headers = login_as(client, db_session, companies["CTR-CN"], username="cn-hr", role="HR_ADMIN")
    payload = {"name": "Retirement", "resign_type": "RETIREMENT", "tasks": [{"title": "Pension paperwork"}]}

    published = client.post(f"{API}/offboarding/checklists", headers=headers, json=payload)
    assert published.status_code == 201
    assert published.json()["data"]["target_type"] == "RETIREMENT"

    retiree = create_employee(db_session, companies["CTR-KR"], employee_no="O-9")
    leaver = create_employee(db_session, companies["CTR-KR"], employee_no="O-10")
    retiring = client.post(
        f"{API}/employees/{retiree.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "RETIREMENT", "last_working_date": "2026-12-31"},
    ).json()["data"]
    resigning = client.post(
        f"{API}/employees/{leaver.id}/offboarding/start",
        headers=headers,
        json={"resign_type": "VOLUNTARY", "last_working_date": "2026-12-31"},
    ).json()["data"]
    assert [task["title"] for task in retiring["tasks"]] == ["Pension paperwork"]
    assert len(resigning["tasks"]) == 4

    foreign = client.get(f"{API}/offboarding/checklists", headers=cn_headers).json()["data"]
    assert "Retirement" not in {row["name"] for row in foreign}
