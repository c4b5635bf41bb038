from app.hrhub.core.context import Principal
from app.hrhub.core.error_catalog import bad_request, conflict, not_found
from app.hrhub.core.scope import TenantScope
from app.hrhub.db.models import (
    ChecklistTemplate,
    ChecklistTemplateTask,
    EmployeeOffboarding,
    EmployeeOnboarding,
    OffboardingTask,
    OnboardingTask,
    utcnow,
)
from app.hrhub.repos.base import as_uuid
from app.hrhub.repos.checklists import (
    ChecklistTemplateRepository,
    OffboardingRepository,
    OnboardingRepository,
    find_active_template,
)
from app.hrhub.repos.employees import EmployeeRepository
from app.hrhub.services.workflow import TASK_TRANSITIONS, ensure_transition


def _all_required_done(tasks) -> bool:
    return all(task.status == "DONE" for task in tasks if task.is_required)


def _mark_task(task, target: str, principal: Principal) -> None:
    if task.status == "DONE":
        raise bad_request("Task is already completed")
    ensure_transition(TASK_TRANSITIONS, task.status, target, subject="Task")
    if target == "SKIPPED" and task.is_required:
        raise bad_request("Required tasks cannot be skipped")
    task.status = target
    task.completed_at = utcnow()
    task.completed_by = as_uuid(principal.employee_id or principal.user_id)


class OnboardingService:
    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = OnboardingRepository(db, scope)
        self.employees = EmployeeRepository(db, scope)

    def get_onboarding(self, onboarding_id) -> EmployeeOnboarding:
        onboarding = self.repo.get(onboarding_id)
        if onboarding is None:
            raise not_found("Onboarding not found")
        return onboarding

    def start(self, employee_id) -> EmployeeOnboarding:
        employee = self.employees.get(employee_id)
        if employee is None:
            raise not_found("Employee not found")
        if self.repo.find_in_progress(employee.id) is not None:
            raise conflict("Onboarding is already in progress for this employee")
        template = find_active_template(self.db, employee.company_id, "ONBOARDING")
        if template is None:
            raise not_found("No active onboarding checklist for this company")

        onboarding = EmployeeOnboarding(
            company_id=employee.company_id,
            employee_id=employee.id,
            template_id=template.id,
            status="IN_PROGRESS",
        )
        for item in template.tasks:
            onboarding.tasks.append(
                OnboardingTask(
                    company_id=employee.company_id,
                    title=item.title,
                    is_required=item.is_required,
                    sort_order=item.sort_order,
                )
            )
        self.db.add(onboarding)
        self.db.commit()
        return onboarding

    def update_task(self, task_id, principal: Principal, target: str) -> OnboardingTask:
        task = self.repo.get_task(task_id)
        if task is None:
            raise not_found("Task not found")
        onboarding = task.onboarding
        if onboarding.status != "IN_PROGRESS":
            raise bad_request("Only in-progress onboardings can be updated")
        _mark_task(task, target, principal)

        if _all_required_done(onboarding.tasks):
            now = utcnow()
            onboarding.status = "COMPLETED"
            onboarding.completed_at = now
            employee = self.employees.get(onboarding.employee_id)
            if employee is not None:
                employee.onboarded_at = now
        self.db.commit()
        return task

    def force_complete(self, onboarding_id, principal: Principal) -> tuple[EmployeeOnboarding, int]:
        """Close the checklist, marking every pending task as SKIPPED."""
        onboarding = self.get_onboarding(onboarding_id)
        if onboarding.status != "IN_PROGRESS":
            raise bad_request(f"Onboarding is already {onboarding.status}")
        now = utcnow()
        actor = as_uuid(principal.employee_id or principal.user_id)
        skipped = 0
        for task in onboarding.tasks:
            if task.status == "PENDING":
                task.status = "SKIPPED"
                task.completed_at = now
                task.completed_by = actor
                skipped += 1
        onboarding.status = "COMPLETED"
        onboarding.completed_at = now
        employee = self.employees.get(onboarding.employee_id)
        if employee is not None:
            employee.onboarded_at = now
        self.db.commit()
        return onboarding, skipped


class OffboardingService:
    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = OffboardingRepository(db, scope)
        self.employees = EmployeeRepository(db, scope)

    def get_offboarding(self, offboarding_id) -> EmployeeOffboarding:
        offboarding = self.repo.get(offboarding_id)
        if offboarding is None:
            raise not_found("Offboarding not found")
        return offboarding

    def start(self, employee_id, principal: Principal, payload) -> EmployeeOffboarding:
        employee = self.employees.get(employee_id)
        if employee is None or employee.status != "ACTIVE":
            raise not_found("Active employee not found")
        if self.repo.find_in_progress(employee.id) is not None:
            raise conflict("Offboarding is already in progress for this employee")
        template = find_active_template(self.db, employee.company_id, "OFFBOARDING", payload.resign_type)
        if template is None:
            raise not_found(f"No active offboarding checklist for {payload.resign_type}")

        offboarding = EmployeeOffboarding(
            company_id=employee.company_id,
            employee_id=employee.id,
            template_id=template.id,
            resign_type=payload.resign_type,
            last_working_date=payload.last_working_date,
            reason=payload.reason,
            previous_status=employee.status,
            status="IN_PROGRESS",
            started_by=as_uuid(principal.employee_id or principal.user_id),
        )
        for item in template.tasks:
            offboarding.tasks.append(
                OffboardingTask(
                    company_id=employee.company_id,
                    title=item.title,
                    is_required=item.is_required,
                    sort_order=item.sort_order,
                )
            )
        employee.status = "OFFBOARDING"
        employee.resign_date = payload.last_working_date
        self.db.add(offboarding)
        self.db.commit()
        return offboarding

    def complete_task(self, offboarding_id, task_id, principal: Principal) -> OffboardingTask:
        offboarding = self.get_offboarding(offboarding_id)
        if offboarding.status != "IN_PROGRESS":
            raise bad_request("Only in-progress offboardings can be updated")
        task = self.repo.get_task(offboarding.id, task_id)
        if task is None:
            raise not_found("Task not found")
        _mark_task(task, "DONE", principal)

        if _all_required_done(offboarding.tasks):
            offboarding.status = "COMPLETED"
            offboarding.completed_at = utcnow()
            employee = self.employees.get(offboarding.employee_id)
            if employee is not None:
                employee.status = "TERMINATED" if offboarding.resign_type == "INVOLUNTARY" else "RESIGNED"
        self.db.commit()
        return task

    def cancel(self, offboarding_id) -> EmployeeOffboarding:
        offboarding = self.get_offboarding(offboarding_id)
        if offboarding.status != "IN_PROGRESS":
            raise bad_request("Only in-progress offboardings can be cancelled")
        employee = self.employees.get(offboarding.employee_id)
        if employee is not None:
            employee.status = offboarding.previous_status
            employee.resign_date = None
        offboarding.status = "CANCELLED"
        self.db.commit()
        return offboarding


class ChecklistTemplateService:
    """Publishes a company's checklist templates.

    A company keeps one active template per kind and resign type.
    Publishing a new one deactivates the previous template; checklists
    already started keep the tasks they were created with.
    """

    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = ChecklistTemplateRepository(db, scope)

    def publish(
        self, kind: str, target_type: str | None, payload
    ) -> tuple[ChecklistTemplate, ChecklistTemplate | None]:
        company_id = self.scope.company_for_write()
        previous = find_active_template(self.db, company_id, kind, target_type)
        if previous is not None:
            previous.is_active = False

        template = ChecklistTemplate(company_id=company_id, kind=kind, target_type=target_type, name=payload.name)
        for index, item in enumerate(payload.tasks):
            template.tasks.append(
                ChecklistTemplateTask(
                    company_id=company_id,
                    title=item.title,
                    is_required=item.is_required,
                    sort_order=index,
                )
            )
        self.db.add(template)
        self.db.commit()
        return template, previous
