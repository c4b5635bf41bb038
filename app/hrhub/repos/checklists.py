from sqlalchemy import select

from app.hrhub.db.models import (
    ChecklistTemplate,
    EmployeeOffboarding,
    EmployeeOnboarding,
    OffboardingTask,
    OnboardingTask,
)
from app.hrhub.repos.base import ScopedRepository, as_uuid


def find_active_template(db, company_id, kind: str, target_type: str | None = None):
    stmt = select(ChecklistTemplate).where(
        ChecklistTemplate.company_id == company_id,
        ChecklistTemplate.kind == kind,
        ChecklistTemplate.is_active.is_(True),
    )
    if target_type is None:
        stmt = stmt.where(ChecklistTemplate.target_type.is_(None))
    else:
        stmt = stmt.where(ChecklistTemplate.target_type == target_type)
    return db.execute(stmt).scalars().first()


class OnboardingRepository(ScopedRepository):
    model = EmployeeOnboarding

    def list_onboardings(self, *, status: str | None = None, employee_id=None, offset: int, limit: int):
        stmt = self.select_scoped()
        if status:
            stmt = stmt.where(EmployeeOnboarding.status == status)
        if employee_id is not None:
            stmt = stmt.where(EmployeeOnboarding.employee_id == as_uuid(employee_id))
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(EmployeeOnboarding.started_at.desc(), EmployeeOnboarding.id.desc()),
        )

    def find_in_progress(self, employee_id):
        stmt = self.select_scoped().where(
            EmployeeOnboarding.employee_id == as_uuid(employee_id),
            EmployeeOnboarding.status == "IN_PROGRESS",
        )
        return self.db.execute(stmt).scalars().first()

    def get_task(self, task_id):
        stmt = self.select_scoped(OnboardingTask).where(OnboardingTask.id == as_uuid(task_id))
        return self.db.execute(stmt).scalars().first()


class OffboardingRepository(ScopedRepository):
    model = EmployeeOffboarding

    def list_offboardings(self, *, status: str | None = None, employee_id=None, offset: int, limit: int):
        stmt = self.select_scoped()
        if status:
            stmt = stmt.where(EmployeeOffboarding.status == status)
        if employee_id is not None:
            stmt = stmt.where(EmployeeOffboarding.employee_id == as_uuid(employee_id))
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(EmployeeOffboarding.started_at.desc(), EmployeeOffboarding.id.desc()),
        )

    def find_in_progress(self, employee_id):
        stmt = self.select_scoped().where(
            EmployeeOffboarding.employee_id == as_uuid(employee_id),
            EmployeeOffboarding.status == "IN_PROGRESS",
        )
        return self.db.execute(stmt).scalars().first()

    def get_task(self, offboarding_id, task_id):
        stmt = self.select_scoped(OffboardingTask).where(
            OffboardingTask.id == as_uuid(task_id),
            OffboardingTask.offboarding_id == as_uuid(offboarding_id),
        )
        return self.db.execute(stmt).scalars().first()


class ChecklistTemplateRepository(ScopedRepository):
    model = ChecklistTemplate

    def list_templates(self, kind: str, *, include_inactive: bool = False):
        stmt = self.select_scoped().where(ChecklistTemplate.kind == kind)
        if not include_inactive:
            stmt = stmt.where(ChecklistTemplate.is_active.is_(True))
        stmt = stmt.order_by(ChecklistTemplate.target_type, ChecklistTemplate.is_active.desc(), ChecklistTemplate.name)
        return self.db.execute(stmt).scalars().all()
