from sqlalchemy import or_

from app.hrhub.db.models import Employee
from app.hrhub.repos.base import ScopedRepository


class EmployeeRepository(ScopedRepository):
    model = Employee

    def select_active_rows(self):
        return self.select_scoped().where(Employee.deleted_at.is_(None))

    def get(self, entity_id, *, for_update: bool = False):
        employee = super().get(entity_id, for_update=for_update)
        if employee is None or employee.deleted_at is not None:
            return None
        return employee

    def list_employees(
        self,
        *,
        status: str | None = None,
        department: str | None = None,
        search: str | None = None,
        offset: int,
        limit: int,
    ):
        stmt = self.select_active_rows()
        if status:
            stmt = stmt.where(Employee.status == status)
        if department:
            stmt = stmt.where(Employee.department == department)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    Employee.name.ilike(pattern),
                    Employee.email.ilike(pattern),
                    Employee.employee_no.ilike(pattern),
                )
            )
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(Employee.employee_no.asc(), Employee.id.asc()),
        )

    def list_payable(self, company_id, hired_on_or_before):
        stmt = (
            self.select_active_rows()
            .where(
                Employee.company_id == company_id,
                Employee.status == "ACTIVE",
                Employee.hire_date <= hired_on_or_before,
            )
            .order_by(Employee.employee_no.asc())
        )
        return self.db.execute(stmt).scalars().all()
