from sqlalchemy import func, select

from app.hrhub.db.models import Employee, PayrollItem, PayrollRun
from app.hrhub.repos.base import ScopedRepository, as_uuid


class PayrollRepository(ScopedRepository):
    model = PayrollRun

    def list_runs(
        self,
        *,
        status: str | None = None,
        year_month: str | None = None,
        run_type: str | None = None,
        offset: int,
        limit: int,
    ):
        stmt = self.select_scoped()
        if status:
            stmt = stmt.where(PayrollRun.status == status)
        if year_month:
            stmt = stmt.where(PayrollRun.year_month == year_month)
        if run_type:
            stmt = stmt.where(PayrollRun.run_type == run_type)
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(PayrollRun.year_month.desc(), PayrollRun.created_at.desc()),
        )

    def list_items(self, run_id):
        stmt = (
            self.select_scoped(PayrollItem)
            .join(Employee, Employee.id == PayrollItem.employee_id)
            .where(PayrollItem.run_id == as_uuid(run_id))
            .order_by(Employee.employee_no.asc())
        )
        return self.db.execute(stmt).scalars().all()

    def get_item(self, run_id, item_id):
        stmt = self.select_scoped(PayrollItem).where(
            PayrollItem.id == as_uuid(item_id), PayrollItem.run_id == as_uuid(run_id)
        )
        return self.db.execute(stmt).scalars().first()

    def sum_items(self, run_id):
        stmt = select(
            func.coalesce(func.sum(PayrollItem.gross_pay), 0),
            func.coalesce(func.sum(PayrollItem.deductions), 0),
            func.coalesce(func.sum(PayrollItem.net_pay), 0),
            func.count(PayrollItem.id),
        ).where(PayrollItem.run_id == as_uuid(run_id))
        return self.db.execute(stmt).one()

    def delete_items(self, run_id) -> None:
        for item in self.db.execute(
            select(PayrollItem).where(PayrollItem.run_id == as_uuid(run_id))
        ).scalars():
            self.db.delete(item)
