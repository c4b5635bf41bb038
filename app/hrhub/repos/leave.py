from datetime import date

from sqlalchemy import select

from app.hrhub.db.models import LeaveBalance, LeavePolicy, LeaveRequest
from app.hrhub.repos.base import ScopedRepository, as_uuid


class LeaveRepository(ScopedRepository):
    model = LeaveRequest

    def get_policy(self, policy_id, *, active_only: bool = True):
        stmt = self.select_scoped(LeavePolicy).where(LeavePolicy.id == as_uuid(policy_id))
        if active_only:
            stmt = stmt.where(LeavePolicy.is_active.is_(True))
        return self.db.execute(stmt).scalars().first()

    def get_balance(self, employee_id, policy_id, year: int, *, for_update: bool = False):
        stmt = self.select_scoped(LeaveBalance).where(
            LeaveBalance.employee_id == as_uuid(employee_id),
            LeaveBalance.policy_id == as_uuid(policy_id),
            LeaveBalance.year == year,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def balance_for_request(self, request: LeaveRequest, *, for_update: bool = True):
        return self.get_balance(
            request.employee_id,
            request.policy_id,
            request.start_date.year,
            for_update=for_update,
        )

    def list_balances(self, employee_id, year: int):
        stmt = (
            self.select_scoped(LeaveBalance)
            .where(LeaveBalance.employee_id == as_uuid(employee_id), LeaveBalance.year == year)
            .order_by(LeaveBalance.policy_id)
        )
        return self.db.execute(stmt).scalars().all()

    def list_requests(
        self,
        *,
        employee_id=None,
        status: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        offset: int,
        limit: int,
    ):
        stmt = self.select_scoped()
        if employee_id is not None:
            stmt = stmt.where(LeaveRequest.employee_id == as_uuid(employee_id))
        if status:
            stmt = stmt.where(LeaveRequest.status == status)
        if date_from:
            stmt = stmt.where(LeaveRequest.end_date >= date_from)
        if date_to:
            stmt = stmt.where(LeaveRequest.start_date <= date_to)
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()),
        )

    def get_pending(self, request_id):
        stmt = self.select_scoped().where(
            LeaveRequest.id == as_uuid(request_id), LeaveRequest.status == "PENDING"
        )
        return self.db.execute(stmt).scalars().first()

    def list_policies(self):
        stmt = select(LeavePolicy).where(LeavePolicy.is_active.is_(True))
        stmt = self.scoped(stmt, LeavePolicy).order_by(LeavePolicy.code)
        return self.db.execute(stmt).scalars().all()
