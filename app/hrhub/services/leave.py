from decimal import Decimal

from app.hrhub.core.context import Principal
from app.hrhub.core.error_catalog import bad_request, not_found
from app.hrhub.core.scope import TenantScope
from app.hrhub.db.models import LeaveBalance, LeavePolicy, LeaveRequest, utcnow
from app.hrhub.repos.base import as_uuid
from app.hrhub.repos.employees import EmployeeRepository
from app.hrhub.repos.leave import LeaveRepository


def _require_employee(principal: Principal):
    if not principal.employee_id:
        raise bad_request("No employee record is linked to this account")
    return as_uuid(principal.employee_id)


class LeaveService:
    """Leave request lifecycle with the matching balance bookkeeping.

    Each mutation updates the request row and its balance in one commit.
    """

    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = LeaveRepository(db, scope)
        self.employees = EmployeeRepository(db, scope)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def create_request(self, principal: Principal, payload) -> LeaveRequest:
        employee_id = _require_employee(principal)
        policy = self.repo.get_policy(payload.policy_id)
        if policy is None or str(policy.company_id) != principal.company_id:
            raise not_found("Leave policy not found")

        days = Decimal(str(payload.days))
        balance = self.repo.get_balance(employee_id, policy.id, payload.start_date.year, for_update=True)
        if balance is None:
            raise bad_request("No leave balance for this policy and year")
        if balance.remaining_days < days:
            raise bad_request(
                "Insufficient leave balance",
                details={"remaining_days": balance.remaining_days, "requested_days": days},
            )

        request = LeaveRequest(
            company_id=policy.company_id,
            employee_id=employee_id,
            policy_id=policy.id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            days=days,
            half_day_type=payload.half_day_type,
            reason=payload.reason,
            status="PENDING",
        )
        self.db.add(request)
        balance.pending_days = balance.pending_days + days
        self._commit()
        return request

    def approve(self, request_id, principal: Principal) -> LeaveRequest:
        request = self.repo.get_pending(request_id)
        if request is None:
            raise not_found("Pending leave request not found")
        balance = self.repo.balance_for_request(request)
        if balance is None:
            raise bad_request("No leave balance for this request")

        request.status = "APPROVED"
        request.approved_by = as_uuid(principal.employee_id or principal.user_id)
        request.approved_at = utcnow()
        balance.used_days = balance.used_days + request.days
        balance.pending_days = balance.pending_days - request.days
        self._commit()
        return request

    def reject(self, request_id, principal: Principal, reason: str) -> LeaveRequest:
        request = self.repo.get_pending(request_id)
        if request is None:
            raise not_found("Pending leave request not found")
        balance = self.repo.balance_for_request(request)

        request.status = "REJECTED"
        request.rejection_reason = reason
        request.approved_by = as_uuid(principal.employee_id or principal.user_id)
        request.approved_at = utcnow()
        if balance is not None:
            balance.pending_days = balance.pending_days - request.days
        self._commit()
        return request

    def cancel(self, request_id, principal: Principal) -> LeaveRequest:
        employee_id = _require_employee(principal)
        request = self.repo.get(request_id)
        if request is None or request.employee_id != employee_id:
            raise not_found("Leave request not found")
        if request.status in {"CANCELLED", "REJECTED"}:
            raise bad_request(f"Leave request is already {request.status}")

        balance = self.repo.balance_for_request(request)
        previous_status = request.status
        request.status = "CANCELLED"
        request.cancelled_at = utcnow()
        if balance is not None:
            if previous_status == "PENDING":
                balance.pending_days = balance.pending_days - request.days
            elif previous_status == "APPROVED":
                balance.used_days = balance.used_days - request.days
        self._commit()
        return request

    def get_policy(self, policy_id) -> LeavePolicy:
        policy = self.repo.get_policy(policy_id, active_only=False)
        if policy is None:
            raise not_found("Leave policy not found")
        return policy

    def create_policy(self, payload) -> LeavePolicy:
        policy = LeavePolicy(
            company_id=self.scope.company_for_write(),
            code=payload.code,
            name=payload.name,
            leave_type=payload.leave_type,
            default_days=Decimal(str(payload.default_days)),
            is_active=True,
        )
        self.db.add(policy)
        self._commit()
        return policy

    def update_policy(self, policy_id, payload) -> tuple[LeavePolicy, dict, dict]:
        policy = self.get_policy(policy_id)
        changes = {field: value for field, value in payload.model_dump(exclude_unset=True).items() if value is not None}
        before = {}
        for field, value in changes.items():
            before[field] = getattr(policy, field)
            if field == "default_days":
                value = Decimal(str(value))
            setattr(policy, field, value)
        self._commit()
        return policy, before, changes

    def bulk_grant(self, payload) -> tuple[LeavePolicy, list[LeaveBalance]]:
        """Create each employee's balance for the year or add to its granted days."""
        policy = self.repo.get_policy(payload.policy_id)
        if policy is None:
            raise not_found("Leave policy not found")

        employees = []
        for employee_id in dict.fromkeys(payload.employee_ids):
            employee = self.employees.get(employee_id)
            if employee is None or employee.company_id != policy.company_id:
                raise not_found("Employee not found", details={"employee_id": str(employee_id)})
            employees.append(employee)

        days = Decimal(str(payload.days))
        balances = []
        for employee in employees:
            balance = self.repo.get_balance(employee.id, policy.id, payload.year, for_update=True)
            if balance is None:
                balance = LeaveBalance(
                    company_id=policy.company_id,
                    employee_id=employee.id,
                    policy_id=policy.id,
                    year=payload.year,
                    granted_days=days,
                    carry_over_days=Decimal("0"),
                    used_days=Decimal("0"),
                    pending_days=Decimal("0"),
                )
                self.db.add(balance)
            else:
                balance.granted_days = balance.granted_days + days
            balances.append(balance)
        self._commit()
        return policy, balances
