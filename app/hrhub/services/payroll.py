import logging
from datetime import datetime
from decimal import Decimal

from app.hrhub.core.context import Principal
from app.hrhub.core.error_catalog import bad_request, not_found
from app.hrhub.core.scope import TenantScope
from app.hrhub.db.models import PayrollItem, PayrollRun, utcnow
from app.hrhub.repos.base import as_uuid
from app.hrhub.repos.employees import EmployeeRepository
from app.hrhub.repos.payroll import PayrollRepository
from app.hrhub.services.workflow import PAYROLL_TRANSITIONS, ensure_transition

logger = logging.getLogger("hrhub.payroll")

ZERO = Decimal("0")


def calculate_item_amounts(base_salary: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    """Placeholder pay calculation: gross equals base salary, no deductions.

    Country-specific rules are supplied by an external payroll engine.
    """
    gross = Decimal(base_salary or ZERO)
    deductions = ZERO
    return gross, deductions, gross - deductions


class PayrollService:
    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = PayrollRepository(db, scope)
        self.employees = EmployeeRepository(db, scope)

    def get_run(self, run_id) -> PayrollRun:
        run = self.repo.get(run_id)
        if run is None:
            raise not_found("Payroll run not found")
        return run

    def _move(self, run: PayrollRun, target: str) -> None:
        ensure_transition(PAYROLL_TRANSITIONS, run.status, target, subject="Payroll run")
        run.status = target

    def create_run(self, principal: Principal, payload) -> PayrollRun:
        run = PayrollRun(
            company_id=self.scope.company_for_write(),
            name=payload.name,
            run_type=payload.run_type,
            year_month=payload.year_month,
            period_start=payload.period_start,
            period_end=payload.period_end,
            pay_date=payload.pay_date,
            currency=payload.currency,
            status="DRAFT",
            created_by=as_uuid(principal.user_id),
        )
        self.db.add(run)
        self.db.commit()
        return run

    def calculate(self, run_id) -> PayrollRun:
        run = self.get_run(run_id)
        self._move(run, "CALCULATING")
        self.db.commit()

        try:
            self.repo.delete_items(run.id)
            self.db.flush()
            period_end = run.period_end.date() if isinstance(run.period_end, datetime) else run.period_end
            for employee in self.employees.list_payable(run.company_id, period_end):
                gross, deductions, net = calculate_item_amounts(employee.base_salary)
                self.db.add(
                    PayrollItem(
                        company_id=run.company_id,
                        run_id=run.id,
                        employee_id=employee.id,
                        base_salary=employee.base_salary,
                        gross_pay=gross,
                        deductions=deductions,
                        net_pay=net,
                    )
                )
            self.db.flush()
            self._refresh_totals(run)
            self._move(run, "REVIEW")
            run.calculated_at = utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Payroll calculation failed", extra={"run_id": str(run.id)})
            self._revert_to_draft(run.id)
            raise
        return run

    def _revert_to_draft(self, run_id) -> None:
        run = self.repo.get(run_id)
        if run is None or run.status != "CALCULATING":
            return
        self._move(run, "DRAFT")
        self.db.commit()

    def _refresh_totals(self, run: PayrollRun) -> None:
        total_gross, total_deductions, total_net, headcount = self.repo.sum_items(run.id)
        run.total_gross = Decimal(str(total_gross))
        run.total_deductions = Decimal(str(total_deductions))
        run.total_net = Decimal(str(total_net))
        run.headcount = int(headcount)

    def adjust_item(self, run_id, item_id, payload) -> PayrollItem:
        run = self.get_run(run_id)
        if run.status != "REVIEW":
            raise bad_request("Payroll items can only be adjusted during REVIEW")
        item = self.repo.get_item(run.id, item_id)
        if item is None:
            raise not_found("Payroll item not found")

        if payload.gross_pay is not None:
            item.gross_pay = Decimal(str(payload.gross_pay))
        if payload.deductions is not None:
            item.deductions = Decimal(str(payload.deductions))
        item.net_pay = item.gross_pay - item.deductions
        if item.net_pay < ZERO:
            self.db.rollback()
            raise bad_request("Deductions cannot exceed gross pay")
        item.is_manually_adjusted = True
        item.adjustment_reason = payload.adjustment_reason
        self.db.flush()
        self._refresh_totals(run)
        self.db.commit()
        return item

    def approve(self, run_id, principal: Principal, audit_sink, entry_factory) -> PayrollRun:
        """Approve and write the audit record in the same transaction."""
        run = self.get_run(run_id)
        previous_status = run.status
        self._move(run, "APPROVED")
        run.approved_by = as_uuid(principal.employee_id or principal.user_id)
        run.approved_at = utcnow()
        audit_sink.log_sync(self.db, entry_factory(run, previous_status))
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return run

    def mark_paid(self, run_id) -> PayrollRun:
        run = self.get_run(run_id)
        self._move(run, "PAID")
        run.paid_at = utcnow()
        self.db.commit()
        return run

    def cancel(self, run_id) -> PayrollRun:
        run = self.get_run(run_id)
        self._move(run, "CANCELLED")
        self.db.commit()
        return run
