import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import CHAR, TypeDecorator


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class GUID(TypeDecorator):
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


Money = Numeric(14, 2)
Days = Numeric(6, 2)


class Base(DeclarativeBase):
    pass


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    country_code: Mapped[str] = mapped_column(String(2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    permissions = relationship("RolePermission", back_populates="role", cascade="all, delete-orphan")


class Permission(Base):
    __tablename__ = "permissions"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (UniqueConstraint("module", "action", name="uq_permissions_module_action"),)


class RolePermission(Base):
    __tablename__ = "role_permissions"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    role_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("roles.id"), index=True, nullable=False)
    permission_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("permissions.id"), index=True, nullable=False)

    role = relationship("Role", back_populates="permissions")
    permission = relationship("Permission")

    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="uq_role_permissions_role_permission"),)


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    manager_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), ForeignKey("employees.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    resign_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    base_salary: Mapped[Decimal] = mapped_column(Money, default=Decimal("0"), nullable=False)
    onboarded_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "employee_no", name="uq_employees_company_employee_no"),)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), ForeignKey("employees.id"), nullable=True)
    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="EMPLOYEE", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class LeavePolicy(Base):
    __tablename__ = "leave_policies"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    leave_type: Mapped[str] = mapped_column(String(30), default="ANNUAL", nullable=False)
    default_days: Mapped[Decimal] = mapped_column(Days, default=Decimal("0"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "code", name="uq_leave_policies_company_code"),)


class LeaveBalance(Base):
    __tablename__ = "leave_balances"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("employees.id"), index=True, nullable=False)
    policy_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("leave_policies.id"), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    granted_days: Mapped[Decimal] = mapped_column(Days, default=Decimal("0"), nullable=False)
    carry_over_days: Mapped[Decimal] = mapped_column(Days, default=Decimal("0"), nullable=False)
    used_days: Mapped[Decimal] = mapped_column(Days, default=Decimal("0"), nullable=False)
    pending_days: Mapped[Decimal] = mapped_column(Days, default=Decimal("0"), nullable=False)

    policy = relationship("LeavePolicy")

    __table_args__ = (
        UniqueConstraint("employee_id", "policy_id", "year", name="uq_leave_balances_employee_policy_year"),
    )

    @property
    def remaining_days(self) -> Decimal:
        return self.granted_days + self.carry_over_days - self.used_days - self.pending_days


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("employees.id"), index=True, nullable=False)
    policy_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("leave_policies.id"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days: Mapped[Decimal] = mapped_column(Days, nullable=False)
    half_day_type: Mapped[str | None] = mapped_column(String(2), nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class PayrollRun(Base):
    __tablename__ = "payroll_runs"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    run_type: Mapped[str] = mapped_column(String(20), default="MONTHLY", nullable=False)
    year_month: Mapped[str] = mapped_column(String(7), nullable=False)
    period_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    period_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    pay_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default="KRW", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="DRAFT", nullable=False)
    total_gross: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    total_deductions: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    total_net: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    headcount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    calculated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    items = relationship("PayrollItem", back_populates="run", cascade="all, delete-orphan")


class PayrollItem(Base):
    __tablename__ = "payroll_items"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    run_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("payroll_runs.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("employees.id"), nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Money, nullable=False)
    deductions: Mapped[Decimal] = mapped_column(Money, nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(Money, nullable=False)
    is_manually_adjusted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    adjustment_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    run = relationship("PayrollRun", back_populates="items")

    __table_args__ = (UniqueConstraint("run_id", "employee_id", name="uq_payroll_items_run_employee"),)


class PerformanceCycle(Base):
    __tablename__ = "performance_cycles"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    half: Mapped[str] = mapped_column(String(10), nullable=False)
    goal_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    goal_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    eval_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    eval_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="DRAFT", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class ChecklistTemplate(Base):
    __tablename__ = "checklist_templates"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    target_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    tasks = relationship(
        "ChecklistTemplateTask",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="ChecklistTemplateTask.sort_order",
    )


class ChecklistTemplateTask(Base):
    __tablename__ = "checklist_template_tasks"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    template_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("checklist_templates.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    template = relationship("ChecklistTemplate", back_populates="tasks")


class EmployeeOnboarding(Base):
    __tablename__ = "employee_onboardings"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("employees.id"), index=True, nullable=False)
    template_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), ForeignKey("checklist_templates.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="IN_PROGRESS", nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    tasks = relationship(
        "OnboardingTask",
        back_populates="onboarding",
        cascade="all, delete-orphan",
        order_by="OnboardingTask.sort_order",
    )


class OnboardingTask(Base):
    __tablename__ = "onboarding_tasks"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    onboarding_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("employee_onboardings.id"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    completed_by: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)

    onboarding = relationship("EmployeeOnboarding", back_populates="tasks")


class EmployeeOffboarding(Base):
    __tablename__ = "employee_offboardings"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("employees.id"), index=True, nullable=False)
    template_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), ForeignKey("checklist_templates.id"), nullable=True)
    resign_type: Mapped[str] = mapped_column(String(30), nullable=False)
    last_working_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    previous_status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="IN_PROGRESS", nullable=False)
    started_by: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    tasks = relationship(
        "OffboardingTask",
        back_populates="offboarding",
        cascade="all, delete-orphan",
        order_by="OffboardingTask.sort_order",
    )


class OffboardingTask(Base):
    __tablename__ = "offboarding_tasks"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    offboarding_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("employee_offboardings.id"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    completed_by: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)

    offboarding = relationship("EmployeeOffboarding", back_populates="tasks")


class GdprConsent(Base):
    __tablename__ = "gdpr_consents"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("companies.id"), index=True, nullable=False)
    employee_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("employees.id"), index=True, nullable=False)
    purpose: Mapped[str] = mapped_column(String(50), nullable=False)
    legal_basis: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)
    consented_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    revoke_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), index=True, nullable=True)
    actor_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), index=True, nullable=True)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    changes: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(100), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    trace_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


Index("ix_leave_requests_company_status", LeaveRequest.company_id, LeaveRequest.status)
Index("ix_payroll_runs_company_year_month", PayrollRun.company_id, PayrollRun.year_month)
Index("ix_audit_logs_company_created_at", AuditLog.company_id, AuditLog.created_at)
