"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def _money():
    return sa.Numeric(14, 2)


def _days():
    return sa.Numeric(6, 2)


def _company_fk():
    return sa.Column("company_id", GUID(), sa.ForeignKey("companies.id"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("country_code", sa.String(length=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "roles",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "permissions",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("module", sa.String(length=50), nullable=False),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.UniqueConstraint("module", "action", name="uq_permissions_module_action"),
    )
    op.create_table(
        "role_permissions",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("role_id", GUID(), sa.ForeignKey("roles.id"), nullable=False),
        sa.Column("permission_id", GUID(), sa.ForeignKey("permissions.id"), nullable=False),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permissions_role_permission"),
    )
    op.create_index("ix_role_permissions_role_id", "role_permissions", ["role_id"])
    op.create_index("ix_role_permissions_permission_id", "role_permissions", ["permission_id"])

    op.create_table(
        "employees",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_no", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("job_title", sa.String(length=100), nullable=True),
        sa.Column("manager_id", GUID(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column("resign_date", sa.Date(), nullable=True),
        sa.Column("base_salary", _money(), nullable=False, server_default="0"),
        sa.Column("onboarded_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("company_id", "employee_no", name="uq_employees_company_employee_no"),
    )
    op.create_index("ix_employees_company_id", "employees", ["company_id"])

    op.create_table(
        "users",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="EMPLOYEE"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_company_id", "users", ["company_id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "leave_policies",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("leave_type", sa.String(length=30), nullable=False, server_default="ANNUAL"),
        sa.Column("default_days", _days(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.UniqueConstraint("company_id", "code", name="uq_leave_policies_company_code"),
    )
    op.create_index("ix_leave_policies_company_id", "leave_policies", ["company_id"])

    op.create_table(
        "leave_balances",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("policy_id", GUID(), sa.ForeignKey("leave_policies.id"), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("granted_days", _days(), nullable=False, server_default="0"),
        sa.Column("carry_over_days", _days(), nullable=False, server_default="0"),
        sa.Column("used_days", _days(), nullable=False, server_default="0"),
        sa.Column("pending_days", _days(), nullable=False, server_default="0"),
        sa.UniqueConstraint("employee_id", "policy_id", "year", name="uq_leave_balances_employee_policy_year"),
    )
    op.create_index("ix_leave_balances_company_id", "leave_balances", ["company_id"])
    op.create_index("ix_leave_balances_employee_id", "leave_balances", ["employee_id"])

    op.create_table(
        "leave_requests",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("policy_id", GUID(), sa.ForeignKey("leave_policies.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("days", _days(), nullable=False),
        sa.Column("half_day_type", sa.String(length=2), nullable=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("approved_by", GUID(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_leave_requests_company_id", "leave_requests", ["company_id"])
    op.create_index("ix_leave_requests_employee_id", "leave_requests", ["employee_id"])
    op.create_index("ix_leave_requests_company_status", "leave_requests", ["company_id", "status"])

    op.create_table(
        "payroll_runs",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("run_type", sa.String(length=20), nullable=False, server_default="MONTHLY"),
        sa.Column("year_month", sa.String(length=7), nullable=False),
        sa.Column("period_start", sa.DateTime(), nullable=False),
        sa.Column("period_end", sa.DateTime(), nullable=False),
        sa.Column("pay_date", sa.DateTime(), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="KRW"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="DRAFT"),
        sa.Column("total_gross", _money(), nullable=True),
        sa.Column("total_deductions", _money(), nullable=True),
        sa.Column("total_net", _money(), nullable=True),
        sa.Column("headcount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("calculated_at", sa.DateTime(), nullable=True),
        sa.Column("approved_by", GUID(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", GUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payroll_runs_company_id", "payroll_runs", ["company_id"])
    op.create_index("ix_payroll_runs_company_year_month", "payroll_runs", ["company_id", "year_month"])

    op.create_table(
        "payroll_items",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("run_id", GUID(), sa.ForeignKey("payroll_runs.id"), nullable=False),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("base_salary", _money(), nullable=False),
        sa.Column("gross_pay", _money(), nullable=False),
        sa.Column("deductions", _money(), nullable=False),
        sa.Column("net_pay", _money(), nullable=False),
        sa.Column("is_manually_adjusted", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("adjustment_reason", sa.Text(), nullable=True),
        sa.UniqueConstraint("run_id", "employee_id", name="uq_payroll_items_run_employee"),
    )
    op.create_index("ix_payroll_items_company_id", "payroll_items", ["company_id"])
    op.create_index("ix_payroll_items_run_id", "payroll_items", ["run_id"])

    op.create_table(
        "performance_cycles",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("half", sa.String(length=10), nullable=False),
        sa.Column("goal_start", sa.DateTime(), nullable=False),
        sa.Column("goal_end", sa.DateTime(), nullable=False),
        sa.Column("eval_start", sa.DateTime(), nullable=False),
        sa.Column("eval_end", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="DRAFT"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_performance_cycles_company_id", "performance_cycles", ["company_id"])

    op.create_table(
        "checklist_templates",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("target_type", sa.String(length=30), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
    )
    op.create_index("ix_checklist_templates_company_id", "checklist_templates", ["company_id"])

    op.create_table(
        "checklist_template_tasks",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("template_id", GUID(), sa.ForeignKey("checklist_templates.id"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_checklist_template_tasks_company_id", "checklist_template_tasks", ["company_id"])
    op.create_index("ix_checklist_template_tasks_template_id", "checklist_template_tasks", ["template_id"])

    op.create_table(
        "employee_onboardings",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("template_id", GUID(), sa.ForeignKey("checklist_templates.id"), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="IN_PROGRESS"),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_employee_onboardings_company_id", "employee_onboardings", ["company_id"])
    op.create_index("ix_employee_onboardings_employee_id", "employee_onboardings", ["employee_id"])

    op.create_table(
        "onboarding_tasks",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("onboarding_id", GUID(), sa.ForeignKey("employee_onboardings.id"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("completed_by", GUID(), nullable=True),
    )
    op.create_index("ix_onboarding_tasks_company_id", "onboarding_tasks", ["company_id"])
    op.create_index("ix_onboarding_tasks_onboarding_id", "onboarding_tasks", ["onboarding_id"])

    op.create_table(
        "employee_offboardings",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("template_id", GUID(), sa.ForeignKey("checklist_templates.id"), nullable=True),
        sa.Column("resign_type", sa.String(length=30), nullable=False),
        sa.Column("last_working_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("previous_status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="IN_PROGRESS"),
        sa.Column("started_by", GUID(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_employee_offboardings_company_id", "employee_offboardings", ["company_id"])
    op.create_index("ix_employee_offboardings_employee_id", "employee_offboardings", ["employee_id"])

    op.create_table(
        "offboarding_tasks",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("offboarding_id", GUID(), sa.ForeignKey("employee_offboardings.id"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("completed_by", GUID(), nullable=True),
    )
    op.create_index("ix_offboarding_tasks_company_id", "offboarding_tasks", ["company_id"])
    op.create_index("ix_offboarding_tasks_offboarding_id", "offboarding_tasks", ["offboarding_id"])

    op.create_table(
        "gdpr_consents",
        sa.Column("id", GUID(), primary_key=True),
        _company_fk(),
        sa.Column("employee_id", GUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("purpose", sa.String(length=50), nullable=False),
        sa.Column("legal_basis", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("consented_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("revoke_reason", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_gdpr_consents_company_id", "gdpr_consents", ["company_id"])
    op.create_index("ix_gdpr_consents_employee_id", "gdpr_consents", ["employee_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("company_id", GUID(), nullable=True),
        sa.Column("actor_id", GUID(), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("resource_type", sa.String(length=100), nullable=False),
        sa.Column("resource_id", sa.String(length=100), nullable=True),
        sa.Column("changes", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(length=100), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column("trace_id", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_logs_company_id", "audit_logs", ["company_id"])
    op.create_index("ix_audit_logs_actor_id", "audit_logs", ["actor_id"])
    op.create_index("ix_audit_logs_company_created_at", "audit_logs", ["company_id", "created_at"])


def downgrade() -> None:
    for table in (
        "audit_logs",
        "gdpr_consents",
        "offboarding_tasks",
        "employee_offboardings",
        "onboarding_tasks",
        "employee_onboardings",
        "checklist_template_tasks",
        "checklist_templates",
        "performance_cycles",
        "payroll_items",
        "payroll_runs",
        "leave_requests",
        "leave_balances",
        "leave_policies",
        "users",
        "employees",
        "role_permissions",
        "permissions",
        "roles",
        "companies",
    ):
        op.drop_table(table)
