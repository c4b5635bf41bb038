import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, func, inspect, select
from sqlalchemy.orm import sessionmaker

from app.hrhub.db.models import ChecklistTemplate, Company, LeavePolicy, Permission, RolePermission, User
from app.hrhub.db.seed import DEFAULT_COMPANIES, DEFAULT_ROLE_PERMISSIONS, run_seed


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def test_migrations_apply(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrations.db'}"
    _run_migrations(database_url)

    inspector = inspect(create_engine(database_url, future=True))
    tables = set(inspector.get_table_names())

    for table in (
        "companies",
        "roles",
        "permissions",
        "role_permissions",
        "employees",
        "users",
        "leave_policies",
        "leave_balances",
        "leave_requests",
        "payroll_runs",
        "payroll_items",
        "performance_cycles",
        "checklist_templates",
        "employee_onboardings",
        "onboarding_tasks",
        "employee_offboardings",
        "offboarding_tasks",
        "gdpr_consents",
        "audit_logs",
    ):
        assert table in tables

    indexes = [index["name"] for index in inspector.get_indexes("audit_logs")]
    assert "ix_audit_logs_company_created_at" in indexes


def test_seed_is_idempotent(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'seed.db'}"
    _run_migrations(database_url)
    SessionLocal = sessionmaker(bind=create_engine(database_url, future=True), future=True)

    def _counts(db):
        return tuple(
            db.scalar(select(func.count()).select_from(model))
            for model in (Company, Permission, RolePermission, User, LeavePolicy, ChecklistTemplate)
        )

    with SessionLocal() as db:
        run_seed(db)
        first = _counts(db)
        run_seed(db)
        assert _counts(db) == first

        codes = set(db.execute(select(Company.code)).scalars().all())
        assert codes == {row[0] for row in DEFAULT_COMPANIES}
        assert db.scalar(select(func.count()).select_from(User).where(User.role == "SUPER_ADMIN")) == 1
        expected_links = sum(len(pairs) for pairs in DEFAULT_ROLE_PERMISSIONS.values())
        assert first[2] == expected_links


def test_default_role_permissions_keep_payroll_approval_with_executives():
    hr_admin = set(DEFAULT_ROLE_PERMISSIONS["HR_ADMIN"])
    executive = set(DEFAULT_ROLE_PERMISSIONS["EXECUTIVE"])
    employee = set(DEFAULT_ROLE_PERMISSIONS["EMPLOYEE"])

    assert ("payroll", "approve") not in hr_admin
    assert ("payroll", "create") in hr_admin
    assert ("payroll", "approve") in executive
    assert ("employees", "create") not in employee
    assert ("leave", "create") in employee
