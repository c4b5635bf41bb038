from datetime import date
from decimal import Decimal

from sqlalchemy import select

from app.hrhub.core.config import settings
from app.hrhub.core.constants import Action, Module, Role as RoleCode
from app.hrhub.core.security import get_password_hash
from app.hrhub.db.models import (
    ChecklistTemplate,
    ChecklistTemplateTask,
    Company,
    Employee,
    LeavePolicy,
    Permission,
    Role,
    RolePermission,
    User,
)


DEFAULT_COMPANIES = [
    ("CTR-KR", "CTR Korea", "KR", "KRW", "Asia/Seoul"),
    ("CTR-CN", "CTR China", "CN", "CNY", "Asia/Shanghai"),
    ("CTR-RU", "CTR Russia", "RU", "RUB", "Europe/Moscow"),
    ("CTR-US", "CTR America", "US", "USD", "America/Chicago"),
    ("CTR-MX", "CTR Mexico", "MX", "MXN", "America/Mexico_City"),
    ("CTR-VN", "CTR Vietnam", "VN", "VND", "Asia/Ho_Chi_Minh"),
    ("CTR-EU", "CTR Europe", "PL", "PLN", "Europe/Warsaw"),
]

DEFAULT_ROLES = [
    (RoleCode.SUPER_ADMIN, "Super Admin"),
    (RoleCode.HR_ADMIN, "HR Admin"),
    (RoleCode.EXECUTIVE, "Executive"),
    (RoleCode.MANAGER, "Manager"),
    (RoleCode.EMPLOYEE, "Employee"),
]


def _all_pairs() -> list[tuple[str, str]]:
    return [(module, action) for module in Module.ALL for action in Action.ALL]


def build_default_role_permissions() -> dict[str, list[tuple[str, str]]]:
    hr_admin = [
        (module, action)
        for module, action in _all_pairs()
        if not (module == Module.PAYROLL and action in {Action.APPROVE, Action.DELETE})
    ]
    executive = [
        (module, action)
        for module in (
            Module.EMPLOYEES,
            Module.ORG,
            Module.PERFORMANCE,
            Module.PAYROLL,
            Module.COMPENSATION,
            Module.AUDIT,
        )
        for action in (Action.VIEW, Action.EXPORT)
    ]
    executive += [(Module.PAYROLL, Action.APPROVE), (Module.PERFORMANCE, Action.APPROVE)]
    manager = [
        (Module.EMPLOYEES, Action.VIEW),
        (Module.ORG, Action.VIEW),
        (Module.ATTENDANCE, Action.VIEW),
        (Module.LEAVE, Action.VIEW),
        (Module.LEAVE, Action.CREATE),
        (Module.LEAVE, Action.APPROVE),
        (Module.PERFORMANCE, Action.VIEW),
        (Module.PERFORMANCE, Action.UPDATE),
        (Module.ONBOARDING, Action.VIEW),
        (Module.ONBOARDING, Action.UPDATE),
    ]
    employee = [
        (Module.EMPLOYEES, Action.VIEW),
        (Module.ATTENDANCE, Action.VIEW),
        (Module.ATTENDANCE, Action.CREATE),
        (Module.LEAVE, Action.VIEW),
        (Module.LEAVE, Action.CREATE),
        (Module.PERFORMANCE, Action.VIEW),
        (Module.PERFORMANCE, Action.CREATE),
    ]
    return {
        RoleCode.SUPER_ADMIN: _all_pairs(),
        RoleCode.HR_ADMIN: hr_admin,
        RoleCode.EXECUTIVE: executive,
        RoleCode.MANAGER: manager,
        RoleCode.EMPLOYEE: employee,
    }


DEFAULT_ROLE_PERMISSIONS = build_default_role_permissions()

DEFAULT_ONBOARDING_TASKS = [
    ("Sign employment contract", True),
    ("Issue accounts and equipment", True),
    ("Complete mandatory safety training", True),
    ("Meet the team", False),
]

DEFAULT_OFFBOARDING_TASKS = [
    ("Hand over ongoing work", True),
    ("Return equipment", True),
    ("Revoke system access", True),
    ("Exit interview", False),
]

RESIGN_TYPES = ("VOLUNTARY", "INVOLUNTARY", "RETIREMENT", "CONTRACT_END")


def _get_or_create_companies(db) -> dict[str, Company]:
    existing = {company.code: company for company in db.execute(select(Company)).scalars().all()}
    for code, name, country_code, currency, tz in DEFAULT_COMPANIES:
        if code in existing:
            continue
        company = Company(code=code, name=name, country_code=country_code, currency=currency, timezone=tz)
        db.add(company)
        existing[code] = company
    db.flush()
    return existing


def _get_or_create_permissions(db) -> dict[tuple[str, str], Permission]:
    existing = {
        (perm.module, perm.action): perm for perm in db.execute(select(Permission)).scalars().all()
    }
    for pair in _all_pairs():
        if pair in existing:
            continue
        perm = Permission(module=pair[0], action=pair[1])
        db.add(perm)
        existing[pair] = perm
    db.flush()
    return existing


def _get_or_create_roles(db) -> dict[str, Role]:
    existing = {role.code: role for role in db.execute(select(Role)).scalars().all()}
    for code, name in DEFAULT_ROLES:
        if code in existing:
            continue
        role = Role(code=code, name=name)
        db.add(role)
        existing[code] = role
    db.flush()
    return existing


def _assign_role_permissions(db, roles: dict[str, Role], permissions: dict[tuple[str, str], Permission]) -> None:
    existing = {
        (row.role_id, row.permission_id) for row in db.execute(select(RolePermission)).scalars().all()
    }
    for role_code, pairs in DEFAULT_ROLE_PERMISSIONS.items():
        role = roles[role_code]
        for pair in pairs:
            permission = permissions[pair]
            if (role.id, permission.id) in existing:
                continue
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))
            existing.add((role.id, permission.id))
    db.flush()


def _get_or_create_leave_policies(db, companies: dict[str, Company]) -> None:
    for company in companies.values():
        policy = (
            db.execute(
                select(LeavePolicy).where(LeavePolicy.company_id == company.id, LeavePolicy.code == "ANNUAL")
            )
            .scalars()
            .first()
        )
        if policy:
            continue
        db.add(
            LeavePolicy(
                company_id=company.id,
                code="ANNUAL",
                name="Annual leave",
                leave_type="ANNUAL",
                default_days=Decimal("15"),
            )
        )
    db.flush()


def _create_template(db, company: Company, kind: str, target_type: str | None, name: str, tasks) -> None:
    template = ChecklistTemplate(company_id=company.id, kind=kind, target_type=target_type, name=name)
    db.add(template)
    db.flush()
    for index, (title, is_required) in enumerate(tasks):
        db.add(
            ChecklistTemplateTask(
                company_id=company.id,
                template_id=template.id,
                title=title,
                is_required=is_required,
                sort_order=index,
            )
        )


def _get_or_create_checklist_templates(db, companies: dict[str, Company]) -> None:
    for company in companies.values():
        existing = {
            (row.kind, row.target_type)
            for row in db.execute(select(ChecklistTemplate).where(ChecklistTemplate.company_id == company.id))
            .scalars()
            .all()
        }
        if ("ONBOARDING", None) not in existing:
            _create_template(db, company, "ONBOARDING", None, "Default onboarding", DEFAULT_ONBOARDING_TASKS)
        for resign_type in RESIGN_TYPES:
            if ("OFFBOARDING", resign_type) in existing:
                continue
            _create_template(
                db,
                company,
                "OFFBOARDING",
                resign_type,
                f"Offboarding ({resign_type.lower()})",
                DEFAULT_OFFBOARDING_TASKS,
            )
    db.flush()


def _get_or_create_superadmin(db, company: Company) -> User:
    user = db.execute(select(User).where(User.username == settings.SUPERADMIN_USERNAME)).scalars().first()
    if user:
        return user
    employee = Employee(
        company_id=company.id,
        employee_no="SA-0001",
        name="Super Admin",
        email=settings.SUPERADMIN_EMAIL,
        status="ACTIVE",
        hire_date=date(2020, 1, 1),
    )
    db.add(employee)
    db.flush()
    user = User(
        company_id=company.id,
        employee_id=employee.id,
        username=settings.SUPERADMIN_USERNAME,
        email=settings.SUPERADMIN_EMAIL,
        hashed_password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        role=RoleCode.SUPER_ADMIN,
    )
    db.add(user)
    db.flush()
    return user


def run_seed(db) -> None:
    companies = _get_or_create_companies(db)
    permissions = _get_or_create_permissions(db)
    roles = _get_or_create_roles(db)
    _assign_role_permissions(db, roles, permissions)
    _get_or_create_leave_policies(db, companies)
    _get_or_create_checklist_templates(db, companies)
    _get_or_create_superadmin(db, companies["CTR-KR"])
    db.commit()
