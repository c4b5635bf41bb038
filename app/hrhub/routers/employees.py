from decimal import Decimal

from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.error_catalog import bad_request, not_found
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.models import Employee
from app.hrhub.db.session import get_db
from app.hrhub.repos.checklists import OffboardingRepository
from app.hrhub.repos.companies import CompanyRepository
from app.hrhub.repos.employees import EmployeeRepository
from app.hrhub.schemas.employees import EmployeeCreate, EmployeeListQuery, EmployeeOut, EmployeeUpdate
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink

router = APIRouter(responses=ERROR_RESPONSES)

_NULLABLE_FIELDS = {"department", "job_title", "manager_id"}
_SEPARATED_STATUSES = {"OFFBOARDING", "RESIGNED", "TERMINATED"}


def _employee_item(employee: Employee) -> EmployeeOut:
    return EmployeeOut.model_validate(employee)


def _get_employee_or_404(repo: EmployeeRepository, employee_id: str) -> Employee:
    employee = repo.get(employee_id)
    if employee is None:
        raise not_found("Employee not found")
    return employee


@router.get("", response_model=PaginatedEnvelope[EmployeeOut])
def list_employees(
    _principal: Principal = Depends(require_permission(Module.EMPLOYEES, Action.VIEW)),
    query: EmployeeListQuery = Depends(query_model(EmployeeListQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = EmployeeRepository(db, scope).list_employees(
        status=query.status,
        department=query.department,
        search=query.search,
        offset=query.offset,
        limit=query.limit,
    )
    return paginated([_employee_item(row) for row in rows], build_pagination(query.page, query.limit, total))


@router.get("/{employee_id}", response_model=DataEnvelope[EmployeeOut])
def get_employee(
    employee_id: str,
    _principal: Principal = Depends(require_permission(Module.EMPLOYEES, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    employee = _get_employee_or_404(EmployeeRepository(db, scope), employee_id)
    return envelope(_employee_item(employee))


@router.post("", response_model=DataEnvelope[EmployeeOut], status_code=status.HTTP_201_CREATED)
def create_employee(
    request: Request,
    payload: EmployeeCreate,
    principal: Principal = Depends(require_permission(Module.EMPLOYEES, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    company_id = scope.company_for_write()
    if CompanyRepository(db).get_by_id(company_id) is None:
        raise not_found("Company not found")
    repo = EmployeeRepository(db, scope)
    if payload.manager_id is not None and repo.get(payload.manager_id) is None:
        raise not_found("Manager not found")

    employee = Employee(
        company_id=company_id,
        employee_no=payload.employee_no,
        name=payload.name,
        email=payload.email,
        department=payload.department,
        job_title=payload.job_title,
        manager_id=payload.manager_id,
        hire_date=payload.hire_date,
        base_salary=Decimal(str(payload.base_salary)),
        status="ACTIVE",
    )
    db.add(employee)
    db.commit()

    audit.log(
        build_audit_entry(
            request,
            principal,
            action="employees.create",
            resource_type="employee",
            resource_id=employee.id,
            company_id=employee.company_id,
            changes={"employee_no": employee.employee_no, "name": employee.name},
        )
    )
    return envelope(_employee_item(employee))


@router.patch("/{employee_id}", response_model=DataEnvelope[EmployeeOut])
def update_employee(
    request: Request,
    employee_id: str,
    payload: EmployeeUpdate,
    principal: Principal = Depends(require_permission(Module.EMPLOYEES, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    repo = EmployeeRepository(db, scope)
    employee = _get_employee_or_404(repo, employee_id)
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if changes.get("manager_id") is not None and repo.get(changes["manager_id"]) is None:
        raise not_found("Manager not found")
    if "status" in changes and (
        employee.status in _SEPARATED_STATUSES
        or OffboardingRepository(db, scope).find_in_progress(employee.id) is not None
    ):
        raise bad_request(
            "Employee status cannot change while offboarding is in progress or after separation",
            details={"status": employee.status},
        )

    before = {}
    for field, value in changes.items():
        before[field] = getattr(employee, field)
        if field == "base_salary" and value is not None:
            value = Decimal(str(value))
        setattr(employee, field, value)
    db.commit()

    audit.log(
        build_audit_entry(
            request,
            principal,
            action="employees.update",
            resource_type="employee",
            resource_id=employee.id,
            company_id=employee.company_id,
            changes={"before": before, "after": changes},
        )
    )
    return envelope(_employee_item(employee))
