from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.models import PayrollRun
from app.hrhub.db.session import get_db
from app.hrhub.repos.payroll import PayrollRepository
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.schemas.payroll import (
    PayrollItemAdjust,
    PayrollItemOut,
    PayrollRunCreate,
    PayrollRunDetail,
    PayrollRunOut,
    PayrollRunQuery,
)
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.payroll import PayrollService

router = APIRouter(responses=ERROR_RESPONSES)


def _run_detail(service: PayrollService, run: PayrollRun) -> PayrollRunDetail:
    items = [PayrollItemOut.model_validate(item) for item in service.repo.list_items(run.id)]
    return PayrollRunDetail(**PayrollRunOut.model_validate(run).model_dump(), items=items)


def _status_audit(request: Request, principal: Principal, run: PayrollRun, action: str, previous_status: str):
    return build_audit_entry(
        request,
        principal,
        action=action,
        resource_type="payroll_run",
        resource_id=run.id,
        company_id=run.company_id,
        changes={"before": {"status": previous_status}, "after": {"status": run.status}},
    )


@router.get("/runs", response_model=PaginatedEnvelope[PayrollRunOut])
def list_payroll_runs(
    _principal: Principal = Depends(require_permission(Module.PAYROLL, Action.VIEW)),
    query: PayrollRunQuery = Depends(query_model(PayrollRunQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = PayrollRepository(db, scope).list_runs(
        status=query.status,
        year_month=query.year_month,
        run_type=query.run_type,
        offset=query.offset,
        limit=query.limit,
    )
    return paginated(
        [PayrollRunOut.model_validate(row) for row in rows],
        build_pagination(query.page, query.limit, total),
    )


@router.post("/runs", response_model=DataEnvelope[PayrollRunOut], status_code=status.HTTP_201_CREATED)
def create_payroll_run(
    request: Request,
    payload: PayrollRunCreate,
    principal: Principal = Depends(require_permission(Module.PAYROLL, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    run = PayrollService(db, scope).create_run(principal, payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="payroll.run.create",
            resource_type="payroll_run",
            resource_id=run.id,
            company_id=run.company_id,
            changes={"name": run.name, "year_month": run.year_month, "run_type": run.run_type},
        )
    )
    return envelope(PayrollRunOut.model_validate(run))


@router.get("/runs/{run_id}", response_model=DataEnvelope[PayrollRunDetail])
def get_payroll_run(
    run_id: str,
    _principal: Principal = Depends(require_permission(Module.PAYROLL, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    service = PayrollService(db, scope)
    return envelope(_run_detail(service, service.get_run(run_id)))


@router.post("/runs/{run_id}/calculate", response_model=DataEnvelope[PayrollRunDetail])
def calculate_payroll_run(
    request: Request,
    run_id: str,
    principal: Principal = Depends(require_permission(Module.PAYROLL, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    service = PayrollService(db, scope)
    run = service.calculate(run_id)
    audit.log(_status_audit(request, principal, run, "payroll.run.calculate", "DRAFT"))
    return envelope(_run_detail(service, run))


@router.put("/runs/{run_id}/items/{item_id}", response_model=DataEnvelope[PayrollItemOut])
def adjust_payroll_item(
    request: Request,
    run_id: str,
    item_id: str,
    payload: PayrollItemAdjust,
    principal: Principal = Depends(require_permission(Module.PAYROLL, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    item = PayrollService(db, scope).adjust_item(run_id, item_id, payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="payroll.item.adjust",
            resource_type="payroll_item",
            resource_id=item.id,
            company_id=item.company_id,
            changes={
                "gross_pay": item.gross_pay,
                "deductions": item.deductions,
                "net_pay": item.net_pay,
                "reason": item.adjustment_reason,
            },
        )
    )
    return envelope(PayrollItemOut.model_validate(item))


@router.post("/runs/{run_id}/approve", response_model=DataEnvelope[PayrollRunOut])
def approve_payroll_run(
    request: Request,
    run_id: str,
    principal: Principal = Depends(require_permission(Module.PAYROLL, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    run = PayrollService(db, scope).approve(
        run_id,
        principal,
        audit,
        lambda approved, previous: _status_audit(request, principal, approved, "payroll.run.approve", previous),
    )
    return envelope(PayrollRunOut.model_validate(run))


@router.post("/runs/{run_id}/pay", response_model=DataEnvelope[PayrollRunOut])
def mark_payroll_run_paid(
    request: Request,
    run_id: str,
    principal: Principal = Depends(require_permission(Module.PAYROLL, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    run = PayrollService(db, scope).mark_paid(run_id)
    audit.log(_status_audit(request, principal, run, "payroll.run.pay", "APPROVED"))
    return envelope(PayrollRunOut.model_validate(run))


@router.post("/runs/{run_id}/cancel", response_model=DataEnvelope[PayrollRunOut])
def cancel_payroll_run(
    request: Request,
    run_id: str,
    principal: Principal = Depends(require_permission(Module.PAYROLL, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    service = PayrollService(db, scope)
    previous_status = service.get_run(run_id).status
    run = service.cancel(run_id)
    audit.log(_status_audit(request, principal, run, "payroll.run.cancel", previous_status))
    return envelope(PayrollRunOut.model_validate(run))
