from datetime import date

from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.error_catalog import bad_request
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.models import LeaveRequest
from app.hrhub.db.session import get_db
from app.hrhub.repos.leave import LeaveRepository
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.schemas.leave import (
    LeaveAdminQuery,
    LeaveBalanceOut,
    LeaveBalanceQuery,
    LeaveBulkGrant,
    LeaveBulkGrantResult,
    LeavePolicyCreate,
    LeavePolicyOut,
    LeavePolicyUpdate,
    LeaveRejectRequest,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveRequestQuery,
)
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.leave import LeaveService

router = APIRouter(responses=ERROR_RESPONSES)


def _request_item(leave_request: LeaveRequest) -> LeaveRequestOut:
    return LeaveRequestOut.model_validate(leave_request)


def _own_employee_id(principal: Principal) -> str:
    if not principal.employee_id:
        raise bad_request("No employee record is linked to this account")
    return principal.employee_id


def _audit_decision(request: Request, principal: Principal, audit: AuditSink, leave_request: LeaveRequest, action: str):
    audit.log(
        build_audit_entry(
            request,
            principal,
            action=action,
            resource_type="leave_request",
            resource_id=leave_request.id,
            company_id=leave_request.company_id,
            changes={"status": leave_request.status, "days": leave_request.days},
        )
    )


@router.get("/requests", response_model=PaginatedEnvelope[LeaveRequestOut])
def list_my_leave_requests(
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.VIEW)),
    query: LeaveRequestQuery = Depends(query_model(LeaveRequestQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = LeaveRepository(db, scope).list_requests(
        employee_id=_own_employee_id(principal),
        status=query.status,
        date_from=query.date_from,
        date_to=query.date_to,
        offset=query.offset,
        limit=query.limit,
    )
    return paginated([_request_item(row) for row in rows], build_pagination(query.page, query.limit, total))


@router.post("/requests", response_model=DataEnvelope[LeaveRequestOut], status_code=status.HTTP_201_CREATED)
def create_leave_request(
    request: Request,
    payload: LeaveRequestCreate,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    leave_request = LeaveService(db, scope).create_request(principal, payload)
    _audit_decision(request, principal, audit, leave_request, "leave.request.create")
    return envelope(_request_item(leave_request))


@router.get("/admin", response_model=PaginatedEnvelope[LeaveRequestOut])
def list_company_leave_requests(
    _principal: Principal = Depends(require_permission(Module.LEAVE, Action.APPROVE)),
    query: LeaveAdminQuery = Depends(query_model(LeaveAdminQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = LeaveRepository(db, scope).list_requests(
        employee_id=query.employee_id,
        status=query.status,
        date_from=query.date_from,
        date_to=query.date_to,
        offset=query.offset,
        limit=query.limit,
    )
    return paginated([_request_item(row) for row in rows], build_pagination(query.page, query.limit, total))


@router.put("/requests/{request_id}/approve", response_model=DataEnvelope[LeaveRequestOut])
def approve_leave_request(
    request: Request,
    request_id: str,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    leave_request = LeaveService(db, scope).approve(request_id, principal)
    _audit_decision(request, principal, audit, leave_request, "leave.request.approve")
    return envelope(_request_item(leave_request))


@router.put("/requests/{request_id}/reject", response_model=DataEnvelope[LeaveRequestOut])
def reject_leave_request(
    request: Request,
    request_id: str,
    payload: LeaveRejectRequest,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    leave_request = LeaveService(db, scope).reject(request_id, principal, payload.rejection_reason)
    _audit_decision(request, principal, audit, leave_request, "leave.request.reject")
    return envelope(_request_item(leave_request))


@router.put("/requests/{request_id}/cancel", response_model=DataEnvelope[LeaveRequestOut])
def cancel_leave_request(
    request: Request,
    request_id: str,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    leave_request = LeaveService(db, scope).cancel(request_id, principal)
    _audit_decision(request, principal, audit, leave_request, "leave.request.cancel")
    return envelope(_request_item(leave_request))


@router.get("/balances", response_model=DataEnvelope[list[LeaveBalanceOut]])
def list_my_leave_balances(
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.VIEW)),
    query: LeaveBalanceQuery = Depends(query_model(LeaveBalanceQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    year = query.year or date.today().year
    balances = LeaveRepository(db, scope).list_balances(_own_employee_id(principal), year)
    return envelope([LeaveBalanceOut.model_validate(balance) for balance in balances])


@router.get("/policies", response_model=DataEnvelope[list[LeavePolicyOut]])
def list_leave_policies(
    _principal: Principal = Depends(require_permission(Module.LEAVE, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    policies = LeaveRepository(db, scope).list_policies()
    return envelope([LeavePolicyOut.model_validate(policy) for policy in policies])


@router.post("/policies", response_model=DataEnvelope[LeavePolicyOut], status_code=status.HTTP_201_CREATED)
def create_leave_policy(
    request: Request,
    payload: LeavePolicyCreate,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    policy = LeaveService(db, scope).create_policy(payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="leave.policy.create",
            resource_type="leave_policy",
            resource_id=policy.id,
            company_id=policy.company_id,
            changes={"code": policy.code, "name": policy.name, "default_days": policy.default_days},
        )
    )
    return envelope(LeavePolicyOut.model_validate(policy))


@router.get("/policies/{policy_id}", response_model=DataEnvelope[LeavePolicyOut])
def get_leave_policy(
    policy_id: str,
    _principal: Principal = Depends(require_permission(Module.LEAVE, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    policy = LeaveService(db, scope).get_policy(policy_id)
    return envelope(LeavePolicyOut.model_validate(policy))


@router.put("/policies/{policy_id}", response_model=DataEnvelope[LeavePolicyOut])
def update_leave_policy(
    request: Request,
    policy_id: str,
    payload: LeavePolicyUpdate,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    policy, before, after = LeaveService(db, scope).update_policy(policy_id, payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="leave.policy.update",
            resource_type="leave_policy",
            resource_id=policy.id,
            company_id=policy.company_id,
            changes={"before": before, "after": after},
        )
    )
    return envelope(LeavePolicyOut.model_validate(policy))


@router.post("/bulk-grant", response_model=DataEnvelope[LeaveBulkGrantResult])
def bulk_grant_leave(
    request: Request,
    payload: LeaveBulkGrant,
    principal: Principal = Depends(require_permission(Module.LEAVE, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    policy, balances = LeaveService(db, scope).bulk_grant(payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="leave.bulk_grant",
            resource_type="leave_balance",
            resource_id=policy.id,
            company_id=policy.company_id,
            changes={
                "policy_id": policy.id,
                "year": payload.year,
                "days": payload.days,
                "employee_count": len(balances),
            },
        )
    )
    return envelope(
        LeaveBulkGrantResult(
            granted_count=len(balances),
            balances=[LeaveBalanceOut.model_validate(balance) for balance in balances],
        )
    )
