from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.session import get_db
from app.hrhub.repos.checklists import ChecklistTemplateRepository, OffboardingRepository
from app.hrhub.schemas.checklists import (
    ChecklistQuery,
    ChecklistTaskOut,
    ChecklistTemplateOut,
    OffboardingChecklistCreate,
    OffboardingOut,
    OffboardingStart,
)
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.checklists import ChecklistTemplateService, OffboardingService

router = APIRouter(responses=ERROR_RESPONSES)


@router.post(
    "/employees/{employee_id}/offboarding/start",
    response_model=DataEnvelope[OffboardingOut],
    status_code=status.HTTP_201_CREATED,
)
def start_offboarding(
    request: Request,
    employee_id: str,
    payload: OffboardingStart,
    principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    offboarding = OffboardingService(db, scope).start(employee_id, principal, payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="offboarding.start",
            resource_type="employee_offboarding",
            resource_id=offboarding.id,
            company_id=offboarding.company_id,
            changes={
                "employee_id": offboarding.employee_id,
                "resign_type": offboarding.resign_type,
                "last_working_date": offboarding.last_working_date,
            },
        )
    )
    return envelope(OffboardingOut.model_validate(offboarding))


@router.get("/offboarding", response_model=PaginatedEnvelope[OffboardingOut])
def list_offboardings(
    _principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.VIEW)),
    query: ChecklistQuery = Depends(query_model(ChecklistQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = OffboardingRepository(db, scope).list_offboardings(
        status=query.status, employee_id=query.employee_id, offset=query.offset, limit=query.limit
    )
    return paginated(
        [OffboardingOut.model_validate(row) for row in rows],
        build_pagination(query.page, query.limit, total),
    )


@router.get("/offboarding/checklists", response_model=DataEnvelope[list[ChecklistTemplateOut]])
def list_offboarding_checklists(
    include_inactive: bool = False,
    _principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows = ChecklistTemplateRepository(db, scope).list_templates("OFFBOARDING", include_inactive=include_inactive)
    return envelope([ChecklistTemplateOut.model_validate(row) for row in rows])


@router.post(
    "/offboarding/checklists",
    response_model=DataEnvelope[ChecklistTemplateOut],
    status_code=status.HTTP_201_CREATED,
)
def publish_offboarding_checklist(
    request: Request,
    payload: OffboardingChecklistCreate,
    principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    template, previous = ChecklistTemplateService(db, scope).publish("OFFBOARDING", payload.resign_type, payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="offboarding.checklist.publish",
            resource_type="checklist_template",
            resource_id=template.id,
            company_id=template.company_id,
            changes={
                "resign_type": template.target_type,
                "replaced_template_id": previous.id if previous else None,
                "tasks": len(template.tasks),
            },
        )
    )
    return envelope(ChecklistTemplateOut.model_validate(template))


@router.get("/offboarding/{offboarding_id}", response_model=DataEnvelope[OffboardingOut])
def get_offboarding(
    offboarding_id: str,
    _principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    offboarding = OffboardingService(db, scope).get_offboarding(offboarding_id)
    return envelope(OffboardingOut.model_validate(offboarding))


@router.put("/offboarding/{offboarding_id}/tasks/{task_id}/complete", response_model=DataEnvelope[ChecklistTaskOut])
def complete_offboarding_task(
    request: Request,
    offboarding_id: str,
    task_id: str,
    principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    task = OffboardingService(db, scope).complete_task(offboarding_id, task_id, principal)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="offboarding.task.complete",
            resource_type="offboarding_task",
            resource_id=task.id,
            company_id=task.company_id,
            changes={"offboarding_id": offboarding_id, "task": task.title},
        )
    )
    return envelope(ChecklistTaskOut.model_validate(task))


@router.put("/offboarding/{offboarding_id}/cancel", response_model=DataEnvelope[OffboardingOut])
def cancel_offboarding(
    request: Request,
    offboarding_id: str,
    principal: Principal = Depends(require_permission(Module.OFFBOARDING, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    offboarding = OffboardingService(db, scope).cancel(offboarding_id)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="offboarding.cancel",
            resource_type="employee_offboarding",
            resource_id=offboarding.id,
            company_id=offboarding.company_id,
            changes={"restored_status": offboarding.previous_status},
        )
    )
    return envelope(OffboardingOut.model_validate(offboarding))
