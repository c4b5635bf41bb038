from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.models import OnboardingTask
from app.hrhub.db.session import get_db
from app.hrhub.repos.checklists import ChecklistTemplateRepository, OnboardingRepository
from app.hrhub.schemas.checklists import (
    ChecklistQuery,
    ChecklistTaskOut,
    ChecklistTemplateOut,
    OnboardingCreate,
    OnboardingForceComplete,
    OnboardingOut,
    OnboardingTemplateCreate,
)
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.checklists import ChecklistTemplateService, OnboardingService

router = APIRouter(responses=ERROR_RESPONSES)


def _task_audit(request: Request, principal: Principal, task: OnboardingTask, action: str):
    onboarding = task.onboarding
    return build_audit_entry(
        request,
        principal,
        action=action,
        resource_type="onboarding_task",
        resource_id=task.id,
        company_id=task.company_id,
        changes={"onboarding_id": onboarding.id, "task": task.title, "onboarding_status": onboarding.status},
    )


@router.get("", response_model=PaginatedEnvelope[OnboardingOut])
def list_onboardings(
    _principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.VIEW)),
    query: ChecklistQuery = Depends(query_model(ChecklistQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = OnboardingRepository(db, scope).list_onboardings(
        status=query.status, employee_id=query.employee_id, offset=query.offset, limit=query.limit
    )
    return paginated(
        [OnboardingOut.model_validate(row) for row in rows],
        build_pagination(query.page, query.limit, total),
    )


@router.post("", response_model=DataEnvelope[OnboardingOut], status_code=status.HTTP_201_CREATED)
def start_onboarding(
    request: Request,
    payload: OnboardingCreate,
    principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    onboarding = OnboardingService(db, scope).start(payload.employee_id)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="onboarding.start",
            resource_type="employee_onboarding",
            resource_id=onboarding.id,
            company_id=onboarding.company_id,
            changes={"employee_id": onboarding.employee_id, "tasks": len(onboarding.tasks)},
        )
    )
    return envelope(OnboardingOut.model_validate(onboarding))


@router.get("/templates", response_model=DataEnvelope[list[ChecklistTemplateOut]])
def list_onboarding_templates(
    include_inactive: bool = False,
    _principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows = ChecklistTemplateRepository(db, scope).list_templates("ONBOARDING", include_inactive=include_inactive)
    return envelope([ChecklistTemplateOut.model_validate(row) for row in rows])


@router.post(
    "/templates",
    response_model=DataEnvelope[ChecklistTemplateOut],
    status_code=status.HTTP_201_CREATED,
)
def publish_onboarding_template(
    request: Request,
    payload: OnboardingTemplateCreate,
    principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    template, previous = ChecklistTemplateService(db, scope).publish("ONBOARDING", None, payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="onboarding.template.publish",
            resource_type="checklist_template",
            resource_id=template.id,
            company_id=template.company_id,
            changes={"replaced_template_id": previous.id if previous else None, "tasks": len(template.tasks)},
        )
    )
    return envelope(ChecklistTemplateOut.model_validate(template))


@router.get("/{onboarding_id}", response_model=DataEnvelope[OnboardingOut])
def get_onboarding(
    onboarding_id: str,
    _principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    onboarding = OnboardingService(db, scope).get_onboarding(onboarding_id)
    return envelope(OnboardingOut.model_validate(onboarding))


@router.put("/tasks/{task_id}/complete", response_model=DataEnvelope[ChecklistTaskOut])
def complete_onboarding_task(
    request: Request,
    task_id: str,
    principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    task = OnboardingService(db, scope).update_task(task_id, principal, "DONE")
    audit.log(_task_audit(request, principal, task, "onboarding.task.complete"))
    return envelope(ChecklistTaskOut.model_validate(task))


@router.put("/tasks/{task_id}/skip", response_model=DataEnvelope[ChecklistTaskOut])
def skip_onboarding_task(
    request: Request,
    task_id: str,
    principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    task = OnboardingService(db, scope).update_task(task_id, principal, "SKIPPED")
    audit.log(_task_audit(request, principal, task, "onboarding.task.skip"))
    return envelope(ChecklistTaskOut.model_validate(task))


@router.put("/{onboarding_id}/force-complete", response_model=DataEnvelope[OnboardingOut])
def force_complete_onboarding(
    request: Request,
    onboarding_id: str,
    payload: OnboardingForceComplete,
    principal: Principal = Depends(require_permission(Module.ONBOARDING, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    onboarding, skipped = OnboardingService(db, scope).force_complete(onboarding_id, principal)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="onboarding.force_complete",
            resource_type="employee_onboarding",
            resource_id=onboarding.id,
            company_id=onboarding.company_id,
            changes={"reason": payload.reason, "skipped_tasks": skipped},
        )
    )
    return envelope(OnboardingOut.model_validate(onboarding))
