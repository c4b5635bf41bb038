from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.session import get_db
from app.hrhub.repos.performance import PerformanceCycleRepository
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.schemas.performance import PerformanceCycleCreate, PerformanceCycleOut, PerformanceCycleQuery
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.performance import PerformanceCycleService

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/cycles", response_model=PaginatedEnvelope[PerformanceCycleOut])
def list_performance_cycles(
    _principal: Principal = Depends(require_permission(Module.PERFORMANCE, Action.VIEW)),
    query: PerformanceCycleQuery = Depends(query_model(PerformanceCycleQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = PerformanceCycleRepository(db, scope).list_cycles(
        year=query.year, status=query.status, offset=query.offset, limit=query.limit
    )
    return paginated(
        [PerformanceCycleOut.model_validate(row) for row in rows],
        build_pagination(query.page, query.limit, total),
    )


@router.post("/cycles", response_model=DataEnvelope[PerformanceCycleOut], status_code=status.HTTP_201_CREATED)
def create_performance_cycle(
    request: Request,
    payload: PerformanceCycleCreate,
    principal: Principal = Depends(require_permission(Module.PERFORMANCE, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    cycle = PerformanceCycleService(db, scope).create_cycle(payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="performance.cycle.create",
            resource_type="performance_cycle",
            resource_id=cycle.id,
            company_id=cycle.company_id,
            changes={"name": cycle.name, "year": cycle.year, "half": cycle.half},
        )
    )
    return envelope(PerformanceCycleOut.model_validate(cycle))


@router.get("/cycles/{cycle_id}", response_model=DataEnvelope[PerformanceCycleOut])
def get_performance_cycle(
    cycle_id: str,
    _principal: Principal = Depends(require_permission(Module.PERFORMANCE, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    cycle = PerformanceCycleService(db, scope).get_cycle(cycle_id)
    return envelope(PerformanceCycleOut.model_validate(cycle))


@router.put("/cycles/{cycle_id}/advance", response_model=DataEnvelope[PerformanceCycleOut])
def advance_performance_cycle(
    request: Request,
    cycle_id: str,
    principal: Principal = Depends(require_permission(Module.PERFORMANCE, Action.APPROVE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    cycle, previous_status = PerformanceCycleService(db, scope).advance(cycle_id)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="performance.cycle.advance",
            resource_type="performance_cycle",
            resource_id=cycle.id,
            company_id=cycle.company_id,
            changes={"before": {"status": previous_status}, "after": {"status": cycle.status}},
        )
    )
    return envelope(PerformanceCycleOut.model_validate(cycle))
