from fastapi import APIRouter, Depends

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.session import get_db
from app.hrhub.repos.audit import AuditLogQueryRepository
from app.hrhub.schemas.audit import AuditLogOut, AuditLogQuery
from app.hrhub.schemas.envelope import PaginatedEnvelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/audit-logs", response_model=PaginatedEnvelope[AuditLogOut])
def list_audit_logs(
    _principal: Principal = Depends(require_permission(Module.AUDIT, Action.VIEW)),
    query: AuditLogQuery = Depends(query_model(AuditLogQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = AuditLogQueryRepository(db, scope).list_logs(
        action=query.action,
        resource_type=query.resource_type,
        resource_id=query.resource_id,
        actor_id=query.actor_id,
        created_from=query.created_from,
        created_to=query.created_to,
        offset=query.offset,
        limit=query.limit,
    )
    return paginated([AuditLogOut.model_validate(row) for row in rows], build_pagination(query.page, query.limit, total))
