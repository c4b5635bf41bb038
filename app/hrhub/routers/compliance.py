from fastapi import APIRouter, Depends, Request, status

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.pagination import build_pagination
from app.hrhub.core.scope import TenantScope
from app.hrhub.core.validation import query_model
from app.hrhub.db.session import get_db
from app.hrhub.repos.consents import ConsentRepository
from app.hrhub.schemas.compliance import ConsentCreate, ConsentOut, ConsentQuery, ConsentRevoke
from app.hrhub.schemas.envelope import DataEnvelope, PaginatedEnvelope, envelope, paginated
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.consents import ConsentService

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/gdpr/consents", response_model=PaginatedEnvelope[ConsentOut])
def list_consents(
    _principal: Principal = Depends(require_permission(Module.COMPLIANCE, Action.VIEW)),
    query: ConsentQuery = Depends(query_model(ConsentQuery)),
    scope: TenantScope = Depends(get_tenant_scope),
    db=Depends(get_db),
):
    rows, total = ConsentRepository(db, scope).list_consents(
        employee_id=query.employee_id,
        purpose=query.purpose,
        status=query.status,
        offset=query.offset,
        limit=query.limit,
    )
    return paginated([ConsentOut.model_validate(row) for row in rows], build_pagination(query.page, query.limit, total))


@router.post("/gdpr/consents", response_model=DataEnvelope[ConsentOut], status_code=status.HTTP_201_CREATED)
def create_consent(
    request: Request,
    payload: ConsentCreate,
    principal: Principal = Depends(require_permission(Module.COMPLIANCE, Action.CREATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    consent = ConsentService(db, scope).create(payload)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="gdpr.consent.create",
            resource_type="gdpr_consent",
            resource_id=consent.id,
            company_id=consent.company_id,
            changes={"employee_id": consent.employee_id, "purpose": consent.purpose},
        )
    )
    return envelope(ConsentOut.model_validate(consent))


@router.put("/gdpr/consents/{consent_id}/revoke", response_model=DataEnvelope[ConsentOut])
def revoke_consent(
    request: Request,
    consent_id: str,
    payload: ConsentRevoke,
    principal: Principal = Depends(require_permission(Module.COMPLIANCE, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    consent = ConsentService(db, scope).revoke(consent_id, payload.reason)
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="gdpr.consent.revoke",
            resource_type="gdpr_consent",
            resource_id=consent.id,
            company_id=consent.company_id,
            changes={"before": {"status": "ACTIVE"}, "after": {"status": consent.status}, "reason": payload.reason},
        )
    )
    return envelope(ConsentOut.model_validate(consent))
