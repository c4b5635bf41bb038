import logging

from fastapi import APIRouter, Depends, Request

from app.hrhub.core.cron import require_cron_secret
from app.hrhub.core.logging import log_json
from app.hrhub.db.session import get_db
from app.hrhub.schemas.compliance import ConsentExpiryResult
from app.hrhub.schemas.envelope import DataEnvelope, envelope
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.services.audit import AuditEntry, AuditSink, extract_request_meta, get_audit_sink
from app.hrhub.services.consents import expire_due_consents

logger = logging.getLogger("hrhub.cron")

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/expire-consents", response_model=DataEnvelope[ConsentExpiryResult])
def expire_consents(
    request: Request,
    _auth: None = Depends(require_cron_secret),
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    expired = expire_due_consents(db)
    ip, user_agent = extract_request_meta(request)
    trace_id = getattr(request.state, "trace_id", None)
    for consent in expired:
        audit.log(
            AuditEntry(
                action="gdpr.consent.expire",
                resource_type="gdpr_consent",
                resource_id=str(consent.id),
                company_id=str(consent.company_id),
                actor_id=None,
                changes={"before": {"status": "ACTIVE"}, "after": {"status": consent.status}},
                ip=ip,
                user_agent=user_agent,
                trace_id=trace_id,
            )
        )
    log_json(logger, {"event": "consents_expired", "count": len(expired), "trace_id": trace_id})
    return envelope(ConsentExpiryResult(expired=len(expired), consent_ids=[consent.id for consent in expired]))
