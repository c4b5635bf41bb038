from fastapi import APIRouter, Depends, Request

from app.hrhub.core.constants import Action, Module
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_tenant_scope, require_permission
from app.hrhub.core.scope import TenantScope
from app.hrhub.schemas.envelope import DataEnvelope, envelope
from app.hrhub.schemas.errors import ERROR_RESPONSES
from app.hrhub.schemas.files import PresignDownloadRequest, PresignedUrlOut, PresignUploadRequest
from app.hrhub.services.audit import AuditSink, build_audit_entry, get_audit_sink
from app.hrhub.services.storage import PresignedUrl, StorageService, expires_at

router = APIRouter(responses=ERROR_RESPONSES)


def get_storage_service() -> StorageService:
    return StorageService()


def _presigned_item(presigned: PresignedUrl) -> PresignedUrlOut:
    return PresignedUrlOut(
        url=presigned.url,
        key=presigned.key,
        method=presigned.method,
        expires_in=presigned.expires_in,
        expires_at=expires_at(presigned),
    )


@router.post("/presign-upload", response_model=DataEnvelope[PresignedUrlOut])
def presign_upload(
    request: Request,
    payload: PresignUploadRequest,
    principal: Principal = Depends(require_permission(Module.EMPLOYEES, Action.UPDATE)),
    scope: TenantScope = Depends(get_tenant_scope),
    storage: StorageService = Depends(get_storage_service),
    audit: AuditSink = Depends(get_audit_sink),
):
    company_id = scope.company_for_write()
    presigned = storage.presign_upload(
        company_id=company_id,
        folder=payload.folder,
        filename=payload.filename,
        content_type=payload.content_type,
        trace_id=principal.trace_id,
    )
    audit.log(
        build_audit_entry(
            request,
            principal,
            action="files.presign_upload",
            resource_type="file",
            resource_id=presigned.key,
            company_id=company_id,
            changes={"filename": payload.filename, "content_type": payload.content_type},
        )
    )
    return envelope(_presigned_item(presigned))


@router.post("/presign-download", response_model=DataEnvelope[PresignedUrlOut])
def presign_download(
    payload: PresignDownloadRequest,
    principal: Principal = Depends(require_permission(Module.EMPLOYEES, Action.VIEW)),
    scope: TenantScope = Depends(get_tenant_scope),
    storage: StorageService = Depends(get_storage_service),
):
    presigned = storage.presign_download(
        key=payload.key,
        allowed_company_id=scope.company_id,
        trace_id=principal.trace_id,
    )
    return envelope(_presigned_item(presigned))
