from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.hrhub.core.error_catalog import ErrorCatalog
from app.hrhub.core.errors import error_response
from app.hrhub.db.session import get_db

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    return {"status": "ok", "trace_id": trace_id}


@router.get("/ready")
def ready(request: Request, db=Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return error_response(
            request,
            ErrorCatalog.SERVICE_UNAVAILABLE,
            details={"type": exc.__class__.__name__},
        )
    trace_id = getattr(request.state, "trace_id", "")
    return {"status": "ready", "trace_id": trace_id}
