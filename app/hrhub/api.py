from fastapi import APIRouter

from app.hrhub.core.config import settings
from app.hrhub.routers.audit_logs import router as audit_logs_router
from app.hrhub.routers.auth import router as auth_router
from app.hrhub.routers.compliance import router as compliance_router
from app.hrhub.routers.cron import router as cron_router
from app.hrhub.routers.employees import router as employees_router
from app.hrhub.routers.files import router as files_router
from app.hrhub.routers.health import router as health_router
from app.hrhub.routers.leave import router as leave_router
from app.hrhub.routers.me import router as me_router
from app.hrhub.routers.metrics import router as metrics_router
from app.hrhub.routers.offboarding import router as offboarding_router
from app.hrhub.routers.onboarding import router as onboarding_router
from app.hrhub.routers.payroll import router as payroll_router
from app.hrhub.routers.performance import router as performance_router

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(health_router, tags=["ops"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(me_router, tags=["auth"])
api_router.include_router(employees_router, prefix="/employees", tags=["employees"])
api_router.include_router(leave_router, prefix="/leave", tags=["leave"])
api_router.include_router(payroll_router, prefix="/payroll", tags=["payroll"])
api_router.include_router(performance_router, prefix="/performance", tags=["performance"])
api_router.include_router(onboarding_router, prefix="/onboarding", tags=["onboarding"])
api_router.include_router(offboarding_router, tags=["offboarding"])
api_router.include_router(compliance_router, prefix="/compliance", tags=["compliance"])
api_router.include_router(files_router, prefix="/files", tags=["files"])
api_router.include_router(audit_logs_router, tags=["audit"])
api_router.include_router(cron_router, prefix="/cron", tags=["cron"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
