from fastapi import FastAPI

from app.hrhub.api import api_router
from app.hrhub.core.config import settings, validate_settings
from app.hrhub.core.errors import setup_exception_handlers
from app.hrhub.core.logging import configure_logging
from app.hrhub.middleware.observability import ObservabilityMiddleware
from app.hrhub.middleware.session import SessionContextMiddleware
from app.hrhub.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    validate_settings(settings)
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(SessionContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
