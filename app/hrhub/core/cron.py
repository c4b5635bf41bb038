import hmac

from fastapi import Request

from app.hrhub.core.config import settings
from app.hrhub.core.error_catalog import service_unavailable, unauthorized


def require_cron_secret(request: Request) -> None:
    """Authenticate scheduler calls with ``Authorization: Bearer <CRON_SECRET>``."""
    expected = settings.CRON_SECRET
    if not expected:
        raise service_unavailable("Cron secret is not configured")
    auth_header = request.headers.get("Authorization") or ""
    if not auth_header.lower().startswith("bearer "):
        raise unauthorized()
    provided = auth_header.split(" ", 1)[1].strip()
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise unauthorized()
