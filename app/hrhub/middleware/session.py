from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.hrhub.core.security import decode_token, extract_session_token


class SessionContextMiddleware(BaseHTTPMiddleware):
    """Copies session claims onto ``request.state`` for request logging.

    Authorization always goes through ``get_current_principal``.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.user_id = None
        request.state.company_id = None
        request.state.role = None

        token = extract_session_token(request)
        if token:
            try:
                payload = decode_token(token)
            except JWTError:
                payload = {}
            request.state.user_id = payload.get("sub")
            request.state.company_id = payload.get("company_id")
            request.state.role = payload.get("role")

        return await call_next(request)
