from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Request
from jose import jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from app.hrhub.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenData(BaseModel):
    sub: str
    company_id: str
    employee_id: str | None = None
    role: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def create_session_token(user, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        {
            "sub": str(user.id),
            "company_id": str(user.company_id),
            "employee_id": str(user.employee_id) if user.employee_id else None,
            "role": user.role,
        },
        expires_delta=expires_delta,
    )


def extract_session_token(request: Request) -> str | None:
    """Bearer header wins over the session cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        token = auth_header.split(" ", 1)[1].strip()
        return token or None
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None
