"""
Bearer token handling. Tokens are issued by the upstream identity provider
and share JWT_SECRET with this service; only access tokens are accepted.
"""
import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from designhub.settings import get_settings

settings = get_settings()


def create_access_token(user_id: uuid.UUID, tenant_id: uuid.UUID) -> str:
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "tenant_id": str(tenant_id), "type": "access", "exp": expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Wrong token type")
    if "sub" not in payload or "tenant_id" not in payload:
        raise JWTError("Missing subject or tenant claim")
    return payload
