from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
import os
import uuid

# Tokens are issued by the identity provider; the core only verifies them.
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise ValueError(
        "SECRET_KEY environment variable must be set. "
        "Generate a secure key with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
ALGORITHM = "HS256"
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE") or None
ACCESS_TOKEN_EXPIRE_MINUTES = 60


@dataclass(frozen=True)
class SessionContext:
    """The signed-in user for one request. Passed explicitly into every core call."""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    token: Optional[str] = None
    jti: Optional[str] = None
    expires_at: Optional[datetime] = None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token the way the identity provider does (dev and tests)"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4())
    })
    if JWT_AUDIENCE:
        to_encode["aud"] = JWT_AUDIENCE
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a token, checking the revocation list"""
    from services.token_blacklist import is_token_blacklisted

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=JWT_AUDIENCE)
    except JWTError:
        return None

    if is_token_blacklisted(token, payload.get("jti")):
        return None
    return payload


def context_from_payload(payload: dict, token: str) -> Optional[SessionContext]:
    user_id = payload.get("sub")
    if not user_id:
        return None

    metadata = payload.get("user_metadata") or {}
    exp = payload.get("exp")
    return SessionContext(
        user_id=str(user_id),
        email=payload.get("email"),
        full_name=metadata.get("full_name"),
        token=token,
        jti=payload.get("jti"),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
    )
