from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session
from database import engine, get_session
from auth import SessionContext, decode_token, context_from_payload
from store import Store
from utils.notification_service import NotificationService

security = HTTPBearer()

notification_service = NotificationService(lambda: Session(engine))

def get_session_context(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> SessionContext:
    """Build the session context for the authenticated caller"""
    token = credentials.credentials
    payload = decode_token(token)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )

    ctx = context_from_payload(payload, token)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject"
        )

    return ctx

def get_store(session: Session = Depends(get_session)) -> Store:
    return Store(session)

def get_notification_service() -> NotificationService:
    return notification_service
