"""Session lifecycle: inspect the current session, sign out"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
import logging

from auth import SessionContext
from dependencies import get_session_context
from schemas import SessionResponse
from services.token_blacklist import blacklist_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.get("/session", response_model=SessionResponse)
def get_current_session(ctx: SessionContext = Depends(get_session_context)):
    return ctx


@router.post("/signout")
def sign_out(ctx: SessionContext = Depends(get_session_context)):
    """Revoke the caller's token until it would have expired"""
    expires_in = 3600
    if ctx.expires_at:
        expires_in = int((ctx.expires_at - datetime.now(timezone.utc)).total_seconds())

    blacklist_token(ctx.token, ctx.jti, expires_in)
    logger.info(f"User {ctx.user_id} signed out")
    return {"message": "Signed out successfully"}
