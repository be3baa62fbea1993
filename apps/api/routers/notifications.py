"""Notification feed"""
from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List

from auth import SessionContext
from database import get_session
from dependencies import get_session_context, get_notification_service
from schemas import NotificationResponse
from utils.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
def get_my_notifications(
    ctx: SessionContext = Depends(get_session_context),
    session: Session = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Outcomes of the current user's actions, newest first"""
    return notifier.list_for_user(session, ctx.user_id)
