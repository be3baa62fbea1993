"""In-app notification surface.

Every mutation reports exactly one outcome, success or failure. Successes are
written from a background task after the response is sent; failures are
written before the error propagates. Writing a notification never raises.
"""
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple
import logging

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from auth import SessionContext
from exceptions import PortalError
from models import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def notify(self, user_id: str, success: bool, title: str, message: str) -> Optional[Notification]:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=(NotificationType.SUCCESS if success else NotificationType.ERROR).value,
        )
        try:
            with self.session_factory() as session:
                session.add(notification)
                session.commit()
                session.refresh(notification)
        except SQLAlchemyError as e:
            logger.error(f"Could not record notification '{title}' for user {user_id}: {e}")
            return None
        return notification

    def list_for_user(self, session: Session, user_id: str) -> List[Notification]:
        return list(session.exec(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        ).all())


@contextmanager
def reported(
    notifier: NotificationService,
    background_tasks: BackgroundTasks,
    ctx: SessionContext,
    success: Tuple[str, str],
    failure_title: str,
) -> Iterator[None]:
    """Report the outcome of the enclosed mutation once"""
    try:
        yield
    except PortalError as e:
        notifier.notify(ctx.user_id, False, failure_title, e.detail)
        raise
    background_tasks.add_task(notifier.notify, ctx.user_id, True, *success)


def render_appointment_booked(doctor_name: str, date: str, time: str) -> str:
    return f"Your appointment with {doctor_name} on {date} at {time} has been scheduled"


def render_appointment_status(doctor_name: str, status: str) -> str:
    return f"Your appointment with {doctor_name} is now {status}"
