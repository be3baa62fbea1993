"""Current user's profile"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
import logging

from auth import SessionContext
from dependencies import get_session_context, get_store, get_notification_service
from models import Profile, utc_now
from schemas import ProfileUpdate, ProfileResponse
from store import Store
from utils.notification_service import NotificationService, reported

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Profiles"])


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    profile = store.select_by_id(Profile, ctx.user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return profile


@router.put("/me", response_model=ProfileResponse)
def upsert_my_profile(
    profile_data: ProfileUpdate,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Create or update the profile keyed on the signed-in user's id"""
    now = utc_now()
    changes = profile_data.model_dump(exclude_unset=True)
    changes["updated_at"] = now

    values = {"id": ctx.user_id, "created_at": now, **changes}
    if "email" not in values and ctx.email:
        values["email"] = ctx.email
    if "full_name" not in values and ctx.full_name:
        values["full_name"] = ctx.full_name

    with reported(notifier, background_tasks, ctx,
                  ("Profile updated", "Your profile has been saved"), "Could not save profile"):
        store.upsert(Profile, values=values, conflict_keys=["id"], update_set=changes)

    logger.info(f"Profile saved for user {ctx.user_id}")
    return store.select_by_id(Profile, ctx.user_id)
