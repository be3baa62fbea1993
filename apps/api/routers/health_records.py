"""Health record endpoints"""
from fastapi import APIRouter, BackgroundTasks, Depends, status
from typing import List

from auth import SessionContext
from dependencies import get_session_context, get_store, get_notification_service
from models import HealthRecord
from schemas import HealthRecordCreate, HealthRecordResponse
from services.health_records import HealthRecordService
from store import Store, kind_of
from utils.cache import query_cache
from utils.notification_service import NotificationService, reported

router = APIRouter(prefix="/api/health-records", tags=["Health Records"])


@router.post("", response_model=HealthRecordResponse, status_code=status.HTTP_201_CREATED)
def create_health_record(
    record_data: HealthRecordCreate,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Add a health record for the current user"""
    with reported(notifier, background_tasks, ctx,
                  ("Record added", "Health record has been saved successfully"), "Could not save record"):
        record = HealthRecordService(store).create(ctx, **record_data.model_dump())
    return record


@router.get("", response_model=List[HealthRecordResponse])
def get_my_records(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    """Current user's health records, newest first"""
    def load():
        return [
            HealthRecordResponse.model_validate(record).model_dump(mode="json")
            for record in HealthRecordService(store).list_for_user(ctx)
        ]

    return query_cache.get_or_load(kind_of(HealthRecord), ctx.user_id, load)
