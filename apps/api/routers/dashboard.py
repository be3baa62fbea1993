"""Health dashboard: counts and the recent activity feed"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from auth import SessionContext
from dependencies import get_session_context, get_store
from schemas import DashboardStats, ActivityItemResponse
from services.activity_aggregator import ActivityAggregator
from store import Store

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    return ActivityAggregator(store).stats(ctx)


@router.get("/recent-activity", response_model=List[ActivityItemResponse])
def get_recent_activity(
    limit: Optional[int] = Query(default=None, ge=0, le=50),
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    """Latest symptom checks and appointments, merged by date"""
    return [item.to_dict() for item in ActivityAggregator(store).recent_activity(ctx, limit)]
