from fastapi import APIRouter, BackgroundTasks, Depends, status
from typing import List

from auth import SessionContext
from dependencies import get_session_context, get_store, get_notification_service
from models import SymptomCheck
from schemas import (
    SymptomAnalyzeRequest, SymptomAnalysisResponse, SymptomCheckResponse, DiagnosisResponse
)
from services.symptom_analyzer import SymptomAnalyzer
from store import Store, kind_of
from utils.cache import query_cache
from utils.notification_service import NotificationService, reported

router = APIRouter(prefix="/api/symptoms", tags=["Symptom Checker"])


@router.post("/analyze", response_model=SymptomAnalysisResponse, status_code=status.HTTP_201_CREATED)
def analyze_symptoms(
    request: SymptomAnalyzeRequest,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Classify the submitted symptoms and keep the result"""
    with reported(notifier, background_tasks, ctx,
                  ("Analysis complete", "Your symptoms have been analyzed"), "Error"):
        check, classification = SymptomAnalyzer(store).analyze(ctx, request.symptoms)

    return SymptomAnalysisResponse(
        check=SymptomCheckResponse.model_validate(check),
        diagnosis=DiagnosisResponse.model_validate(classification),
    )


@router.get("", response_model=List[SymptomCheckResponse])
def get_symptom_history(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    """Current user's past symptom checks, newest first"""
    def load():
        return [
            SymptomCheckResponse.model_validate(check).model_dump(mode="json")
            for check in SymptomAnalyzer(store).history(ctx)
        ]

    return query_cache.get_or_load(kind_of(SymptomCheck), ctx.user_id, load)
