"""Append-only health record entries"""
from typing import List, Optional
import logging

from auth import SessionContext
from exceptions import ValidationError
from models import HealthRecord
from store import Store
from validators.health_record_validator import validate_record_payload

logger = logging.getLogger(__name__)


class HealthRecordService:
    def __init__(self, store: Store):
        self.store = store

    def create(
        self,
        ctx: SessionContext,
        record_type: Optional[str],
        title: Optional[str],
        description: Optional[str] = None,
        file_url: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> HealthRecord:
        if not record_type or not title or not title.strip():
            raise ValidationError("Please fill in all required fields")

        payload = validate_record_payload(record_type, data)
        record = self.store.insert(HealthRecord(
            user_id=ctx.user_id,
            record_type=record_type,
            title=title.strip(),
            description=description or None,
            file_url=file_url,
            data=payload,
        ))
        logger.info(f"Health record {record.id} ({record_type}) added for user {ctx.user_id}")
        return record

    def list_for_user(self, ctx: SessionContext) -> List[HealthRecord]:
        return self.store.select_all(
            HealthRecord,
            HealthRecord.user_id == ctx.user_id,
            order_by=[HealthRecord.created_at.desc()],
        )
