"""Read-only dashboard summaries"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, List, Optional
import logging

from sqlmodel import select

from auth import SessionContext
from exceptions import ValidationError
from models import Appointment, Doctor, HealthRecord, Order, SymptomCheck
from store import Store
from validators.business_rules import get_business_rules

logger = logging.getLogger(__name__)


@dataclass
class ActivityItem:
    type: str
    title: str
    description: str
    date: datetime
    severity: Optional[str] = None
    status: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class ActivityAggregator:
    def __init__(self, store: Store):
        self.store = store

    def stats(self, ctx: SessionContext) -> Dict[str, int]:
        """Four independent counts for the user"""
        return {
            "symptomChecks": self.store.count(SymptomCheck, SymptomCheck.user_id == ctx.user_id),
            "appointments": self.store.count(Appointment, Appointment.user_id == ctx.user_id),
            "orders": self.store.count(Order, Order.user_id == ctx.user_id),
            "healthRecords": self.store.count(HealthRecord, HealthRecord.user_id == ctx.user_id),
        }

    def _recent_symptom_checks(self, ctx: SessionContext, fanout: int) -> List[ActivityItem]:
        preview = get_business_rules().ACTIVITY_SYMPTOM_PREVIEW
        checks = self.store.select_all(
            SymptomCheck,
            SymptomCheck.user_id == ctx.user_id,
            order_by=[SymptomCheck.created_at.desc()],
            limit=fanout,
        )
        return [
            ActivityItem(
                type="symptom_check",
                title="Symptom Analysis",
                description=f"Analyzed symptoms: {', '.join(check.symptoms[:preview])}",
                date=check.created_at,
                severity=check.severity_level,
            )
            for check in checks
        ]

    def _recent_appointments(self, ctx: SessionContext, fanout: int) -> List[ActivityItem]:
        rows = self.store.select_rows(
            Appointment,
            select(Appointment, Doctor)
            .join(Doctor, Appointment.doctor_id == Doctor.id, isouter=True)
            .where(Appointment.user_id == ctx.user_id)
            .order_by(Appointment.created_at.desc())
            .limit(fanout),
        )
        return [
            ActivityItem(
                type="appointment",
                title=f"Appointment with {doctor.name}" if doctor else "Appointment",
                description=doctor.specialty if doctor else "",
                date=appointment.created_at,
                status=appointment.status,
            )
            for appointment, doctor in rows
        ]

    def recent_activity(self, ctx: SessionContext, limit: Optional[int] = None) -> List[ActivityItem]:
        """Latest symptom checks and appointments merged, newest first.

        A fixed number of each kind is fetched regardless of `limit`; ties on
        date keep symptom checks ahead of appointments.
        """
        rules = get_business_rules()
        if limit is None:
            limit = rules.RECENT_ACTIVITY_LIMIT
        if limit < 0:
            raise ValidationError("Limit must not be negative")

        fanout = rules.RECENT_ACTIVITY_FANOUT
        activities = self._recent_symptom_checks(ctx, fanout) + self._recent_appointments(ctx, fanout)
        activities = sorted(activities, key=lambda item: item.date, reverse=True)
        return activities[:limit]
