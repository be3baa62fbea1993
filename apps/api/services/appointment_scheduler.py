"""Appointment booking and status lifecycle"""
from datetime import date
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple
import logging

from sqlmodel import select

from auth import SessionContext
from exceptions import InvalidTransitionError, NotFoundError, ValidationError
from models import Appointment, AppointmentStatus, Doctor, utc_now
from store import Store
from validators.appointment_validator import (
    validate_required_fields,
    validate_appointment_date_not_past,
    validate_time_slot,
    validate_doctor_exists,
    validate_slot_not_taken,
)
from validators.business_rules import get_business_rules

logger = logging.getLogger(__name__)

# completed and cancelled are terminal
ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    AppointmentStatus.SCHEDULED.value: frozenset({
        AppointmentStatus.COMPLETED.value,
        AppointmentStatus.CANCELLED.value,
    }),
    AppointmentStatus.COMPLETED.value: frozenset(),
    AppointmentStatus.CANCELLED.value: frozenset(),
}


def parse_status(value: str) -> str:
    try:
        return AppointmentStatus(value).value
    except ValueError:
        raise ValidationError(f"Unknown appointment status: {value}")


def check_transition(current: str, requested: str) -> None:
    if requested not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current, requested)


class AppointmentScheduler:
    def __init__(self, store: Store, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    def book(
        self,
        ctx: SessionContext,
        doctor_id: Optional[str],
        appointment_date: Optional[date],
        appointment_time: Optional[str],
        notes: Optional[str] = None,
    ) -> Appointment:
        """Book a consultation. Any fixed slot is bookable regardless of the doctor's hours."""
        validate_required_fields(doctor_id, appointment_date, appointment_time)
        validate_appointment_date_not_past(appointment_date, self.today())
        validate_time_slot(appointment_time)
        doctor = validate_doctor_exists(self.store, doctor_id)

        if get_business_rules().PREVENT_DOUBLE_BOOKING:
            validate_slot_not_taken(self.store, doctor_id, appointment_date, appointment_time)

        appointment = self.store.insert(Appointment(
            user_id=ctx.user_id,
            doctor_id=doctor_id,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            notes=notes or None,
            status=AppointmentStatus.SCHEDULED.value,
        ))
        logger.info(
            f"User {ctx.user_id} booked {doctor.name} on {appointment_date} at {appointment_time}"
        )
        return appointment

    def list_for_user(self, ctx: SessionContext) -> List[Tuple[Appointment, Optional[Doctor]]]:
        """Appointments with their doctor, most recent appointment date first"""
        return self.store.select_rows(
            Appointment,
            select(Appointment, Doctor)
            .join(Doctor, Appointment.doctor_id == Doctor.id, isouter=True)
            .where(Appointment.user_id == ctx.user_id)
            .order_by(Appointment.appointment_date.desc(), Appointment.appointment_time.desc()),
        )

    def get(self, ctx: SessionContext, appointment_id: str) -> Optional[Appointment]:
        """None when the appointment does not exist or belongs to someone else"""
        appointment = self.store.select_by_id(Appointment, appointment_id)
        if appointment is None or appointment.user_id != ctx.user_id:
            return None
        return appointment

    def transition(self, ctx: SessionContext, appointment: Appointment, new_status: str) -> Appointment:
        requested = parse_status(new_status)
        check_transition(appointment.status, requested)

        # only moves the row if nobody changed its status since `appointment` was read
        changed = self.store.update_where(
            Appointment,
            [
                Appointment.id == appointment.id,
                Appointment.user_id == ctx.user_id,
                Appointment.status == appointment.status,
            ],
            {"status": requested, "updated_at": utc_now()},
        )
        if not changed:
            current = self.store.select_by_id(Appointment, appointment.id)
            if current is None or current.user_id != ctx.user_id:
                raise NotFoundError("Appointment not found")
            raise InvalidTransitionError(current.status, requested)

        logger.info(f"Appointment {appointment.id} moved to {requested}")
        return self.store.select_by_id(Appointment, appointment.id)
