"""Appointment validation logic"""
from datetime import date
from typing import Optional

from exceptions import ValidationError
from models import Appointment, AppointmentStatus, Doctor
from store import Store
from validators.time_validator import validate_time_format, validate_not_in_past
from validators.business_rules import get_business_rules


def validate_required_fields(doctor_id: Optional[str], appointment_date: Optional[date], appointment_time: Optional[str]) -> None:
    """Doctor, date and time are all required"""
    missing = [
        name for name, value in (
            ("doctor", doctor_id),
            ("date", appointment_date),
            ("time", appointment_time),
        )
        if not value
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def validate_appointment_date_not_past(appointment_date: date, today: Optional[date] = None) -> None:
    validate_not_in_past(appointment_date, today)


def validate_time_slot(appointment_time: str) -> None:
    """Validate the time is one of the bookable slots"""
    validate_time_format(appointment_time)

    slots = get_business_rules().TIME_SLOTS
    if appointment_time not in slots:
        raise ValidationError(
            f"Time {appointment_time} is not a bookable slot. Choose one of: {', '.join(slots)}"
        )


def validate_doctor_exists(store: Store, doctor_id: str) -> Doctor:
    doctor = store.select_by_id(Doctor, doctor_id)
    if doctor is None:
        raise ValidationError("Doctor not found")
    return doctor


def validate_slot_not_taken(store: Store, doctor_id: str, appointment_date: date, appointment_time: str) -> None:
    """Uniqueness of (doctor, date, slot) among scheduled appointments.

    Only applied when the PREVENT_DOUBLE_BOOKING rule is switched on.
    """
    taken = store.count(
        Appointment,
        Appointment.doctor_id == doctor_id,
        Appointment.appointment_date == appointment_date,
        Appointment.appointment_time == appointment_time,
        Appointment.status == AppointmentStatus.SCHEDULED.value,
    )
    if taken:
        raise ValidationError("This slot is already booked for the selected doctor")
