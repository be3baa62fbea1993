from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from typing import List

from auth import SessionContext
from dependencies import get_session_context, get_store, get_notification_service
from exceptions import NotFoundError
from models import Appointment, Doctor
from schemas import AppointmentCreate, AppointmentStatusUpdate, AppointmentResponse, DoctorResponse
from services.appointment_scheduler import AppointmentScheduler
from store import Store, kind_of
from utils.cache import query_cache
from utils.notification_service import (
    NotificationService, reported, render_appointment_booked, render_appointment_status
)
from validators.business_rules import get_business_rules

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


def _appointment_response(appointment: Appointment, doctor: Doctor = None) -> AppointmentResponse:
    response = AppointmentResponse.model_validate(appointment)
    if doctor is not None:
        response.doctor = DoctorResponse.model_validate(doctor)
    return response


@router.get("/slots", response_model=List[str])
def list_time_slots():
    """Bookable time slots (the same for every doctor)"""
    return get_business_rules().TIME_SLOTS


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    appointment_data: AppointmentCreate,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Book an appointment; it starts out scheduled"""
    scheduler = AppointmentScheduler(store)
    doctor = store.select_by_id(Doctor, appointment_data.doctor_id) if appointment_data.doctor_id else None
    success_message = render_appointment_booked(
        doctor.name if doctor else "your doctor",
        str(appointment_data.appointment_date),
        appointment_data.appointment_time or "",
    )

    with reported(notifier, background_tasks, ctx,
                  ("Appointment booked", success_message), "Could not book appointment"):
        new_appointment = scheduler.book(
            ctx,
            appointment_data.doctor_id,
            appointment_data.appointment_date,
            appointment_data.appointment_time,
            appointment_data.notes,
        )

    return _appointment_response(new_appointment, doctor)


@router.get("", response_model=List[AppointmentResponse])
def get_my_appointments(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    """Current user's appointments with doctor details, latest date first"""
    def load():
        rows = AppointmentScheduler(store).list_for_user(ctx)
        return [
            _appointment_response(appointment, doctor).model_dump(mode="json")
            for appointment, doctor in rows
        ]

    return query_cache.get_or_load(kind_of(Appointment), ctx.user_id, load)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    appointment = AppointmentScheduler(store).get(ctx, appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return _appointment_response(appointment, store.select_by_id(Doctor, appointment.doctor_id))


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: str,
    status_data: AppointmentStatusUpdate,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Complete or cancel a scheduled appointment"""
    scheduler = AppointmentScheduler(store)
    appointment = scheduler.get(ctx, appointment_id)
    doctor = store.select_by_id(Doctor, appointment.doctor_id) if appointment else None
    success_message = render_appointment_status(doctor.name if doctor else "your doctor", status_data.status)

    with reported(notifier, background_tasks, ctx,
                  ("Appointment updated", success_message), "Could not update appointment"):
        if appointment is None:
            raise NotFoundError("Appointment not found")
        appointment = scheduler.transition(ctx, appointment, status_data.status)

    return _appointment_response(appointment, doctor)
