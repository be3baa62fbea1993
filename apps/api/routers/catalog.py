"""Medicine and doctor reference data (read-only)"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from typing import List, Optional

from dependencies import get_store
from models import Doctor, Medicine
from schemas import DoctorResponse, MedicineResponse
from store import Store

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/medicines", response_model=List[MedicineResponse])
def list_medicines(
    search: Optional[str] = None,
    store: Store = Depends(get_store)
):
    """Medicine catalog, optionally filtered by name or category"""
    filters = []
    if search:
        filters.append(or_(
            Medicine.name.ilike(f"%{search}%"),
            Medicine.category.ilike(f"%{search}%"),
        ))
    return store.select_all(Medicine, *filters, order_by=[Medicine.name])


@router.get("/medicines/{medicine_id}", response_model=MedicineResponse)
def get_medicine(
    medicine_id: str,
    store: Store = Depends(get_store)
):
    medicine = store.select_by_id(Medicine, medicine_id)
    if not medicine:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Medicine not found"
        )
    return medicine


@router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors(
    specialty: Optional[str] = None,
    store: Store = Depends(get_store)
):
    filters = [Doctor.specialty == specialty] if specialty else []
    return store.select_all(Doctor, *filters, order_by=[Doctor.name])


@router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
def get_doctor(
    doctor_id: str,
    store: Store = Depends(get_store)
):
    doctor = store.select_by_id(Doctor, doctor_id)
    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Doctor not found"
        )
    return doctor
