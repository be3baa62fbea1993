from typing import Optional, List
from pydantic import BaseModel, EmailStr
from datetime import datetime, date
from decimal import Decimal

# Session & profile schemas
class SessionResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    avatar_url: Optional[str] = None

class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    avatar_url: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True

# Catalog schemas
class MedicineResponse(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    image_url: Optional[str] = None
    price: Decimal
    stock_quantity: int
    requires_prescription: bool

    class Config:
        from_attributes = True

class DoctorResponse(BaseModel):
    id: str
    name: str
    specialty: str
    consultation_fee: Optional[Decimal] = None
    rating: Optional[float] = None
    experience_years: Optional[int] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    available_days: Optional[List[str]] = None
    available_hours: Optional[str] = None

    class Config:
        from_attributes = True

# Cart schemas
class CartItemAdd(BaseModel):
    medicine_id: str
    quantity: Optional[int] = None  # Increment; defaults to one

class CartQuantityUpdate(BaseModel):
    quantity: int

class CartItemResponse(BaseModel):
    id: str
    medicine_id: str
    quantity: int

    class Config:
        from_attributes = True

class CartLineResponse(BaseModel):
    id: str
    medicine_id: str
    name: str
    category: Optional[str] = None
    price: Decimal
    quantity: int
    stock_quantity: int
    requires_prescription: bool

    class Config:
        from_attributes = True

class CartResponse(BaseModel):
    items: List[CartLineResponse]
    item_count: int
    total: Decimal

class CartUpdateResponse(BaseModel):
    medicine_id: str
    quantity: int
    item: Optional[CartItemResponse] = None

# Order schemas
class CheckoutRequest(BaseModel):
    shipping_address: Optional[str] = None

class OrderItemResponse(BaseModel):
    id: str
    medicine_id: str
    quantity: int
    price: Decimal

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    id: str
    status: str
    total_amount: Decimal
    shipping_address: Optional[str] = None
    created_at: datetime
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True

# Appointment schemas
class AppointmentCreate(BaseModel):
    doctor_id: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    notes: Optional[str] = None

class AppointmentStatusUpdate(BaseModel):
    status: str

class AppointmentResponse(BaseModel):
    id: str
    doctor_id: str
    appointment_date: date
    appointment_time: str
    status: str
    notes: Optional[str] = None
    created_at: datetime
    doctor: Optional[DoctorResponse] = None

    class Config:
        from_attributes = True

# Symptom schemas
class SymptomAnalyzeRequest(BaseModel):
    symptoms: List[str] = []

class DiagnosisResponse(BaseModel):
    condition: str
    severity: str
    recommendations: List[str]
    confidence: int

    class Config:
        from_attributes = True

class SymptomCheckResponse(BaseModel):
    id: str
    symptoms: List[str]
    ai_diagnosis: Optional[str] = None
    severity_level: Optional[str] = None
    recommendations: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class SymptomAnalysisResponse(BaseModel):
    check: SymptomCheckResponse
    diagnosis: DiagnosisResponse

# Health record schemas
class HealthRecordCreate(BaseModel):
    record_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    file_url: Optional[str] = None
    data: Optional[dict] = None

class HealthRecordResponse(BaseModel):
    id: str
    record_type: str
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    data: Optional[dict] = None
    created_at: datetime

    class Config:
        from_attributes = True

# Dashboard schemas
class DashboardStats(BaseModel):
    symptomChecks: int
    appointments: int
    orders: int
    healthRecords: int

class ActivityItemResponse(BaseModel):
    type: str
    title: str
    description: str
    date: datetime
    severity: Optional[str] = None
    status: Optional[str] = None

    class Config:
        from_attributes = True

class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    type: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True
