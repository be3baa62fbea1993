from typing import Optional, List
from datetime import datetime, date, timezone
from decimal import Decimal
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON, String, UniqueConstraint
from enum import Enum
import uuid


def generate_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class RecordType(str, Enum):
    SYMPTOM_CHECK = "symptom_check"
    PRESCRIPTION = "prescription"
    LAB_RESULT = "lab_result"
    CONSULTATION = "consultation"

class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Profile(SQLModel, table=True):
    """User profile; id is the identity provider's user id"""
    __tablename__ = "profiles"

    id: str = Field(primary_key=True)
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# ==================== CATALOG ====================

class Medicine(SQLModel, table=True):
    """Medicine catalog"""
    __tablename__ = "medicines"

    id: str = Field(default_factory=generate_id, primary_key=True)
    name: str = Field(index=True)
    category: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    image_url: Optional[str] = None
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(default=0, ge=0)
    requires_prescription: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Doctor(SQLModel, table=True):
    """Doctor reference data. available_days/hours are descriptive only."""
    __tablename__ = "doctors"

    id: str = Field(default_factory=generate_id, primary_key=True)
    name: str = Field(index=True)
    specialty: str
    consultation_fee: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    experience_years: Optional[int] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    available_days: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    available_hours: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


# ==================== CART & ORDERS ====================

class CartItem(SQLModel, table=True):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "medicine_id", name="uq_cart_items_user_medicine"),)

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(index=True)
    medicine_id: str = Field(foreign_key="medicines.id")
    quantity: int = Field(default=1, ge=1)
    created_at: datetime = Field(default_factory=utc_now)

class Order(SQLModel, table=True):
    """Checkout snapshot of a cart"""
    __tablename__ = "orders"

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(index=True)
    total_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    status: str = Field(default=OrderStatus.PENDING.value, sa_column=Column(String(20)))
    shipping_address: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    id: str = Field(default_factory=generate_id, primary_key=True)
    order_id: str = Field(foreign_key="orders.id", index=True)
    medicine_id: str = Field(foreign_key="medicines.id")
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)  # Price at purchase
    created_at: datetime = Field(default_factory=utc_now)


# ==================== APPOINTMENTS ====================

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(index=True)
    doctor_id: str = Field(foreign_key="doctors.id")
    appointment_date: date
    appointment_time: str  # Format: "HH:MM", one of the fixed slots
    status: str = Field(default=AppointmentStatus.SCHEDULED.value, sa_column=Column(String(20)))
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# ==================== SYMPTOMS & RECORDS ====================

class SymptomCheck(SQLModel, table=True):
    """Append-only symptom check submissions"""
    __tablename__ = "symptom_checks"

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(index=True)
    symptoms: List[str] = Field(sa_column=Column(JSON, nullable=False))
    ai_diagnosis: Optional[str] = None
    severity_level: Optional[str] = Field(default=None, sa_column=Column(String(10)))
    recommendations: Optional[str] = None  # Joined with the recommendation delimiter
    created_at: datetime = Field(default_factory=utc_now)

class HealthRecord(SQLModel, table=True):
    """Append-only health record entries created by the user"""
    __tablename__ = "health_records"

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(index=True)
    record_type: str = Field(sa_column=Column(String(30), nullable=False))
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    data: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now)

class Notification(SQLModel, table=True):
    """One row per reported mutation outcome"""
    __tablename__ = "notifications"

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    message: str
    type: str = Field(default=NotificationType.SUCCESS.value, sa_column=Column(String(10)))
    read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
