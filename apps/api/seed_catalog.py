#!/usr/bin/env python3
"""
Seed script for the medicine catalog and doctor directory
Run this to populate initial reference data
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from decimal import Decimal
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

load_dotenv()

from database import engine, create_db_and_tables
from models import Medicine, Doctor

MEDICINES = [
    {"name": "Paracetamol 500mg", "category": "Pain Relief", "price": Decimal("4.99"), "stock_quantity": 200},
    {"name": "Ibuprofen 400mg", "category": "Pain Relief", "price": Decimal("6.49"), "stock_quantity": 150},
    {"name": "Cetirizine 10mg", "category": "Allergy", "price": Decimal("3.50"), "stock_quantity": 120},
    {"name": "Amoxicillin 250mg", "category": "Antibiotic", "price": Decimal("9.99"), "stock_quantity": 60,
     "requires_prescription": True},
    {"name": "Vitamin D3 1000IU", "category": "Supplements", "price": Decimal("7.25"), "stock_quantity": 0},
]

DOCTORS = [
    {"name": "Dr. Asha Menon", "specialty": "General Medicine", "consultation_fee": Decimal("40.00"),
     "rating": 4.7, "experience_years": 12, "available_days": ["Mon", "Tue", "Thu"], "available_hours": "09:00-13:00"},
    {"name": "Dr. Karan Patel", "specialty": "Cardiology", "consultation_fee": Decimal("75.00"),
     "rating": 4.8, "experience_years": 18, "available_days": ["Wed", "Fri"], "available_hours": "14:00-17:00"},
    {"name": "Dr. Lena Fischer", "specialty": "Dermatology", "consultation_fee": Decimal("55.00"),
     "rating": 4.5, "experience_years": 8, "available_days": ["Mon", "Wed", "Fri"], "available_hours": "10:00-16:00"},
]


def seed_catalog():
    create_db_and_tables()
    with Session(engine) as session:
        try:
            added = 0
            for data in MEDICINES:
                if not session.exec(select(Medicine).where(Medicine.name == data["name"])).first():
                    session.add(Medicine(**data))
                    added += 1
            for data in DOCTORS:
                if not session.exec(select(Doctor).where(Doctor.name == data["name"])).first():
                    session.add(Doctor(**data))
                    added += 1
            session.commit()
            print(f"✅ Seeded {added} catalog entries")
        except SQLAlchemyError as e:
            session.rollback()
            print(f"❌ Error seeding catalog: {e}")
            raise


if __name__ == "__main__":
    seed_catalog()
