"""
Services package for the portal API
Contains the business logic behind the routers
"""

from .cart_manager import CartManager, compute_total, quantity_of
from .appointment_scheduler import AppointmentScheduler
from .symptom_analyzer import SymptomAnalyzer, FixedRuleClassifier, Classification
from .activity_aggregator import ActivityAggregator
from .health_records import HealthRecordService

__all__ = [
    'CartManager',
    'compute_total',
    'quantity_of',
    'AppointmentScheduler',
    'SymptomAnalyzer',
    'FixedRuleClassifier',
    'Classification',
    'ActivityAggregator',
    'HealthRecordService',
]
