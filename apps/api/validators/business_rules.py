"""Business rule configuration"""
from typing import List
from pydantic import BaseModel


class BusinessRules(BaseModel):
    """Business rules configuration"""
    # Appointment rules. Doctor available hours are not enforced against these.
    TIME_SLOTS: List[str] = ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00"]
    PREVENT_DOUBLE_BOOKING: bool = False

    # Cart rules
    DEFAULT_CART_INCREMENT: int = 1
    ENFORCE_STOCK_RESERVATION: bool = False

    # Symptom checks
    RECOMMENDATION_DELIMITER: str = "; "

    # Dashboard
    RECENT_ACTIVITY_FANOUT: int = 3
    RECENT_ACTIVITY_LIMIT: int = 5
    ACTIVITY_SYMPTOM_PREVIEW: int = 3


# Global instance - can be loaded from database
business_rules = BusinessRules()


def get_business_rules() -> BusinessRules:
    """Get current business rules"""
    return business_rules


def update_business_rule(key: str, value) -> None:
    """Update a business rule"""
    if key in BusinessRules.model_fields:
        setattr(business_rules, key, value)
    else:
        raise ValueError(f"Unknown business rule: {key}")
