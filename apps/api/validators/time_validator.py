"""Date and time validation utilities"""
import re
from datetime import date
from typing import Optional

from exceptions import ValidationError


def validate_time_format(time_str: str) -> bool:
    """Validate time string is in HH:MM format"""
    pattern = r'^([0-1][0-9]|2[0-3]):[0-5][0-9]$'
    if not re.match(pattern, time_str):
        raise ValidationError(
            f"Invalid time format: {time_str}. Use HH:MM format (e.g., 09:00, 14:00)"
        )
    return True


def validate_not_in_past(day: date, today: Optional[date] = None) -> bool:
    """Validate a calendar date is today or later"""
    today = today or date.today()
    if day < today:
        raise ValidationError("Cannot schedule appointments in the past")
    return True
