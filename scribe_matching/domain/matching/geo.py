"""
Geographic and calendar helpers used by eligibility and factor scoring.
"""

import math
from datetime import date

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two lat/lon points (Haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def time_to_minutes(value: str) -> int:
    """Convert an HH:MM string to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def time_ranges_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """Half-open interval overlap: [start1, end1) intersects [start2, end2)."""
    return (
        time_to_minutes(start1) < time_to_minutes(end2)
        and time_to_minutes(start2) < time_to_minutes(end1)
    )


def day_of_week_index(day: date) -> int:
    """Weekday index with 0 = Sunday, 6 = Saturday."""
    return (day.weekday() + 1) % 7


def age_on(date_of_birth: date, reference: date) -> int:
    """Whole years between birth and reference, minus one if the birthday hasn't come yet."""
    age = reference.year - date_of_birth.year
    if (reference.month, reference.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age
