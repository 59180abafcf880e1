import math
import re

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_REGEX = re.compile(r"^\+?[\d\s\-()]{10,}$")


def is_valid_email(email: str) -> bool:
    if not isinstance(email, str):
        return False
    return EMAIL_REGEX.fullmatch(email) is not None


def is_valid_phone(phone: str) -> bool:
    if not isinstance(phone, str):
        return False
    return PHONE_REGEX.fullmatch(phone) is not None


def is_valid_coordinates(lat: float, lng: float) -> bool:
    # Ambas coordenadas deben ser números finitos dentro del rango geográfico
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180
