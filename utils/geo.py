from math import radians, cos, sin, atan2, sqrt

EARTH_RADIUS_KM = 6371


def haversine_distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    # Fórmula de Haversine (distancia sobre el círculo máximo)
    d_lat = radians(lat2 - lat1)
    d_lng = radians(lng2 - lng1)
    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lng / 2) ** 2
    )
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c
