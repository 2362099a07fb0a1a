"""Geolocation checks for check-in/check-out"""

import math
from typing import Optional

EARTH_RADIUS_METERS = 6_371_000


class GeolocationError(ValueError):
    """Captured coordinates are missing or invalid"""


class OutOfRangeError(ValueError):
    """Captured coordinates are too far from the shift location"""

    def __init__(self, distance_m: float, radius_m: float):
        self.distance_m = distance_m
        self.radius_m = radius_m
        super().__init__(
            f"You are {distance_m:.0f} m from the shift location (maximum {radius_m:.0f} m)"
        )


def validate_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    if latitude is None or longitude is None:
        raise GeolocationError("Location unavailable. Allow location access and try again.")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise GeolocationError("Invalid coordinates")


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def check_proximity(
    latitude: Optional[float],
    longitude: Optional[float],
    target_latitude: Optional[float],
    target_longitude: Optional[float],
    radius_m: float,
) -> Optional[float]:
    """
    Validate the captured position against the shift location.

    Returns the distance in meters, or None when the shift has no registered
    coordinates (only the presence of a device position is checked then).
    """
    validate_coordinates(latitude, longitude)

    if target_latitude is None or target_longitude is None:
        return None

    distance = haversine_distance(latitude, longitude, target_latitude, target_longitude)
    if distance > radius_m:
        raise OutOfRangeError(distance, radius_m)
    return distance
