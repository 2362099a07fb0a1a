from .geo import GeolocationError, OutOfRangeError, check_proximity, haversine_distance
from .verification import CheckInGate, FaceVerifier, GateResult

__all__ = [
    "CheckInGate",
    "FaceVerifier",
    "GateResult",
    "GeolocationError",
    "OutOfRangeError",
    "check_proximity",
    "haversine_distance",
]
