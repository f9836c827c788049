"""Time and frame helpers: Julian Day, sidereal time, and angle arithmetic."""

import math
from datetime import datetime

_UNIX_EPOCH_JD = 2440587.5
_J2000_JD = 2451545.0
_MS_PER_DAY = 86_400_000


def epoch_millis(instant: datetime) -> int:
    """Milliseconds since 1970-01-01T00:00:00Z.

    Raises:
        ValueError: If instant is naive (no tzinfo).
    """
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError(f"Instant must be timezone-aware: {instant!r}")
    return math.floor(instant.timestamp() * 1000)


def date_to_julian_day(instant: datetime) -> float:
    """Julian Day at millisecond resolution; the Unix epoch is JD 2440587.5."""
    return epoch_millis(instant) / _MS_PER_DAY + _UNIX_EPOCH_JD


def normalize_degrees(deg: float) -> float:
    """Wrap deg into [0, 360)."""
    wrapped = math.fmod(deg, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    # fmod(-1e-15, 360) + 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def local_sidereal_time(instant: datetime, longitude_deg: float) -> float:
    """Local mean sidereal time in degrees [0, 360).

    Greenwich mean sidereal time from Julian centuries since J2000.0,
    shifted by the observer's east longitude.
    """
    jd = date_to_julian_day(instant)
    d = jd - _J2000_JD
    t = d / 36525.0
    gst = 280.46061837 + 360.98564736629 * d + 0.000387933 * t * t - t**3 / 38710000.0
    return normalize_degrees(normalize_degrees(gst) + longitude_deg)


def angular_separation(a_deg: float, b_deg: float) -> float:
    """Separation of two longitudes (or RAs) along the circle, in [0, 180]."""
    d = abs(normalize_degrees(a_deg) - normalize_degrees(b_deg))
    return 360.0 - d if d > 180.0 else d


def angular_distance(
    ra1_deg: float, dec1_deg: float, ra2_deg: float, dec2_deg: float
) -> float:
    """Great-circle distance between two equatorial positions, in [0, 180]."""
    ra1, dec1 = math.radians(ra1_deg), math.radians(dec1_deg)
    ra2, dec2 = math.radians(ra2_deg), math.radians(dec2_deg)
    cos_d = math.sin(dec1) * math.sin(dec2) + math.cos(dec1) * math.cos(
        dec2
    ) * math.cos(ra1 - ra2)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos_d))))
