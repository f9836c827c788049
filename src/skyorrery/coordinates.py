"""Coordinate transforms between equatorial, horizontal, and ecliptic frames.

Axis conventions used by every Cartesian helper here (renderers depend on them):

  Horizontal (sky dome):  x = East, y = Zenith, z = South (i.e. -North)
  Ecliptic (orbit view):  x = vernal equinox, y = ecliptic north pole,
                          z = -(ecliptic longitude 90°)

The engine itself only publishes angles and distances; these helpers exist so
that every consumer embeds them the same way.
"""

import math

from skyorrery.models import HorizontalCoord
from skyorrery.timeframe import normalize_degrees

# Fixed obliquity for overlay lines only. Body positions never use it.
OVERLAY_OBLIQUITY_DEG = 23.44
# J2000 mean obliquity, for rotating ICRF vectors into the ecliptic frame.
J2000_OBLIQUITY_DEG = 23.4392911

_POLE_EPSILON = 1e-10


def _clamp(x: float) -> float:
    return max(-1.0, min(1.0, x))


def equatorial_to_horizontal(
    ra_deg: float, dec_deg: float, lat_deg: float, lst_deg: float
) -> HorizontalCoord:
    """Convert RA/Dec to altitude/azimuth for an observer at lat_deg.

    Near the poles (or for a body at zenith/nadir) cos(alt)·cos(lat) vanishes
    and the cosine rule is undefined; azimuth then comes straight from the
    hour angle.

    Args:
        ra_deg: Right ascension (degrees).
        dec_deg: Declination (degrees).
        lat_deg: Observer latitude (degrees).
        lst_deg: Local sidereal time (degrees).

    Returns:
        HorizontalCoord with alt in [-90, 90] and az in [0, 360).
    """
    ha = normalize_degrees(lst_deg - ra_deg)
    ha_rad = math.radians(ha)
    dec = math.radians(dec_deg)
    lat = math.radians(lat_deg)

    sin_alt = math.sin(dec) * math.sin(lat) + math.cos(dec) * math.cos(
        lat
    ) * math.cos(ha_rad)
    alt_rad = math.asin(_clamp(sin_alt))
    alt_deg = math.degrees(alt_rad)

    denom = math.cos(alt_rad) * math.cos(lat)
    if abs(denom) < _POLE_EPSILON:
        az = normalize_degrees(180.0 - ha) if alt_deg > 0 else ha
        return HorizontalCoord(alt_deg=alt_deg, az_deg=normalize_degrees(az))

    cos_az = (math.sin(dec) - math.sin(alt_rad) * math.sin(lat)) / denom
    az = math.degrees(math.acos(_clamp(cos_az)))
    if math.sin(ha_rad) > 0:
        az = 360.0 - az
    return HorizontalCoord(alt_deg=alt_deg, az_deg=normalize_degrees(az))


def ecliptic_to_equatorial_approx(
    lon_deg: float, lat_deg: float = 0.0
) -> tuple[float, float]:
    """Ecliptic (lon, lat) to (ra_deg, dec_deg) with the fixed overlay obliquity."""
    eps = math.radians(OVERLAY_OBLIQUITY_DEG)
    lon = math.radians(lon_deg)
    lat = math.radians(lat_deg)
    ra = math.atan2(
        math.sin(lon) * math.cos(eps) - math.tan(lat) * math.sin(eps), math.cos(lon)
    )
    dec = math.asin(
        _clamp(
            math.sin(lat) * math.cos(eps)
            + math.cos(lat) * math.sin(eps) * math.sin(lon)
        )
    )
    return normalize_degrees(math.degrees(ra)), math.degrees(dec)


def ecliptic_to_horizontal_approx(
    lon_deg: float, lat_deg: float, lst_deg: float, ecliptic_lat_deg: float = 0.0
) -> HorizontalCoord:
    """Project an ecliptic point onto the observer's sky. For overlay lines only.

    Args:
        lon_deg: Ecliptic longitude (degrees).
        lat_deg: Observer latitude (degrees).
        lst_deg: Local sidereal time (degrees).
        ecliptic_lat_deg: Ecliptic latitude of the point (0 for the ecliptic itself).
    """
    ra, dec = ecliptic_to_equatorial_approx(lon_deg, ecliptic_lat_deg)
    return equatorial_to_horizontal(ra, dec, lat_deg, lst_deg)


def ecliptic_from_vector(x: float, y: float, z: float) -> tuple[float, float, float]:
    """ICRF/J2000 equatorial Cartesian vector (AU) to ecliptic (lon_deg, lat_deg, dist_au)."""
    dist = math.sqrt(x * x + y * y + z * z)
    if dist == 0.0:
        return 0.0, 0.0, 0.0
    eps = math.radians(J2000_OBLIQUITY_DEG)
    ex = x
    ey = y * math.cos(eps) + z * math.sin(eps)
    ez = -y * math.sin(eps) + z * math.cos(eps)
    lon = normalize_degrees(math.degrees(math.atan2(ey, ex)))
    lat = math.degrees(math.asin(_clamp(ez / dist)))
    return lon, lat, dist


def au_to_display_scale(au: float) -> float:
    """Logarithmic AU → scene units. Strictly increasing, so orbit order is preserved.

    Mercury (0.39 AU) ≈ 47, Earth (1 AU) ≈ 72, Neptune (30 AU) ≈ 171.
    """
    return math.log1p(au * 10) * 30


def horizontal_to_cartesian(
    alt_deg: float, az_deg: float, radius: float = 1000.0
) -> tuple[float, float, float]:
    """Point on the sky dome: (east, zenith, south)."""
    alt = math.radians(alt_deg)
    az = math.radians(az_deg)
    return (
        radius * math.cos(alt) * math.sin(az),
        radius * math.sin(alt),
        -radius * math.cos(alt) * math.cos(az),
    )


def ecliptic_to_cartesian(
    lon_deg: float, lat_deg: float, dist_au: float
) -> tuple[float, float, float]:
    """Point in the orbit view, distance compressed by au_to_display_scale."""
    lon = math.radians(lon_deg)
    lat = math.radians(lat_deg)
    r = au_to_display_scale(dist_au)
    return (
        r * math.cos(lat) * math.cos(lon),
        r * math.sin(lat),
        -r * math.cos(lat) * math.sin(lon),
    )
