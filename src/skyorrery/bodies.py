"""Builds one normalized BodySnapshot per tracked body."""

import logging
from datetime import datetime
from typing import Any

from skyorrery.catalog import lookup
from skyorrery.coordinates import ecliptic_from_vector, equatorial_to_horizontal
from skyorrery.ephemeris import EphemerisProvider
from skyorrery.models import BodyKind, BodySnapshot, Derived, Observer
from skyorrery.timeframe import local_sidereal_time, normalize_degrees

logger = logging.getLogger(__name__)

_NO_ECLIPTIC = (0.0, 0.0, 0.0)


def _ecliptic(
    body_id: str, kind: BodyKind, instant: datetime, provider: EphemerisProvider
) -> Derived[tuple[float, float, float]]:
    """Heliocentric ecliptic coordinates; geocentric for the Moon and the Sun."""
    if kind in (BodyKind.SATELLITE, BodyKind.STAR):
        return Derived.attempt(
            lambda: ecliptic_from_vector(*provider.geo_vector(body_id, instant))
        )
    return Derived.attempt(
        lambda: ecliptic_from_vector(*provider.helio_vector(body_id, instant))
    )


def _collect_missing(body_id: str, **fields: Derived) -> tuple[str, ...]:
    missing = []
    for name, result in fields.items():
        if not result.ok:
            logger.debug("%s: %s unavailable (%s)", body_id, name, result.error)
            missing.append(name)
    return tuple(missing)


def build_body_snapshot(
    body_id: str,
    instant: datetime,
    observer: Observer,
    provider: EphemerisProvider,
    site: Any = None,
    observer_body_id: str = "Earth",
) -> BodySnapshot:
    """Compute the snapshot of a single body.

    Equatorial and horizontal coordinates are required: a provider error there
    propagates to the caller. Ecliptic coordinates, magnitude, and constellation
    are optional: each is derived independently and falls back to a zero/empty
    sentinel, listed in BodySnapshot.missing_fields.

    Args:
        body_id: Catalog id ("Mars", "Moon", ...).
        instant: Timezone-aware observation time.
        observer: Observing site.
        provider: Ephemeris capability.
        site: Provider-native observer from provider.make_observer(); built if None.
        observer_body_id: Id of the body the observer stands on.

    Returns:
        BodySnapshot with every angle normalized.
    """
    body = lookup(body_id)

    if body_id == observer_body_id:
        # Never located in the sky; only its orbit position matters.
        ecliptic = Derived.attempt(
            lambda: ecliptic_from_vector(*provider.helio_vector(body_id, instant))
        )
        lon, lat, dist = ecliptic.or_default(_NO_ECLIPTIC)
        return BodySnapshot(
            id=body_id,
            name=body.name,
            ra_deg=0.0,
            dec_deg=0.0,
            alt_deg=0.0,
            az_deg=0.0,
            ecliptic_lon_deg=normalize_degrees(lon),
            ecliptic_lat_deg=lat,
            ecliptic_dist_au=dist,
            distance_au=0.0,
            magnitude=0.0,
            constellation="",
            missing_fields=_collect_missing(body_id, ecliptic=ecliptic),
        )

    if site is None:
        site = provider.make_observer(observer)
    equatorial = provider.equatorial(body_id, instant, site)
    ra_deg = normalize_degrees(equatorial.ra_hours * 15.0)
    lst = local_sidereal_time(instant, observer.lng)
    horizontal = equatorial_to_horizontal(ra_deg, equatorial.dec_deg, observer.lat, lst)

    ecliptic = _ecliptic(body_id, body.kind, instant, provider)
    magnitude = Derived.attempt(lambda: float(provider.illumination(body_id, instant)))
    constellation = Derived.attempt(
        lambda: provider.constellation_of(equatorial.ra_hours, equatorial.dec_deg)
    )
    lon, lat, dist = ecliptic.or_default(_NO_ECLIPTIC)

    return BodySnapshot(
        id=body_id,
        name=body.name,
        ra_deg=ra_deg,
        dec_deg=equatorial.dec_deg,
        alt_deg=horizontal.alt_deg,
        az_deg=horizontal.az_deg,
        ecliptic_lon_deg=normalize_degrees(lon),
        ecliptic_lat_deg=lat,
        ecliptic_dist_au=dist,
        distance_au=equatorial.distance_au,
        magnitude=magnitude.or_default(0.0),
        constellation=constellation.or_default(""),
        missing_fields=_collect_missing(
            body_id, ecliptic=ecliptic, magnitude=magnitude, constellation=constellation
        ),
    )
