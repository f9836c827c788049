"""EphemerisProvider interface and the skyfield-backed implementation."""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Protocol

import numpy as np
from skyfield import almanac, eclipselib
from skyfield.api import Loader, load_constellation_map, position_of_radec, wgs84
from skyfield.magnitudelib import planetary_magnitude
from skyfield.searchlib import find_discrete

from skyorrery.config import EngineConfig
from skyorrery.models import EclipseEvent, Equatorial, Observer

logger = logging.getLogger(__name__)

Vector = tuple[float, float, float]


class EphemerisError(Exception):
    """Ephemeris lookup failure."""


class EphemerisProvider(Protocol):
    """Everything the engine needs from an ephemeris. Vectors are ICRF/J2000, in AU."""

    def make_observer(self, observer: Observer) -> Any:
        """Provider-native observing site, passed back into equatorial()."""
        ...

    def equatorial(self, body_id: str, instant: datetime, site: Any) -> Equatorial:
        ...

    def helio_vector(self, body_id: str, instant: datetime) -> Vector:
        ...

    def geo_vector(self, body_id: str, instant: datetime) -> Vector:
        ...

    def illumination(self, body_id: str, instant: datetime) -> float:
        """Apparent visual magnitude."""
        ...

    def constellation_of(self, ra_hours: float, dec_deg: float) -> str:
        ...

    def search_global_solar_eclipse(self, start: datetime) -> EclipseEvent | None:
        """First solar eclipse peaking at or after start, or None within the search horizon."""
        ...

    def search_lunar_eclipse(self, start: datetime) -> EclipseEvent | None:
        """First lunar eclipse peaking at or after start, or None within the search horizon."""
        ...


# Catalog id → DE421 segment name. Outer planets only exist as barycenters.
_TARGETS: dict[str, str] = {
    "Sun": "sun",
    "Moon": "moon",
    "Mercury": "mercury",
    "Venus": "venus",
    "Earth": "earth",
    "Mars": "mars",
    "Jupiter": "jupiter barycenter",
    "Saturn": "saturn barycenter",
    "Uranus": "uranus barycenter",
    "Neptune": "neptune barycenter",
}

_SUN_RADIUS_KM = 695700.0
_MOON_RADIUS_KM = 1737.4
_EARTH_RADIUS_KM = 6378.137
_KM_PER_AU = 149597870.7
_MOON_MEAN_DISTANCE_AU = 385000.6 / _KM_PER_AU
_SUN_MAGNITUDE_1AU = -26.74


class SkyfieldEphemeris:
    """EphemerisProvider backed by skyfield and a JPL DE kernel.

    The kernel is downloaded into config.data_dir on first use.
    """

    def __init__(self, config: EngineConfig, search_horizon_days: float = 40.0):
        loader = Loader(str(config.data_dir))
        logger.debug("Loading ephemeris %s from %s", config.ephemeris_file, config.data_dir)
        self._eph = loader(config.ephemeris_file)
        self._ts = loader.timescale()
        self._earth = self._eph["earth"]
        self._sun = self._eph["sun"]
        self._moon = self._eph["moon"]
        self._constellation_at = load_constellation_map()
        self._horizon = timedelta(days=search_horizon_days)

    def _time(self, instant: datetime):
        return self._ts.from_datetime(instant)

    def _target(self, body_id: str):
        try:
            return self._eph[_TARGETS[body_id]]
        except KeyError:
            raise EphemerisError(f"Unknown body: {body_id}") from None

    def make_observer(self, observer: Observer):
        return self._earth + wgs84.latlon(
            latitude_degrees=observer.lat,
            longitude_degrees=observer.lng,
            elevation_m=observer.elevation_m,
        )

    def equatorial(self, body_id: str, instant: datetime, site) -> Equatorial:
        """Topocentric apparent RA/Dec referred to the equator and equinox of date."""
        t = self._time(instant)
        apparent = site.at(t).observe(self._target(body_id)).apparent()  # type: ignore[union-attr]
        ra, dec, distance = apparent.radec(epoch="date")
        return Equatorial(
            ra_hours=float(ra.hours), dec_deg=float(dec.degrees), distance_au=float(distance.au)
        )

    def helio_vector(self, body_id: str, instant: datetime) -> Vector:
        t = self._time(instant)
        x, y, z = (self._target(body_id) - self._sun).at(t).position.au
        return float(x), float(y), float(z)

    def geo_vector(self, body_id: str, instant: datetime) -> Vector:
        t = self._time(instant)
        x, y, z = (self._target(body_id) - self._earth).at(t).position.au
        return float(x), float(y), float(z)

    def illumination(self, body_id: str, instant: datetime) -> float:
        """Apparent magnitude. Planets via skyfield.magnitudelib; Sun and Moon by formula."""
        if body_id == "Sun":
            dist = np.linalg.norm(self.geo_vector("Sun", instant))
            return float(_SUN_MAGNITUDE_1AU + 5 * math.log10(dist))
        if body_id == "Moon":
            return self._moon_magnitude(instant)
        t = self._time(instant)
        try:
            mag = planetary_magnitude(self._earth.at(t).observe(self._target(body_id)))  # type: ignore[union-attr]
        except ValueError as e:
            raise EphemerisError(f"No magnitude model for {body_id}: {e}") from e
        if not np.isfinite(mag):
            raise EphemerisError(f"Magnitude undefined for {body_id} at {instant}")
        return float(mag)

    def _moon_magnitude(self, instant: datetime) -> float:
        geo = np.array(self.geo_vector("Moon", instant))
        helio = np.array(self.helio_vector("Moon", instant))
        geo_dist = np.linalg.norm(geo)
        helio_dist = np.linalg.norm(helio)
        # Phase angle: Sun–Moon–Earth
        cos_phase = np.dot(geo, helio) / (geo_dist * helio_dist)
        phase = math.acos(max(-1.0, min(1.0, float(cos_phase))))
        mag = -12.717 + 1.49 * phase + 0.0431 * phase**4
        return float(mag + 5 * math.log10(helio_dist * geo_dist / _MOON_MEAN_DISTANCE_AU))

    def constellation_of(self, ra_hours: float, dec_deg: float) -> str:
        return str(self._constellation_at(position_of_radec(ra_hours, dec_deg)))

    def search_lunar_eclipse(self, start: datetime) -> EclipseEvent | None:
        t0 = self._time(start)
        t1 = self._time(start + self._horizon)
        times, kinds, _ = eclipselib.lunar_eclipses(t0, t1, self._eph)
        if not len(kinds):
            return None
        return EclipseEvent(
            kind=eclipselib.LUNAR_ECLIPSES[int(kinds[0])].lower(),
            peak=times[0].utc_datetime(),
        )

    def search_global_solar_eclipse(self, start: datetime) -> EclipseEvent | None:
        """Scan new moons after start; the first whose lunar shadow touches Earth wins."""
        t0 = self._time(start)
        t1 = self._time(start + self._horizon)
        times, phases = find_discrete(t0, t1, almanac.moon_phases(self._eph))
        for t, phase in zip(times, phases):
            if phase != 0:
                continue
            event = self._solar_eclipse_near(t)
            if event is not None:
                return event
        return None

    def _solar_eclipse_near(self, new_moon) -> EclipseEvent | None:
        """Classify the eclipse (if any) within ±6h of a new moon, at one-minute steps."""
        t = self._ts.tt_jd(new_moon.tt + np.linspace(-0.25, 0.25, 721))
        sun = (self._sun - self._earth).at(t).position.km
        moon = (self._moon - self._earth).at(t).position.km
        axis = moon - sun  # Sun → Moon
        to_earth = -moon  # Moon → Earth center
        u = np.sum(axis * to_earth, axis=0) / np.sum(axis * axis, axis=0)
        miss = np.linalg.norm(u * axis - to_earth, axis=0)

        i = int(np.argmin(miss))
        umbra = _SUN_RADIUS_KM - (1 + u[i]) * (_SUN_RADIUS_KM - _MOON_RADIUS_KM)
        penumbra = -_SUN_RADIUS_KM + (1 + u[i]) * (_SUN_RADIUS_KM + _MOON_RADIUS_KM)
        peak = t[i].utc_datetime()

        if miss[i] > _EARTH_RADIUS_KM + penumbra:
            return None
        if miss[i] >= _EARTH_RADIUS_KM:
            return EclipseEvent(kind="partial", peak=peak)
        # Central eclipse: evaluate the shadow cone where the axis meets the surface.
        depth = math.sqrt(_EARTH_RADIUS_KM**2 - float(miss[i]) ** 2)
        surface_umbra = umbra + depth * (_SUN_RADIUS_KM - _MOON_RADIUS_KM) / float(
            np.linalg.norm(axis[:, i])
        )
        return EclipseEvent(kind="total" if surface_umbra > 0 else "annular", peak=peak)
