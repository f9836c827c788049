from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from skyorrery.coordinates import J2000_OBLIQUITY_DEG
from skyorrery.ephemeris import EphemerisError
from skyorrery.models import BodySnapshot, EclipseEvent, Equatorial, Observer

INSTANT = datetime(2024, 4, 8, 18, 17, tzinfo=timezone.utc)


def ecliptic_vector(lon_deg: float, lat_deg: float, dist: float) -> tuple[float, float, float]:
    """ICRF vector (AU) for an ecliptic position, inverse of ecliptic_from_vector."""
    lon, lat, eps = map(math.radians, (lon_deg, lat_deg, J2000_OBLIQUITY_DEG))
    ex = dist * math.cos(lat) * math.cos(lon)
    ey = dist * math.cos(lat) * math.sin(lon)
    ez = dist * math.sin(lat)
    return ex, ey * math.cos(eps) - ez * math.sin(eps), ey * math.sin(eps) + ez * math.cos(eps)


# body id -> (ra_deg, dec_deg, distance_au). Chosen so nothing is detected,
# including with Earth scanned for alignment at its sentinel RA of 0.
QUIET_SKY: dict[str, tuple[float, float, float]] = {
    "Sun": (0.0, 0.0, 1.0),
    "Moon": (90.0, 20.0, 0.00257),
    "Mercury": (200.0, -12.0, 1.2),
    "Venus": (260.0, -8.0, 1.6),
    "Mars": (60.0, 18.0, 2.1),
    "Jupiter": (120.0, 21.0, 5.5),
    "Saturn": (310.0, -16.0, 9.8),
    "Uranus": (45.0, 16.0, 19.5),
    "Neptune": (300.0, -10.0, 30.1),
}

# body id -> (ecliptic lon, lat, distance): heliocentric for planets, geocentric for Sun/Moon
QUIET_ECLIPTIC: dict[str, tuple[float, float, float]] = {
    "Sun": (0.0, 0.0, 1.0),
    "Moon": (90.0, 3.0, 0.00257),
    "Mercury": (40.0, 2.0, 0.39),
    "Venus": (200.0, -1.0, 0.72),
    "Earth": (180.0, 0.0, 1.0),
    "Mars": (70.0, 1.0, 1.52),
    "Jupiter": (50.0, -1.0, 5.2),
    "Saturn": (340.0, -2.0, 9.5),
    "Uranus": (55.0, 0.0, 19.2),
    "Neptune": (357.0, -1.0, 30.0),
}


class FakeEphemeris:
    """In-memory EphemerisProvider with configurable positions and failures.

    failing holds (method, body_id) pairs; body_id "*" fails the method for all bodies.
    """

    def __init__(
        self,
        sky: dict[str, tuple[float, float, float]] | None = None,
        ecliptic: dict[str, tuple[float, float, float]] | None = None,
        failing: set[tuple[str, str]] | None = None,
        solar: EclipseEvent | None = None,
        lunar: EclipseEvent | None = None,
    ):
        self.sky = dict(QUIET_SKY if sky is None else sky)
        self.ecliptic = dict(QUIET_ECLIPTIC if ecliptic is None else ecliptic)
        self.failing = set(failing or ())
        self.solar = solar
        self.lunar = lunar
        self.calls: list[tuple[str, object]] = []

    def _check(self, method: str, key: str) -> None:
        self.calls.append((method, key))
        if (method, key) in self.failing or (method, "*") in self.failing:
            raise EphemerisError(f"{method} failed for {key}")

    def called(self, method: str) -> list[object]:
        return [key for m, key in self.calls if m == method]

    def make_observer(self, observer: Observer):
        return ("site", observer.lat, observer.lng)

    def equatorial(self, body_id, instant, site) -> Equatorial:
        self._check("equatorial", body_id)
        ra, dec, dist = self.sky[body_id]
        return Equatorial(ra_hours=ra / 15.0, dec_deg=dec, distance_au=dist)

    def helio_vector(self, body_id, instant):
        self._check("helio_vector", body_id)
        return ecliptic_vector(*self.ecliptic[body_id])

    def geo_vector(self, body_id, instant):
        self._check("geo_vector", body_id)
        return ecliptic_vector(*self.ecliptic[body_id])

    def illumination(self, body_id, instant) -> float:
        self._check("illumination", body_id)
        return -26.74 if body_id == "Sun" else 1.0

    def constellation_of(self, ra_hours, dec_deg) -> str:
        self._check("constellation_of", f"{ra_hours:.4f}")
        return "Psc"

    def search_global_solar_eclipse(self, start):
        self._check("search_global_solar_eclipse", start)
        return self.solar

    def search_lunar_eclipse(self, start):
        self._check("search_lunar_eclipse", start)
        return self.lunar


def snap(
    body_id: str,
    ra: float,
    dec: float = 0.0,
    lon: float = 0.0,
    lat: float = 0.0,
) -> BodySnapshot:
    """Minimal BodySnapshot for detector tests."""
    return BodySnapshot(
        id=body_id,
        name=body_id,
        ra_deg=ra,
        dec_deg=dec,
        alt_deg=10.0,
        az_deg=100.0,
        ecliptic_lon_deg=lon,
        ecliptic_lat_deg=lat,
        ecliptic_dist_au=1.0,
        distance_au=1.0,
        magnitude=0.0,
        constellation="",
    )


@pytest.fixture
def instant() -> datetime:
    return INSTANT


@pytest.fixture
def observer() -> Observer:
    """Dallas, on the 2024-04-08 path of totality."""
    return Observer(lat=32.78, lng=-96.80, elevation_m=140.0)


@pytest.fixture
def fake_provider() -> FakeEphemeris:
    return FakeEphemeris()
