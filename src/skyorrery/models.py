"""Data model definitions — explicit boundaries between input, ephemeris, compute, and output layers."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    when: str  # "YYYY-MM-DD HH:MM" local time
    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees)
    tz_name: str = "UTC"  # IANA timezone the local time is expressed in
    elevation_m: float = 0.0


@dataclass(frozen=True)
class Observer:
    """Terrestrial observing site. Not validated until it reaches the pipeline."""

    lat: float  # Latitude (decimal degrees, north positive)
    lng: float  # Longitude (decimal degrees, east positive)
    elevation_m: float = 0.0  # Height above the ellipsoid (meters)


class BodyKind(str, Enum):
    STAR = "star"
    SATELLITE = "satellite"
    PLANET = "planet"
    OBSERVER = "observer"


@dataclass(frozen=True)
class CelestialBody:
    """A tracked body in the fixed catalog."""

    id: str  # Catalog id ("Mars", "Moon", ...)
    name: str  # English display name
    kind: BodyKind


@dataclass(frozen=True)
class Equatorial:
    """Geocentric (topocentric) equatorial coordinates returned by an ephemeris provider."""

    ra_hours: float  # Right ascension (hours)
    dec_deg: float  # Declination (degrees)
    distance_au: float  # Distance from the observer (AU)


@dataclass(frozen=True)
class EclipseEvent:
    """A single eclipse found by an ephemeris search."""

    kind: str  # "total" / "annular" / "partial" / "penumbral"
    peak: datetime  # Time of greatest eclipse (UTC)


@dataclass(frozen=True)
class HorizontalCoord:
    """Observer-relative position. Azimuth: 0=N, 90=E, 180=S, 270=W."""

    alt_deg: float
    az_deg: float


@dataclass(frozen=True)
class Derived(Generic[T]):
    """Outcome of one optional field derivation: a value, or the error that replaced it."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, default: T) -> T:
        return default if self.value is None else self.value

    @classmethod
    def attempt(cls, fn: Callable[[], T]) -> "Derived[T]":
        """Run fn and capture its result or its exception message."""
        try:
            return cls(value=fn())
        except Exception as e:
            return cls(error=f"{type(e).__name__}: {e}")


@dataclass(frozen=True)
class BodySnapshot:
    """Positions of one body at one instant. All angles normalized."""

    id: str
    name: str
    ra_deg: float  # Right ascension [0, 360)
    dec_deg: float  # Declination [-90, 90]
    alt_deg: float  # Altitude [-90, 90]
    az_deg: float  # Azimuth [0, 360)
    ecliptic_lon_deg: float  # Heliocentric (geocentric for Sun/Moon) ecliptic longitude [0, 360)
    ecliptic_lat_deg: float  # Ecliptic latitude [-90, 90]
    ecliptic_dist_au: float  # Distance from the ecliptic frame origin (AU)
    distance_au: float  # Geocentric distance (AU)
    magnitude: float  # Apparent magnitude
    constellation: str  # IAU abbreviation ("Ori"), empty when unknown
    missing_fields: tuple[str, ...] = ()  # Optional fields that fell back to sentinels


class PhenomenonType(str, Enum):
    OPPOSITION = "opposition"
    CONJUNCTION = "conjunction"
    ALIGNMENT = "alignment"
    SOLAR_ECLIPSE = "solar_eclipse"
    LUNAR_ECLIPSE = "lunar_eclipse"


@dataclass(frozen=True)
class PhenomenonRecord:
    """A detected astronomical event. The description is display text only."""

    type: PhenomenonType
    bodies: tuple[str, ...]  # Participant body ids, ordered
    description: str
    eclipse_kind: str | None = None  # None for non-eclipses and generic "possible eclipse"
    peak: datetime | None = None


@dataclass(frozen=True)
class SnapshotResult:
    """The sole output of a recompute. Superseded, never updated."""

    bodies: tuple[BodySnapshot, ...] = ()
    sun: BodySnapshot | None = None
    moon: BodySnapshot | None = None
    phenomena: tuple[PhenomenonRecord, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "SnapshotResult":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.bodies and self.sun is None and self.moon is None

    def body(self, body_id: str) -> BodySnapshot | None:
        return next((b for b in self.bodies if b.id == body_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-ready form: enums as values, datetimes as ISO-8601 strings."""
        return _plain(asdict(self))


@dataclass(frozen=True)
class OverlayLine:
    """A static sky overlay, split into runs of consecutive above-horizon points."""

    name: str  # "ecliptic", "dec+30", "ra02h", ...
    segments: tuple[tuple[HorizontalCoord, ...], ...]


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value
