"""Recompute pipeline — one immutable SnapshotResult per (instant, observer)."""

import logging
import math
from datetime import datetime, timedelta
from functools import lru_cache

from pytz import UnknownTimeZoneError, timezone, utc
from pytz.exceptions import InvalidTimeError

from skyorrery.bodies import build_body_snapshot
from skyorrery.config import EngineConfig
from skyorrery.ephemeris import EphemerisProvider, SkyfieldEphemeris
from skyorrery.models import Observer, OverlayLine, QueryInput, SnapshotResult
from skyorrery.overlays import celestial_grid, ecliptic_line
from skyorrery.phenomena import detect_phenomena
from skyorrery.timeframe import epoch_millis, local_sidereal_time

logger = logging.getLogger(__name__)

MemoKey = tuple[int, float, float]

_EPOCH = datetime(1970, 1, 1, tzinfo=utc)


class InvalidInputError(ValueError):
    """Instant or observer outside the accepted domain."""


def validate_observer(observer: Observer) -> None:
    """Raise InvalidInputError unless the observer is a real place on Earth."""
    values = (observer.lat, observer.lng, observer.elevation_m)
    if not all(isinstance(v, (int, float)) and math.isfinite(v) for v in values):
        raise InvalidInputError(f"Non-finite observer coordinates: {observer}")
    if not -90.0 <= observer.lat <= 90.0:
        raise InvalidInputError(f"Latitude out of range: {observer.lat}")
    if not -180.0 <= observer.lng <= 180.0:
        raise InvalidInputError(f"Longitude out of range: {observer.lng}")
    if observer.elevation_m < 0:
        raise InvalidInputError(f"Negative elevation: {observer.elevation_m}")


def memo_key(instant: datetime, observer: Observer) -> MemoKey:
    """(epoch milliseconds, lat, lng). Elevation and sub-millisecond time are not part of it."""
    try:
        millis = epoch_millis(instant)
    except (AttributeError, ValueError) as e:
        raise InvalidInputError(str(e)) from e
    return millis, observer.lat, observer.lng


class SkyEngine:
    """Computes snapshots from an injected ephemeris provider.

    Holds no state across calls except the last memo key and its result.
    Calls must not overlap.
    """

    def __init__(self, provider: EphemerisProvider, config: EngineConfig | None = None):
        self.provider = provider
        self.config = config or EngineConfig()
        self._last_key: MemoKey | None = None
        self._last_result: SnapshotResult | None = None

    def compute(self, instant: datetime, observer: Observer) -> SnapshotResult:
        """Snapshot of every tracked body plus detected phenomena.

        Invalid input or any failure in a required computation yields
        SnapshotResult.empty(); no exception escapes.

        Args:
            instant: Timezone-aware observation time.
            observer: Observing site.

        Returns:
            SnapshotResult. Repeated keys return the same object.
        """
        try:
            key = memo_key(instant, observer)
            validate_observer(observer)
        except InvalidInputError as e:
            logger.warning("Rejected recompute input: %s", e)
            return SnapshotResult.empty()

        if key == self._last_key and self._last_result is not None:
            return self._last_result

        # Millisecond-truncated, so the result depends on the key only.
        when = _EPOCH + timedelta(milliseconds=key[0])
        try:
            result = self._compute(when, observer)
        except Exception:
            logger.exception(
                "Recompute failed at %s for (%s, %s)",
                when.isoformat(),
                observer.lat,
                observer.lng,
            )
            return SnapshotResult.empty()

        self._last_key, self._last_result = key, result
        return result

    def _compute(self, instant: datetime, observer: Observer) -> SnapshotResult:
        cfg = self.config
        site = self.provider.make_observer(observer)

        def snapshot(body_id: str):
            return build_body_snapshot(
                body_id,
                instant,
                observer,
                self.provider,
                site=site,
                observer_body_id=cfg.observer_body_id,
            )

        sun = snapshot(cfg.sun_id)
        moon = snapshot(cfg.moon_id)
        bodies = tuple(snapshot(body_id) for body_id in cfg.sky_body_ids)
        phenomena = detect_phenomena(
            sun, moon, bodies, instant, provider=self.provider, config=cfg, lang=cfg.lang
        )
        logger.debug(
            "Computed %d bodies, %d phenomena at %s",
            len(bodies),
            len(phenomena),
            instant.isoformat(),
        )
        return SnapshotResult(bodies=bodies, sun=sun, moon=moon, phenomena=phenomena)

    def overlays(self, instant: datetime, observer: Observer) -> tuple[OverlayLine, ...]:
        """Ecliptic line followed by the RA/Dec grid for the observer's sky."""
        validate_observer(observer)
        lst = local_sidereal_time(instant, observer.lng)
        return (ecliptic_line(observer.lat, lst), *celestial_grid(observer.lat, lst))


@lru_cache(maxsize=1)
def default_engine() -> SkyEngine:
    """Engine over the skyfield provider, configured from the environment. Built once."""
    config = EngineConfig.from_env()
    return SkyEngine(SkyfieldEphemeris(config), config)


def compute(instant: datetime, observer: Observer) -> SnapshotResult:
    """compute() on the default engine."""
    return default_engine().compute(instant, observer)


def parse_local_time(when: str, tz_name: str = "UTC") -> datetime:
    """Convert a local "YYYY-MM-DD HH:MM" string in tz_name to an aware UTC datetime.

    Raises:
        InvalidInputError: On a malformed string, unknown timezone, or a local
            time that is ambiguous or skipped by a DST transition.
    """
    try:
        dt = datetime.strptime(when, "%Y-%m-%d %H:%M")
        local_tz = timezone(tz_name)
        return local_tz.localize(dt, is_dst=None).astimezone(utc)
    except UnknownTimeZoneError as e:
        raise InvalidInputError(f"Unknown timezone: {tz_name}") from e
    except (ValueError, InvalidTimeError) as e:
        raise InvalidInputError(f"Invalid local time {when!r}: {e!r}") from e


def run(query: QueryInput, engine: SkyEngine | None = None) -> SnapshotResult:
    """Top-level entry point: takes a QueryInput and returns a SnapshotResult.

    Args:
        query: User input (local time string, timezone, coordinates).
        engine: Engine to use; the default skyfield engine if None.

    Returns:
        Fully computed SnapshotResult (empty if the computation failed).

    Raises:
        InvalidInputError: If the time string or timezone cannot be parsed.
    """
    instant = parse_local_time(query.when, query.tz_name)
    observer = Observer(lat=query.lat, lng=query.lng, elevation_m=query.elevation_m)
    return (engine or default_engine()).compute(instant, observer)
