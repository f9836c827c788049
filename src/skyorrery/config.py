"""Engine thresholds, catalog groups, and ephemeris location."""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from skyorrery.catalog import (
    ALIGNMENT_EXCLUDED_IDS,
    OUTER_BODY_IDS,
    PLANET_IDS,
)

_ROOT = Path(__file__).parent.parent.parent


@dataclass(frozen=True)
class EngineConfig:
    """Everything the pipeline needs besides (instant, observer) and a provider.

    Eclipse prefilter angles and alignment parameters are empirical; they are
    kept here so alternate values can be tried without code changes.
    """

    # Body catalog
    sun_id: str = "Sun"
    moon_id: str = "Moon"
    observer_body_id: str = "Earth"
    planet_ids: tuple[str, ...] = PLANET_IDS
    outer_body_ids: tuple[str, ...] = OUTER_BODY_IDS
    alignment_excluded_ids: tuple[str, ...] = ALIGNMENT_EXCLUDED_IDS

    # Opposition / conjunction (RA separation from the Sun, degrees).
    # Asymmetric: (170, 190) vs < 10.
    opposition_min_deg: float = 170.0
    opposition_max_deg: float = 190.0
    conjunction_max_deg: float = 10.0

    # Alignment
    alignment_max_sep_deg: float = 45.0
    alignment_min_bodies: int = 3

    # Eclipse prefilter
    solar_prefilter_sep_deg: float = 2.0
    syzygy_lon_window_deg: float = 15.0
    lunar_prefilter_lat_deg: float = 2.0
    eclipse_search_lookback: timedelta = timedelta(days=7)
    eclipse_accept_window: timedelta = timedelta(hours=12)

    # Eclipse fallback when the search itself fails
    solar_fallback_sep_deg: float = 0.6
    lunar_fallback_lat_deg: float = 1.0
    lunar_fallback_lon_window_deg: float = 5.0

    # Ephemeris
    ephemeris_file: str = "de421.bsp"
    data_dir: Path = field(default_factory=lambda: _ROOT / "resources")
    lang: str = "en"

    @property
    def sky_body_ids(self) -> tuple[str, ...]:
        """Ids whose snapshots make up SnapshotResult.bodies, in canonical order."""
        return self.planet_ids

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables (and a .env file if present).

        SKYORRERY_EPHEMERIS: ephemeris kernel filename (default de421.bsp).
        SKYORRERY_DATA_DIR: directory where skyfield caches downloaded files.
        SKYORRERY_LANG: language for phenomenon descriptions ('en' or 'ko').
        """
        load_dotenv()
        defaults = cls()
        data_dir = os.environ.get("SKYORRERY_DATA_DIR")
        return cls(
            ephemeris_file=os.environ.get(
                "SKYORRERY_EPHEMERIS", defaults.ephemeris_file
            ),
            data_dir=Path(data_dir) if data_dir else defaults.data_dir,
            lang=os.environ.get("SKYORRERY_LANG", defaults.lang),
        )
