"""Phenomena detection — eclipses, oppositions/conjunctions, and planetary alignment.

detect_phenomena() is a pure function of body snapshots; the only outside call
is the (optional) eclipse search on the ephemeris provider, and only for
Sun/Moon geometries that pass a cheap prefilter.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from skyorrery.config import EngineConfig
from skyorrery.ephemeris import EphemerisProvider
from skyorrery.i18n import body_name, t
from skyorrery.models import BodySnapshot, EclipseEvent, PhenomenonRecord, PhenomenonType
from skyorrery.timeframe import angular_distance, angular_separation

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = EngineConfig()


def detect_phenomena(
    sun: BodySnapshot | None,
    moon: BodySnapshot | None,
    bodies: Sequence[BodySnapshot],
    instant: datetime,
    provider: EphemerisProvider | None = None,
    config: EngineConfig = _DEFAULT_CONFIG,
    lang: str = "en",
) -> tuple[PhenomenonRecord, ...]:
    """Detect phenomena in fixed priority order: eclipses, opposition/conjunction, alignment.

    Args:
        sun: Sun snapshot. Nothing is detected without it.
        moon: Moon snapshot. Eclipses are skipped without it.
        bodies: Planet snapshots in canonical order.
        instant: Observation time; eclipse peaks must fall near it.
        provider: Used only for eclipse searches. Without one, eclipses are
            judged by the coarse geometric thresholds alone.
        config: Thresholds and body groups.
        lang: Language for descriptions.

    Returns:
        Ordered tuple of PhenomenonRecord.
    """
    if sun is None:
        return ()
    records: list[PhenomenonRecord] = []
    if moon is not None:
        records.extend(_detect_eclipses(sun, moon, instant, provider, config, lang))
    records.extend(_detect_oppositions(sun, bodies, config, lang))
    alignment = _detect_alignment(bodies, config, lang)
    if alignment is not None:
        records.append(alignment)
    return tuple(records)


def _detect_eclipses(
    sun: BodySnapshot,
    moon: BodySnapshot,
    instant: datetime,
    provider: EphemerisProvider | None,
    config: EngineConfig,
    lang: str,
) -> list[PhenomenonRecord]:
    records: list[PhenomenonRecord] = []
    lon_diff = angular_separation(sun.ecliptic_lon_deg, moon.ecliptic_lon_deg)
    from_full = abs(180.0 - lon_diff)
    participants = (sun.id, moon.id)

    # Solar: near new moon and close together on the sky
    sep = angular_distance(sun.ra_deg, sun.dec_deg, moon.ra_deg, moon.dec_deg)
    if sep < config.solar_prefilter_sep_deg and lon_diff < config.syzygy_lon_window_deg:
        record = _search_eclipse(
            PhenomenonType.SOLAR_ECLIPSE,
            provider.search_global_solar_eclipse if provider else None,
            sep < config.solar_fallback_sep_deg,
            participants,
            instant,
            config,
            lang,
        )
        if record is not None:
            records.append(record)

    # Lunar: near full moon with the Moon close to a node
    moon_lat = abs(moon.ecliptic_lat_deg)
    if (
        from_full < config.syzygy_lon_window_deg
        and moon_lat < config.lunar_prefilter_lat_deg
    ):
        record = _search_eclipse(
            PhenomenonType.LUNAR_ECLIPSE,
            provider.search_lunar_eclipse if provider else None,
            moon_lat < config.lunar_fallback_lat_deg
            and from_full < config.lunar_fallback_lon_window_deg,
            participants,
            instant,
            config,
            lang,
        )
        if record is not None:
            records.append(record)
    return records


def _search_eclipse(
    kind: PhenomenonType,
    search: Callable[[datetime], EclipseEvent | None] | None,
    fallback_hit: bool,
    participants: tuple[str, ...],
    instant: datetime,
    config: EngineConfig,
    lang: str,
) -> PhenomenonRecord | None:
    """Run the bounded search; on failure fall back to the coarse geometric verdict."""
    if search is not None:
        try:
            event = search(instant - config.eclipse_search_lookback)
        except Exception:
            logger.warning(
                "%s search failed at %s; using geometric fallback",
                kind.value,
                instant.isoformat(),
                exc_info=True,
            )
        else:
            if event is None or abs(event.peak - instant) > config.eclipse_accept_window:
                return None
            return PhenomenonRecord(
                type=kind,
                bodies=participants,
                description=t(
                    f"phenomenon_{kind.value}", lang, kind=t(f"eclipse_{event.kind}", lang)
                ),
                eclipse_kind=event.kind,
                peak=event.peak,
            )

    if not fallback_hit:
        return None
    return PhenomenonRecord(
        type=kind,
        bodies=participants,
        description=t(f"phenomenon_possible_{kind.value}", lang),
    )


def _detect_oppositions(
    sun: BodySnapshot,
    bodies: Sequence[BodySnapshot],
    config: EngineConfig,
    lang: str,
) -> list[PhenomenonRecord]:
    records: list[PhenomenonRecord] = []
    for body in bodies:
        if body.id not in config.outer_body_ids:
            continue
        d = angular_separation(body.ra_deg, sun.ra_deg)
        if config.opposition_min_deg < d < config.opposition_max_deg:
            records.append(
                PhenomenonRecord(
                    type=PhenomenonType.OPPOSITION,
                    bodies=(body.id,),
                    description=t(
                        "phenomenon_opposition", lang, body=body_name(body.id, lang)
                    ),
                )
            )
        elif d < config.conjunction_max_deg:
            records.append(
                PhenomenonRecord(
                    type=PhenomenonType.CONJUNCTION,
                    bodies=(body.id, sun.id),
                    description=t(
                        "phenomenon_conjunction", lang, body=body_name(body.id, lang)
                    ),
                )
            )
    return records


def _detect_alignment(
    bodies: Sequence[BodySnapshot], config: EngineConfig, lang: str
) -> PhenomenonRecord | None:
    """First seed (canonical order) whose later neighbours within range form a big enough group.

    Closeness is measured on geocentric right ascension. The observer body
    stays in the scan with its sentinel RA of 0.
    """
    candidates = [b for b in bodies if b.id not in config.alignment_excluded_ids]
    for i, seed in enumerate(candidates):
        group = [seed] + [
            other
            for other in candidates[i + 1 :]
            if angular_separation(seed.ra_deg, other.ra_deg) < config.alignment_max_sep_deg
        ]
        if len(group) >= config.alignment_min_bodies:
            names = t("list_separator", lang).join(body_name(b.id, lang) for b in group)
            return PhenomenonRecord(
                type=PhenomenonType.ALIGNMENT,
                bodies=tuple(b.id for b in group),
                description=t("phenomenon_alignment", lang, bodies=names),
            )
    return None
