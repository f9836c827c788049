"""Static sky overlays: the ecliptic line and the RA/Dec grid, in horizontal coordinates."""

from collections.abc import Iterable

from skyorrery.coordinates import (
    ecliptic_to_horizontal_approx,
    equatorial_to_horizontal,
)
from skyorrery.models import HorizontalCoord, OverlayLine

DEC_CIRCLES_DEG: tuple[int, ...] = (-60, -30, 0, 30, 60)
RA_MERIDIANS_HOURS: tuple[int, ...] = tuple(range(0, 24, 2))


def _split_visible(
    points: Iterable[HorizontalCoord], min_alt_deg: float
) -> tuple[tuple[HorizontalCoord, ...], ...]:
    """Break a polyline wherever it dips below min_alt_deg. Drops runs shorter than 2."""
    segments: list[tuple[HorizontalCoord, ...]] = []
    run: list[HorizontalCoord] = []
    for p in points:
        if p.alt_deg > min_alt_deg:
            run.append(p)
            continue
        if len(run) >= 2:
            segments.append(tuple(run))
        run = []
    if len(run) >= 2:
        segments.append(tuple(run))
    return tuple(segments)


def ecliptic_line(
    lat_deg: float, lst_deg: float, samples: int = 180, min_alt_deg: float = -10.0
) -> OverlayLine:
    """The ecliptic as seen by an observer, sampled every 360/samples degrees."""
    points = (
        ecliptic_to_horizontal_approx(i * 360.0 / samples, lat_deg, lst_deg)
        for i in range(samples + 1)
    )
    return OverlayLine(name="ecliptic", segments=_split_visible(points, min_alt_deg))


def celestial_grid(
    lat_deg: float, lst_deg: float, min_alt_deg: float = -5.0
) -> tuple[OverlayLine, ...]:
    """Declination circles every 30° and hour circles every 2h.

    Names: "dec-60" … "dec+60" (the celestial equator is "dec+0") and "ra00h" … "ra22h".
    """
    lines: list[OverlayLine] = []
    for dec in DEC_CIRCLES_DEG:
        points = (
            equatorial_to_horizontal(i * 5.0, dec, lat_deg, lst_deg) for i in range(73)
        )
        lines.append(
            OverlayLine(name=f"dec{dec:+d}", segments=_split_visible(points, min_alt_deg))
        )
    for hour in RA_MERIDIANS_HOURS:
        points = (
            equatorial_to_horizontal(hour * 15.0, -90.0 + i * 5.0, lat_deg, lst_deg)
            for i in range(37)
        )
        lines.append(
            OverlayLine(name=f"ra{hour:02d}h", segments=_split_visible(points, min_alt_deg))
        )
    return tuple(lines)
