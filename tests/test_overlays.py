from __future__ import annotations

import pytest

from skyorrery.overlays import celestial_grid, ecliptic_line


def test_ecliptic_line_segments_stay_above_cutoff():
    line = ecliptic_line(lat_deg=40.0, lst_deg=123.0)
    assert line.name == "ecliptic"
    assert line.segments
    for seg in line.segments:
        assert len(seg) >= 2
        assert all(p.alt_deg > -10.0 for p in seg)


def test_grid_names():
    names = [line.name for line in celestial_grid(lat_deg=40.0, lst_deg=0.0)]
    assert names[:5] == ["dec-60", "dec-30", "dec+0", "dec+30", "dec+60"]
    assert names[5:] == [f"ra{h:02d}h" for h in range(0, 24, 2)]


def test_declination_circle_is_constant_altitude_at_pole():
    grid = {line.name: line for line in celestial_grid(lat_deg=90.0, lst_deg=42.0)}
    (segment,) = grid["dec+60"].segments
    assert len(segment) == 73
    assert all(p.alt_deg == pytest.approx(60.0) for p in segment)
    # The southern circles never rise for a north-pole observer.
    assert grid["dec-30"].segments == ()
