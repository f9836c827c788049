from __future__ import annotations

import json

import pytest

from conftest import FakeEphemeris
from skyorrery import cli
from skyorrery.compute import SkyEngine


@pytest.fixture
def fake_engine(monkeypatch) -> SkyEngine:
    engine = SkyEngine(FakeEphemeris())
    monkeypatch.setattr(cli, "default_engine", lambda: engine)
    return engine


ARGS = ["--when", "2024-04-08 13:17", "--tz", "America/Chicago", "--lat", "32.78", "--lng", "-96.8"]


def test_prints_snapshot_json(fake_engine, capsys):
    assert cli.main(ARGS) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["instant"] == "2024-04-08T18:17:00+00:00"
    assert [b["id"] for b in payload["bodies"]][:3] == ["Mercury", "Venus", "Earth"]
    assert payload["sun"]["constellation"] == "Psc"
    assert payload["phenomena"] == []
    assert "overlays" not in payload


def test_overlays_flag(fake_engine, capsys):
    assert cli.main([*ARGS, "--overlays"]) == 0
    payload = json.loads(capsys.readouterr().out)
    names = [line["name"] for line in payload["overlays"]]
    assert names[0] == "ecliptic"
    assert "dec+30" in names and "ra12h" in names


def test_bad_timezone_exits_2(fake_engine, capsys):
    assert cli.main(["--when", "2024-04-08 13:17", "--tz", "Nowhere/Land", "--lat", "0", "--lng", "0"]) == 2
    assert "Unknown timezone" in capsys.readouterr().err


def test_invalid_observer_exits_1(fake_engine, capsys):
    assert cli.main(["--when", "2024-04-08 13:17", "--lat", "91", "--lng", "0"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["bodies"] == []
