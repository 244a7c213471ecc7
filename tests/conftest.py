"""Shared fixtures for tactilemap tests."""

import json

import pytest

from tactilemap.models import TactileMapData


@pytest.fixture
def metadata():
    """100 m radius onto a 100 × 100 mm plate (plate edges at ±50 mm)."""
    return {
        "center": {"lat": 40.7128, "lng": -74.006},
        "radiusMetres": 100.0,
        "fetchedAt": "2026-01-01T00:00:00Z",
        "overpassQuery": "",
        "scaleFactor": 0.5,
        "plateWidthMm": 100.0,
        "plateHeightMm": 100.0,
    }


@pytest.fixture
def make_map(metadata):
    """Build validated map data from camelCase feature lists."""
    def _make(**features):
        return TactileMapData.model_validate({"metadata": metadata, **features})
    return _make


@pytest.fixture
def street_corner(metadata):
    """A small, realistic intersection used by scene and CLI tests."""
    return {
        "metadata": metadata,
        "roads": [
            {"id": "r1", "highwayType": "residential", "widthMm": 4.0,
             "points": [{"x": -60, "y": 0}, {"x": 60, "y": 0}]},
            {"id": "r2", "highwayType": "tertiary", "widthMm": 3.5,
             "points": [{"x": 0, "y": -60}, {"x": 0, "y": 60}]},
        ],
        "sidewalks": [
            {"id": "s1", "widthMm": 1.0, "side": "left",
             "points": [{"x": -45, "y": 4}, {"x": -5, "y": 4}]},
        ],
        "crossings": [
            {"id": "c1", "type": "zebra", "widthMm": 1.5,
             "points": [{"x": 10, "y": 3}]},
            {"id": "c2", "type": "marked", "widthMm": 1.5,
             "points": [{"x": -3, "y": 10}, {"x": 3, "y": 10}]},
        ],
        "curbs": [
            {"id": "k1", "type": "raised", "position": {"x": 5, "y": 5}},
            {"id": "k2", "type": "flush", "position": {"x": -5, "y": 5}},
            {"id": "k3", "type": "lowered", "position": {"x": 80, "y": 5}},
        ],
        "trafficSignals": [
            {"id": "t1", "position": {"x": 6, "y": -6},
             "signalType": "pedestrian_signals"},
        ],
        "busStops": [
            {"id": "b1", "position": {"x": -20, "y": -6}, "name": "Main St",
             "shelter": True},
        ],
        "bikeLanes": [
            {"id": "bl1", "widthMm": 1.0, "type": "lane",
             "points": [{"x": 5, "y": -45}, {"x": 5, "y": -5}]},
        ],
        "buildings": [
            {"id": "w1", "heightMm": 3.0, "footprint": [
                {"x": 20, "y": 20}, {"x": 40, "y": 20}, {"x": 40, "y": 40},
                {"x": 20, "y": 40}, {"x": 20, "y": 20}]},
            {"id": "w2", "heightMm": 3.0, "footprint": [
                {"x": 40, "y": -40}, {"x": 60, "y": -40}, {"x": 60, "y": -20},
                {"x": 40, "y": -20}]},
        ],
        "featureSlots": [
            {"id": "f1", "position": {"x": -30, "y": 30}, "slotType": "mailbox",
             "rotationDeg": 45, "widthMm": 6, "depthMm": 3},
        ],
    }


@pytest.fixture
def street_corner_file(tmp_path, street_corner):
    path = tmp_path / "corner.json"
    path.write_text(json.dumps(street_corner), encoding="utf-8")
    return path
