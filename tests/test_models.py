"""Tests for map data parsing and defaults."""

import json

import pytest
from pydantic import ValidationError

from tactilemap.models import Curb, LocalPoint, Road, TactileMapData, load_map_data


class TestParsing:

    def test_camel_case_keys(self, make_map):
        data = make_map(
            roads=[{"id": "r1", "highwayType": "primary", "widthMm": 5,
                    "points": [{"x": 0, "y": 0}, {"x": 10, "y": 0}]}],
            trafficSignals=[{"id": "t1", "position": {"x": 1, "y": 2},
                             "signalType": "button"}],
        )
        assert data.metadata.plate_width_mm == 100.0
        assert data.metadata.center.lat == pytest.approx(40.7128)
        assert data.roads[0].highway_type == 'primary'
        assert data.roads[0].points == [LocalPoint(0, 0), LocalPoint(10, 0)]
        assert data.traffic_signals[0].position == LocalPoint(1, 2)
        assert data.traffic_signals[0].signal_type == 'button'

    def test_points_accept_pairs(self, make_map):
        data = make_map(buildings=[{"id": "w", "footprint": [[0, 0], [1, 0], [1, 1]]}])
        assert data.buildings[0].footprint[2] == LocalPoint(1, 1)
        assert data.buildings[0].footprint[2].x == 1

    def test_missing_feature_lists_default_empty(self, make_map):
        data = make_map()
        assert data.roads == []
        assert data.feature_slots == []
        assert data.bounds is None
        assert data.feature_count() == 0

    def test_snake_case_names_also_accepted(self):
        road = Road(id='r', points=[(0, 0), (1, 1)], width_mm=2.0, highway_type='service')
        assert road.width_mm == 2.0
        assert road.highway_type == 'service'

    def test_models_are_frozen(self):
        road = Road(id='r', points=[(0, 0), (1, 1)], width_mm=2.0)
        with pytest.raises(ValidationError):
            road.width_mm = 3.0

    def test_invalid_curb_type_rejected(self, make_map):
        with pytest.raises(ValidationError):
            make_map(curbs=[{"id": "k", "type": "sloped", "position": {"x": 0, "y": 0}}])

    def test_missing_metadata_rejected(self):
        with pytest.raises(ValidationError):
            TactileMapData.model_validate({"roads": []})


class TestDefaults:

    @pytest.mark.parametrize("highway,width", [
        ('residential', 3.0),
        ('motorway', 7.0),
        ('footway', 0.9),
        ('not_a_highway', 3.0),
    ])
    def test_road_width_from_highway_type(self, make_map, highway, width):
        data = make_map(roads=[{"id": "r", "highwayType": highway,
                                "points": [[0, 0], [1, 0]]}])
        assert data.roads[0].width_mm == pytest.approx(width)

    def test_road_without_type_uses_residential(self, make_map):
        data = make_map(roads=[{"id": "r", "points": [[0, 0], [1, 0]]}])
        assert data.roads[0].width_mm == pytest.approx(3.0)

    def test_other_line_widths(self, make_map):
        data = make_map(
            sidewalks=[{"id": "s", "points": [[0, 0], [1, 0]]}],
            crossings=[{"id": "c", "points": [[0, 0]]}],
            bikeLanes=[{"id": "b", "points": [[0, 0], [1, 0]]}],
        )
        assert data.sidewalks[0].width_mm == pytest.approx(0.9)
        assert data.crossings[0].width_mm == pytest.approx(1.5)
        assert data.bike_lanes[0].width_mm == pytest.approx(1.0)

    def test_explicit_width_kept(self, make_map):
        data = make_map(roads=[{"id": "r", "widthMm": 1.25, "points": [[0, 0], [1, 0]]}])
        assert data.roads[0].width_mm == 1.25

    @pytest.mark.parametrize("curb_type,height", [
        ('flush', 0.0), ('lowered', 1.2), ('raised', 2.5), ('rolled', 1.8),
    ])
    def test_curb_height_from_type(self, curb_type, height):
        curb = Curb(id='k', type=curb_type, position=(0, 0))
        assert curb.height_mm == height

    def test_explicit_curb_height_kept(self, make_map):
        data = make_map(curbs=[{"id": "k", "type": "raised", "heightMm": 1.0,
                                "position": [0, 0]}])
        assert data.curbs[0].height_mm == 1.0


class TestLoadMapData:

    def test_load_from_file(self, street_corner_file):
        data = load_map_data(street_corner_file)
        assert len(data.roads) == 2
        assert len(data.curbs) == 3
        assert data.feature_count() == 14

    def test_load_invalid_file(self, tmp_path, metadata):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"metadata": metadata,
                                    "roads": [{"points": []}]}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_map_data(path)
