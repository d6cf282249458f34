import json
from dataclasses import replace

import pytest

from mission import AIRPORT_NAME, SELECTED_CELL_NAME, MissionModel, parse_geojson
from models import GridSpec, Orientation, PlanErrorKind

KEY = (55.2, 37.3)


@pytest.fixture
def mission(survey_camera, grid, airport):
    mission = MissionModel(grid, survey_camera, airport)
    mission.toggle_cell_at(55.21, 37.31)
    return mission


def test_toggle_cell_at_uses_containing_cell(mission):
    assert KEY in mission.selection
    assert mission.toggle_cell_at(55.24, 37.34) is False
    assert len(mission.selection) == 0


def test_recompute_builds_both_paths(mission):
    result = mission.recompute()
    assert result.ok
    assert set(mission.paths) == {Orientation.PARALLEL, Orientation.MERIDIAN}
    assert mission.selection[KEY].absolute_height == 1000.0


def test_mutators_do_not_recompute(mission):
    assert mission.paths == {}
    mission.recompute()
    mission.toggle_cell((55.2, 37.4))
    assert mission.paths[Orientation.PARALLEL].segment_count == 16


def test_error_keeps_paths_drawn(mission, survey_camera):
    mission.recompute()
    mission.set_camera(replace(survey_camera, focal_length_mm=1.0))
    result = mission.recompute()
    assert not result.ok
    assert set(mission.paths) == {Orientation.PARALLEL, Orientation.MERIDIAN}


def test_empty_selection_clears_paths(mission):
    mission.recompute()
    mission.toggle_cell(KEY)
    result = mission.recompute()
    assert result.is_empty
    assert mission.paths == {}


def test_set_grid_clears_selection(mission):
    mission.set_grid(GridSpec(0.1, 0.1))
    assert len(mission.selection) == 0


def test_selected_area(mission):
    mission.toggle_cell((55.2, 37.4))
    assert mission.selected_area == 2 * 30913600


def test_cell_errors(mission):
    mission.set_cell_heights(KEY, 10, 5)
    errors = mission.cell_errors()
    assert errors[KEY].kind is PlanErrorKind.INVALID_HEIGHT_RANGE


def test_geojson_without_paths_warns(mission):
    collection, warnings = mission.to_geojson()
    assert len(collection["features"]) == 2
    assert warnings[0].kind is PlanErrorKind.NO_PATHS_COMPUTED_YET


def test_geojson_features(mission):
    mission.recompute()
    collection, warnings = mission.to_geojson()
    assert warnings == []
    features = collection["features"]
    assert len(features) == 4
    assert features[0]["properties"]["name"] == SELECTED_CELL_NAME
    assert features[0]["properties"]["relief_type"] == "Plain"
    assert features[1]["properties"]["name"] == AIRPORT_NAME
    assert [f["properties"]["orientation"] for f in features[2:]] == ["meridians", "parallels"]

    path = features[3]["properties"]
    assert path["name"] == "Flight paths by parallels"
    assert path["paths_count"] == 15
    assert path["segment_count"] == 16
    assert path["focal_length_mm"] == 100.0
    assert path["selected_area"] == 30913600
    assert features[3]["geometry"]["type"] == "LineString"


def test_parse_geojson(mission, airport):
    mission.set_cell_heights(KEY, 100, 350)
    mission.recompute()
    parsed = parse_geojson(mission.to_geojson_string())
    assert parsed["airport"] == airport

    entry = mission.selection[KEY]
    assert len(parsed["cells"]) == 1
    cell = parsed["cells"][0]
    assert cell["polygon_name"] == entry.name
    assert cell["relief_type"] == entry.relief_type.value == "Variable"
    for name in ("min_height", "max_height", "mean_height", "absolute_height", "elevation_difference"):
        assert cell[name] == pytest.approx(getattr(entry, name), abs=1e-5)
    assert cell["mean_height"] == 125
    assert cell["absolute_height"] == 1125

    assert set(parsed["paths"]) == {Orientation.PARALLEL, Orientation.MERIDIAN}
    for orientation, path in mission.paths.items():
        properties = parsed["paths"][orientation]
        assert properties["path_length_m"] == pytest.approx(path.length_m, abs=1e-5)
        assert properties["flight_time_h"] == pytest.approx(path.flight_time_h, abs=1e-5)
        assert properties["paths_count"] == path.paths_count
        assert len(properties["geometry"].coords) == len(path.vertices)


def test_geojson_string_is_valid_json(mission):
    assert json.loads(mission.to_geojson_string())["type"] == "FeatureCollection"


def test_exported_heights_round_halves_up(mission):
    mission.set_cell_heights(KEY, 100, 105)
    mission.recompute()
    properties = mission.to_geojson()[0]["features"][0]["properties"]
    assert properties["mean_height"] == 3
    assert properties["absolute_height"] == 1003


def test_invalid_cell_exports_no_derived_heights(mission):
    mission.recompute()
    mission.set_cell_heights(KEY, 10, 5)
    properties = mission.to_geojson()[0]["features"][0]["properties"]
    assert properties["valid"] is False
    assert properties["mean_height"] is None
    assert properties["relief_type"] is None
