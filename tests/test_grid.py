import inspect

import pytest

from grid import (
    axis_labels,
    cell_for_key,
    cell_key_at,
    cell_pixel_span,
    name_labels,
    should_hide_grid,
    should_hide_overlays,
    visible_cells,
)
from models import Bounds, GridSpec, StandardScale
from nomenclature import NOT_STANDARD_NAME

WINDOW = Bounds(south=55.21, west=37.31, north=55.39, east=37.49)


@pytest.fixture
def spec():
    return GridSpec(0.1, 0.1, StandardScale.SCALE_1_000_000)


def test_visible_cells_is_lazy(spec):
    assert inspect.isgenerator(visible_cells(WINDOW, spec))


def test_visible_cells_snap_outward_and_run_south_to_north(spec):
    cells = list(visible_cells(WINDOW, spec))
    assert len(cells) == 9
    assert cells[0].key == (55.2, 37.3)
    assert cells[1].key == (55.2, 37.4)
    assert cells[3].key == (55.3, 37.3)
    assert cells[-1].key == (55.4, 37.5)


def test_cell_corners_follow_distances(spec):
    cell = next(visible_cells(WINDOW, spec))
    assert cell.ne.lat == pytest.approx(cell.sw.lat + spec.lat_distance)
    assert cell.ne.lng == pytest.approx(cell.sw.lng + spec.lng_distance)
    assert cell.name == "N-37"


def test_keys_do_not_depend_on_window_position(spec):
    shifted = Bounds(south=55.03, west=37.12, north=55.27, east=37.36)
    first = {cell.key: cell for cell in visible_cells(WINDOW, spec)}
    second = {cell.key: cell for cell in visible_cells(shifted, spec)}
    common = set(first) & set(second)
    assert (55.2, 37.3) in common
    for key in common:
        assert first[key].ne == second[key].ne


def test_selected_cells_are_marked(spec):
    cells = list(visible_cells(WINDOW, spec, selected_keys={(55.3, 37.4)}))
    assert [cell.key for cell in cells if cell.is_selected] == [(55.3, 37.4)]


def test_axis_labels_one_per_row_and_column(spec):
    labels = axis_labels(WINDOW, spec)
    rows = [label for label in labels if label.origin == "leftCenter"]
    cols = [label for label in labels if label.origin == "topCenter"]
    assert len(rows) == 3 and len(cols) == 3
    assert all(label.position.lng == WINDOW.west for label in rows)
    assert all(label.position.lat == WINDOW.north for label in cols)
    assert rows[0].text == "55.2"


def test_name_labels_only_for_standard_scales(spec):
    cells = list(visible_cells(WINDOW, spec))
    assert len(name_labels(cells, spec)) == len(cells)

    custom = GridSpec(0.1, 0.1)
    custom_cells = list(visible_cells(WINDOW, custom))
    assert name_labels(custom_cells, custom) == []
    assert custom_cells[0].name == NOT_STANDARD_NAME


def test_cell_key_at_point():
    spec = GridSpec(0.1, 0.1)
    assert cell_key_at(55.23456, 37.34567, spec) == (55.2, 37.3)
    assert cell_key_at(-0.05, -0.05, spec) == (-0.1, -0.1)
    assert cell_for_key((55.2, 37.3), spec).key == (55.2, 37.3)


def test_pixel_span_doubles_with_zoom():
    assert cell_pixel_span(1, 0) == pytest.approx(256 / 360)
    assert cell_pixel_span(0.1, 11) == pytest.approx(2 * cell_pixel_span(0.1, 10))


def test_visibility_gates():
    assert should_hide_grid(69, labelled=True)
    assert not should_hide_grid(70, labelled=True)
    assert should_hide_grid(14, labelled=False)
    assert not should_hide_grid(15, labelled=False)
    assert should_hide_overlays(199)
    assert not should_hide_overlays(200)


def test_grid_spec_rejects_non_positive_distances():
    with pytest.raises(ValueError):
        GridSpec(0, 0.1)


def test_grid_spec_for_scale():
    spec = GridSpec.for_scale(StandardScale.SCALE_100_000)
    assert spec.lat_distance == pytest.approx(1 / 3)
    assert spec.lng_distance == pytest.approx(1 / 2)
    assert spec.is_standard
    with pytest.raises(KeyError):
        GridSpec.for_scale(StandardScale.CUSTOM)
