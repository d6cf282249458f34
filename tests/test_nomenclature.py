import pytest

from models import GridSpec, StandardScale
from grid import cell_for_key, cell_key_at
from nomenclature import (
    NOT_STANDARD_NAME,
    OUT_OF_RANGE_NAME,
    SheetPart,
    _format_part,
    closest_greater,
    closest_less,
    name_for,
    round_half_up,
    sheet_number,
    to_fixed,
)

LAT, LNG = 55.28456, 37.39567


@pytest.mark.parametrize("scale, expected", [
    (StandardScale.SCALE_1_000_000, "N-37"),
    (StandardScale.SCALE_500_000, "N-37-1"),
    (StandardScale.SCALE_300_000, "I-N-37"),
    (StandardScale.SCALE_200_000, "N-37-VIII"),
    (StandardScale.SCALE_100_000, "N-37-27"),
    (StandardScale.SCALE_50_000, "N-37-27-B"),
    (StandardScale.SCALE_25_000, "N-37-27-B-b"),
    (StandardScale.SCALE_10_000, "N-37-27-B-b-3"),
    (StandardScale.SCALE_5_000, "N-37-27(45)"),
    (StandardScale.SCALE_2_000, "N-37-27(45-b)"),
])
def test_name_for_every_standard_scale(scale, expected):
    assert name_for(LAT, LNG, scale) == expected


def test_name_for_is_stable_under_rounding():
    for scale in StandardScale:
        first = name_for(LAT + 0.000001, LNG - 0.000001, scale)
        assert first == name_for(LAT + 0.000001, LNG - 0.000001, scale)
        assert name_for(to_fixed(LAT + 0.000001), LNG, scale) == name_for(LAT + 0.000001, LNG, scale)


def test_grid_cell_example_names_one_million_sheet():
    spec = GridSpec(0.1, 0.1, StandardScale.SCALE_1_000_000)
    cell = cell_for_key(cell_key_at(55.23456, 37.34567, spec), spec)
    assert cell.name == "N-37"


def test_southern_hemisphere_suffix():
    assert name_for(-10.5, 20.5, StandardScale.SCALE_1_000_000) == "C-34 (S)"


def test_custom_scale_has_no_name():
    assert name_for(LAT, LNG, StandardScale.CUSTOM) == NOT_STANDARD_NAME


def test_latitude_beyond_alphabet_is_flagged():
    # |lat| >= 104 would need a 27th letter
    assert name_for(105.0, 10.0, StandardScale.SCALE_1_000_000) == OUT_OF_RANGE_NAME
    assert name_for(103.9, 10.0, StandardScale.SCALE_1_000_000) == "Z-32"


@pytest.mark.parametrize("parts", [2, 3, 6, 12, 16])
def test_sheet_number_partitions_sheet(parts):
    seen = []
    for r in range(parts):
        for c in range(parts):
            lat = 52 + (r + 0.5) * 4 / parts
            lng = 36 + (c + 0.5) * 6 / parts
            number = sheet_number(parts, lat, lng)
            # Counted from the top-left corner
            assert number == parts * (parts - 1 - r) + c + 1
            seen.append(number)
    assert sorted(seen) == list(range(1, parts ** 2 + 1))


@pytest.mark.parametrize("lat, lng", [(52.0, 36.0), (55.99999, 41.99999), (54.0, 39.0), (52.0, 41.99999)])
def test_sheet_number_borders_stay_in_range(lat, lng):
    for parts in (2, 3, 12):
        assert 1 <= sheet_number(parts, lat, lng) <= parts ** 2


def test_two_thousand_letters_rotate():
    part = SheetPart(3, style="rotated")
    letters = [_format_part(part, n) for n in range(1, 10)]
    assert letters == ["d", "e", "f", "g", "h", "i", "a", "b", "c"]


def test_closest_helpers_snap_outward():
    assert closest_less(5.5, 2) == 4
    assert closest_greater(5.5, 2) == 6
    assert closest_less(-0.5, 1) == -1


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4999) == 2
    assert round_half_up(-2.5) == -2


def test_scale_labels_round_trip():
    for scale in StandardScale:
        assert StandardScale.from_label(scale.label) is scale
    with pytest.raises(ValueError):
        StandardScale.from_label("1:123")
