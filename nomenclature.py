"""
Topographic sheet nomenclature for grid cells.

Every standard scale is a fixed recipe on top of the 1:1 000 000 sheet
(4° × 6°). The recipes are kept as a literal table; ``name_for`` walks it.
"""
import math
from dataclasses import dataclass

import roman

from models import StandardScale

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NOT_STANDARD_NAME = "Not in standard scale system"
OUT_OF_RANGE_NAME = "Out of nomenclature range"


def to_fixed(n):
    """Round to the fifth digit after the point to get rid of floating-point noise."""
    return round(n, 5)


def round_half_up(n):
    """Nearest integer with halves rounded up."""
    return math.floor(n + 0.5)


def closest_less(current, divider):
    return math.floor(current / divider) * divider


def closest_greater(current, divider):
    return math.ceil(current / divider) * divider


@dataclass(frozen=True)
class SheetPart:
    """One suffix of a sheet name: the sheet is split into parts × parts pieces."""
    parts: int
    lat_size: float = 4
    lng_size: float = 6
    style: str = "number"  # number | roman | upper | lower | rotated
    prefix: bool = False


_SHEET_100K = SheetPart(12)
_SHEET_50K = SheetPart(2, 2 / 6, 3 / 6, "upper")
_SHEET_25K = SheetPart(2, 1 / 6, 15 / 60, "lower")
_SHEET_10K = SheetPart(2, 5 / 60, 7.5 / 60)
_SHEET_5K = SheetPart(16, 2 / 6, 3 / 6)
_SHEET_2K = SheetPart(3, (1 + 15 / 60) / 60, (1 + 52.5 / 60) / 60, "rotated")

# scale -> (dash-separated parts, parts joined inside brackets)
NOMENCLATURE_TABLE = {
    StandardScale.SCALE_1_000_000: ((), ()),
    StandardScale.SCALE_500_000: ((SheetPart(2),), ()),
    StandardScale.SCALE_300_000: ((SheetPart(3, style="roman", prefix=True),), ()),
    StandardScale.SCALE_200_000: ((SheetPart(6, style="roman"),), ()),
    StandardScale.SCALE_100_000: ((_SHEET_100K,), ()),
    StandardScale.SCALE_50_000: ((_SHEET_100K, _SHEET_50K), ()),
    StandardScale.SCALE_25_000: ((_SHEET_100K, _SHEET_50K, _SHEET_25K), ()),
    StandardScale.SCALE_10_000: ((_SHEET_100K, _SHEET_50K, _SHEET_25K, _SHEET_10K), ()),
    StandardScale.SCALE_5_000: ((_SHEET_100K,), (_SHEET_5K,)),
    StandardScale.SCALE_2_000: ((_SHEET_100K,), (_SHEET_5K, _SHEET_2K)),
}


def sheet_number(parts, lat, lng, sheet_lat=4, sheet_lng=6):
    """
    Split a sheet of given size into parts × parts pieces and return the
    number of the piece containing (lat, lng).

    Pieces are counted from left to right and from top to bottom, starting
    from 1. A point lying on an inner border belongs to the piece to its
    north-east.
    """
    lat_scale = to_fixed(sheet_lat)
    lng_scale = to_fixed(sheet_lng)

    # Southwest border of the sheet containing the point
    bottom_lat = to_fixed(closest_less(lat, lat_scale))
    left_lng = to_fixed(closest_less(lng, lng_scale))

    row_from_bottom = math.floor((lat - bottom_lat) / (lat_scale / parts))
    col_from_left = math.floor((lng - left_lng) / (lng_scale / parts))
    row_from_bottom = min(max(row_from_bottom, 0), parts - 1)
    col_from_left = min(max(col_from_left, 0), parts - 1)

    row = parts - row_from_bottom
    col = col_from_left + 1
    return parts * (row - 1) + col


def _format_part(part: SheetPart, number: int) -> str:
    if part.style == "roman":
        return roman.toRoman(number)
    if part.style == "upper":
        return ALPHABET[number - 1]
    if part.style == "lower":
        return ALPHABET[number - 1].lower()
    if part.style == "rotated":
        # 1:2 000 letters run from the middle row of the 1:5 000 sheet
        index = number - 1
        index = index - 6 if index >= 6 else index + 3
        return ALPHABET[index].lower()
    return str(number)


def name_for(lat, lng, scale: StandardScale) -> str:
    """Sheet name of the point at the given standard scale."""
    if scale is StandardScale.CUSTOM:
        return NOT_STANDARD_NAME

    lat, lng = to_fixed(lat), to_fixed(lng)

    # 1:1 000 000. This part is always present
    index = math.floor(abs(lat) / 4)
    if index >= len(ALPHABET):
        return OUT_OF_RANGE_NAME
    name = f"{ALPHABET[index]}-{math.floor(lng / 6) + 31}"

    def label(part):
        number = sheet_number(part.parts, lat, lng, part.lat_size, part.lng_size)
        return _format_part(part, number)

    dashed, bracketed = NOMENCLATURE_TABLE[scale]
    for part in dashed:
        name = f"{label(part)}-{name}" if part.prefix else f"{name}-{label(part)}"
    if bracketed:
        name += "(" + "-".join(label(part) for part in bracketed) + ")"

    if lat < 0:
        name += " (S)"
    return name
