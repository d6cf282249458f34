# region Imports
import math
from typing import Iterable, Iterator, List

from config import HIDE_GRID_LABELLED_PX, HIDE_GRID_PLAIN_PX, HIDE_OVERLAYS_PX, TILE_SIZE_PX
from models import Bounds, Cell, CellKey, GridSpec, LabelPoint, LatLng
from nomenclature import closest_greater, closest_less, name_for, to_fixed
# endregion


# region Index Helpers
def _index_range(start, end, distance):
    # Snap outward so that cell borders don't depend on the window position
    first = round(closest_less(start, distance) / distance)
    last = round(closest_greater(end, distance) / distance)
    return range(first, last + 1)


def _make_cell(lat_index, lng_index, spec: GridSpec, selected_keys=()) -> Cell:
    sw = LatLng(to_fixed(lat_index * spec.lat_distance), to_fixed(lng_index * spec.lng_distance))
    ne = LatLng(to_fixed((lat_index + 1) * spec.lat_distance), to_fixed((lng_index + 1) * spec.lng_distance))
    # Name by the centre to stay away from sheet borders
    name = name_for(sw.lat + spec.lat_distance / 2, sw.lng + spec.lng_distance / 2, spec.standard_scale)
    return Cell(sw=sw, ne=ne, name=name, is_selected=(sw.lat, sw.lng) in selected_keys)


def cell_key_at(lat, lng, spec: GridSpec) -> CellKey:
    """Key (south-west corner) of the cell containing the point."""
    lat_index = math.floor(lat / spec.lat_distance)
    lng_index = math.floor(lng / spec.lng_distance)
    return (to_fixed(lat_index * spec.lat_distance), to_fixed(lng_index * spec.lng_distance))


def cell_for_key(key: CellKey, spec: GridSpec, selected_keys=()) -> Cell:
    lat_index = round(key[0] / spec.lat_distance)
    lng_index = round(key[1] / spec.lng_distance)
    return _make_cell(lat_index, lng_index, spec, selected_keys)
# endregion


# region Tessellation
def visible_cells(window: Bounds, spec: GridSpec, selected_keys=()) -> Iterator[Cell]:
    """Cells covering the window, from south to north and from west to east."""
    lng_indices = _index_range(window.west, window.east, spec.lng_distance)
    for lat_index in _index_range(window.south, window.north, spec.lat_distance):
        for lng_index in lng_indices:
            yield _make_cell(lat_index, lng_index, spec, selected_keys)


def axis_labels(window: Bounds, spec: GridSpec) -> List[LabelPoint]:
    labels = []
    for lat_index in _index_range(window.south, window.north, spec.lat_distance):
        lat = to_fixed(lat_index * spec.lat_distance)
        labels.append(LabelPoint(LatLng(lat, window.west), str(lat), "leftCenter"))
    for lng_index in _index_range(window.west, window.east, spec.lng_distance):
        lng = to_fixed(lng_index * spec.lng_distance)
        labels.append(LabelPoint(LatLng(window.north, lng), str(lng), "topCenter"))
    return labels


def name_labels(cells: Iterable[Cell], spec: GridSpec) -> List[LabelPoint]:
    if not spec.is_standard:
        return []
    return [LabelPoint(cell.center, cell.name) for cell in cells]
# endregion


# region Visibility Gates
def cell_pixel_span(lng_distance, zoom) -> float:
    """On-screen width of one cell in Web Mercator pixels."""
    return lng_distance * TILE_SIZE_PX * 2 ** zoom / 360


def should_hide_grid(pixel_span, labelled=True) -> bool:
    # Labelled grids become messy and slow much earlier
    threshold = HIDE_GRID_LABELLED_PX if labelled else HIDE_GRID_PLAIN_PX
    return pixel_span < threshold


def should_hide_overlays(pixel_span) -> bool:
    return pixel_span < HIDE_OVERLAYS_PX
# endregion
