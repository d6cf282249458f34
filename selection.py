import logging
from dataclasses import dataclass
from functools import reduce
from typing import Dict, Optional

from shapely.geometry import box

from config import DEFAULT_MAX_HEIGHT_M, DEFAULT_MIN_HEIGHT_M, VARIABLE_RELIEF_THRESHOLD
from models import Cell, CellKey, PlanError, PlanErrorKind, ReliefType
from nomenclature import round_half_up

logger = logging.getLogger(__name__)

HEIGHT_RANGE_MESSAGE = "Min height should be less than or equal to max height!"


def cell_polygon(cell: Cell):
    return box(cell.sw.lng, cell.sw.lat, cell.ne.lng, cell.ne.lat)


def polygon_union(current, polygon):
    if current is None:
        return polygon
    return current.union(polygon)


@dataclass
class CellEntry:
    """Selected cell with the user's heights and the values derived from them."""
    key: CellKey
    name: str
    polygon: object
    min_height: float = DEFAULT_MIN_HEIGHT_M
    max_height: float = DEFAULT_MAX_HEIGHT_M
    mean_height: Optional[float] = None
    absolute_height: Optional[float] = None
    elevation_difference: Optional[float] = None
    relief_type: Optional[ReliefType] = None
    error: Optional[PlanError] = None

    @property
    def valid(self):
        return self.error is None

    def validate(self):
        if self.min_height > self.max_height:
            self.error = PlanError(PlanErrorKind.INVALID_HEIGHT_RANGE, HEIGHT_RANGE_MESSAGE)
            self.clear_derived()
        else:
            self.error = None
        return self.valid

    def clear_derived(self):
        self.mean_height = self.absolute_height = None
        self.elevation_difference = self.relief_type = None

    def recalculate(self, flight_height):
        if not self.validate():
            return

        difference = self.max_height - self.min_height
        self.mean_height = round_half_up(difference / 2)
        self.absolute_height = flight_height + self.mean_height
        self.elevation_difference = difference / flight_height
        if self.elevation_difference >= VARIABLE_RELIEF_THRESHOLD:
            self.relief_type = ReliefType.VARIABLE
        else:
            self.relief_type = ReliefType.PLAIN


class SelectionSet:
    """User-selected grid cells keyed by their south-west corner."""

    def __init__(self):
        self._entries: Dict[CellKey, CellEntry] = {}
        self._union = None

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def __getitem__(self, key) -> CellEntry:
        return self._entries[key]

    def keys(self):
        return set(self._entries)

    @property
    def union(self):
        """Union of valid selected cells or None when there is nothing to cover."""
        return self._union

    def select(self, cell: Cell):
        if cell.key not in self._entries:
            self._entries[cell.key] = CellEntry(key=cell.key, name=cell.name, polygon=cell_polygon(cell))
            self._rebuild_union()

    def deselect(self, key: CellKey):
        if self._entries.pop(key, None) is not None:
            self._rebuild_union()

    def toggle(self, cell: Cell) -> bool:
        """Selects or deselects the cell. Returns True if it is selected now."""
        if cell.key in self._entries:
            self.deselect(cell.key)
            return False
        self.select(cell)
        return True

    def set_heights(self, key: CellKey, min_height, max_height):
        entry = self._entries[key]
        entry.min_height, entry.max_height = min_height, max_height
        if not entry.validate():
            logger.warning(f"Cell {entry.name} {key}: {entry.error.message}")
        self._rebuild_union()

    def recalculate(self, flight_height):
        for entry in self._entries.values():
            entry.recalculate(flight_height)
        self._rebuild_union()

    def valid_entries(self):
        return [entry for entry in self._entries.values() if entry.valid]

    def selected_area(self, lat_cell_size_m, lng_cell_size_m):
        return len(self.valid_entries()) * round(lat_cell_size_m * lng_cell_size_m)

    def clear(self):
        self._entries.clear()
        self._union = None

    def _rebuild_union(self):
        self._union = reduce(polygon_union, (entry.polygon for entry in self.valid_entries()), None)
