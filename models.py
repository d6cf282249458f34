# models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


@dataclass(frozen=True)
class Bounds:
    """Visible map window."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_folium(cls, bounds):
        # st_folium returns {"_southWest": {"lat", "lng"}, "_northEast": {...}}
        sw, ne = bounds["_southWest"], bounds["_northEast"]
        return cls(sw["lat"], sw["lng"], ne["lat"], ne["lng"])


class StandardScale(Enum):
    SCALE_1_000_000 = 1_000_000
    SCALE_500_000 = 500_000
    SCALE_300_000 = 300_000
    SCALE_200_000 = 200_000
    SCALE_100_000 = 100_000
    SCALE_50_000 = 50_000
    SCALE_25_000 = 25_000
    SCALE_10_000 = 10_000
    SCALE_5_000 = 5_000
    SCALE_2_000 = 2_000
    CUSTOM = float("inf")

    @property
    def label(self):
        if self is StandardScale.CUSTOM:
            return "Custom"
        return "1:" + f"{self.value:,}".replace(",", " ")

    @classmethod
    def from_label(cls, label):
        """Parse labels like "1:100 000" or "Custom"."""
        if label == "Custom":
            return cls.CUSTOM
        try:
            return cls(int(label[2:].replace(" ", "")))
        except ValueError:
            raise ValueError(f"Unknown standard scale: {label!r}")


# Default sheet size (lat, lng degrees) for each standard scale
SCALE_CELL_SIZES = {
    StandardScale.SCALE_1_000_000: (4, 6),
    StandardScale.SCALE_500_000: (2, 3),
    StandardScale.SCALE_300_000: (4 / 3, 2),
    StandardScale.SCALE_200_000: (2 / 3, 1),
    StandardScale.SCALE_100_000: (1 / 3, 1 / 2),
    StandardScale.SCALE_50_000: (1 / 6, 1 / 4),
    StandardScale.SCALE_25_000: (1 / 12, 1 / 8),
    StandardScale.SCALE_10_000: (1 / 24, 1 / 16),
    StandardScale.SCALE_5_000: (1 / 48, 1 / 32),
    StandardScale.SCALE_2_000: (1 / 144, 1 / 96),
}


@dataclass(frozen=True)
class GridSpec:
    lat_distance: float
    lng_distance: float
    standard_scale: StandardScale = StandardScale.CUSTOM

    def __post_init__(self):
        if self.lat_distance <= 0 or self.lng_distance <= 0:
            raise ValueError("Grid distances must be positive")

    @classmethod
    def for_scale(cls, scale: StandardScale):
        lat_distance, lng_distance = SCALE_CELL_SIZES[scale]
        return cls(lat_distance, lng_distance, scale)

    @property
    def is_standard(self):
        return self.standard_scale is not StandardScale.CUSTOM


CellKey = Tuple[float, float]


@dataclass(frozen=True)
class Cell:
    sw: LatLng
    ne: LatLng
    name: str
    is_selected: bool = False

    @property
    def key(self) -> CellKey:
        return (self.sw.lat, self.sw.lng)

    @property
    def center(self):
        return LatLng((self.sw.lat + self.ne.lat) / 2, (self.sw.lng + self.ne.lng) / 2)


@dataclass(frozen=True)
class LabelPoint:
    position: LatLng
    text: str
    origin: str = "center"  # leftCenter | topCenter | center


class Orientation(Enum):
    PARALLEL = "parallels"
    MERIDIAN = "meridians"


class ReliefType(Enum):
    PLAIN = "Plain"
    VARIABLE = "Variable"


@dataclass
class FlightPath:
    orientation: Orientation
    vertices: List[LatLng] = field(default_factory=list)
    length_m: float = 0.0
    flight_time_h: Optional[float] = None
    paths_count: int = 0
    segment_count: int = 0


class PlanErrorKind(Enum):
    INVALID_HEIGHT_RANGE = "InvalidHeightRange"
    PATH_COUNT_OUT_OF_RANGE = "PathCountOutOfRange"
    NO_PATHS_COMPUTED_YET = "NoPathsComputedYet"
    DEGENERATE_UNION = "DegenerateUnion"


@dataclass(frozen=True)
class PlanError:
    kind: PlanErrorKind
    message: str


@dataclass
class PlanResult:
    parallel: Optional[FlightPath] = None
    meridian: Optional[FlightPath] = None
    error: Optional[PlanError] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def is_empty(self):
        return self.ok and self.parallel is None and self.meridian is None
