import math
from dataclasses import asdict, dataclass, fields
from typing import Optional

from config import CAPTURE_BASIS_FACTOR, MEAN_EARTH_RADIUS_M
from models import GridSpec
from nomenclature import round_half_up, to_fixed


@dataclass(frozen=True)
class CameraParameters:
    width_px: int
    height_px: int
    pixel_size_um: float
    focal_length_mm: float
    flight_height_m: float
    overlap_between_paths_pct: float
    overlap_between_images_pct: float
    speed_kmh: float = 0.0

    @classmethod
    def from_dict(cls, values):
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in names})


@dataclass(frozen=True)
class DerivedGeometry:
    m: float  # geometric scale coefficient
    image_scale: str
    lx: float  # sensor side along the camera height, m
    ly: float  # sensor side along the camera width, m
    Lx: float
    Ly: float
    Bx: float  # capture basis between frames of one path
    By: float  # basis between adjacent paths
    GSI: float
    IFOV: float  # μrad
    GIFOV: float
    FOV: float
    GFOV: float
    speed_mps: float
    flight_height_m: float
    lat_cell_size_m: Optional[int] = None
    lng_cell_size_m: Optional[int] = None
    lat_paths_count: Optional[int] = None
    lng_paths_count: Optional[int] = None

    @property
    def parallel_extension_deg(self):
        return CAPTURE_BASIS_FACTOR * length_to_degrees(self.By)

    @property
    def meridian_extension_deg(self):
        return CAPTURE_BASIS_FACTOR * length_to_degrees(self.Bx)


def length_to_degrees(meters):
    return math.degrees(meters / MEAN_EARTH_RADIUS_M)


def cell_size_meters(distance_deg):
    """Great-circle length of the grid spacing, rounded to meters."""
    return round_half_up(math.radians(distance_deg) * MEAN_EARTH_RADIUS_M)


def paths_per_cell(cell_size_m, basis):
    return math.ceil(cell_size_m / basis) + 1


def compute(params: CameraParameters, spec: GridSpec = None) -> DerivedGeometry:
    """Ground geometry of the camera. Cell sizes and path counts need a grid."""
    pixel_size = params.pixel_size_um / 1e6
    focal_length = params.focal_length_mm / 1000

    m = params.flight_height_m / focal_length
    ly = params.width_px * pixel_size  # image size in meters
    Ly = ly * m  # transverse capture
    By = Ly * (100 - params.overlap_between_paths_pct) / 100
    lx = params.height_px * pixel_size
    Lx = lx * m
    Bx = Lx * (100 - params.overlap_between_images_pct) / 100

    GSI = pixel_size * m
    IFOV = pixel_size / focal_length * 1e6

    cells = {}
    if spec is not None:
        for name, distance in (("lat", spec.lat_distance), ("lng", spec.lng_distance)):
            size = cell_size_meters(distance)
            cells[f"{name}_cell_size_m"] = size
            cells[f"{name}_paths_count"] = paths_per_cell(size, By)

    return DerivedGeometry(
        m=m,
        image_scale="1:" + f"{round_half_up(m):,}".replace(",", " "),
        lx=lx, ly=ly, Lx=Lx, Ly=Ly, Bx=Bx, By=By,
        GSI=GSI,
        IFOV=IFOV,
        GIFOV=GSI,
        FOV=params.width_px * IFOV,
        GFOV=params.width_px * GSI,
        speed_mps=params.speed_kmh / 3.6,
        flight_height_m=params.flight_height_m,
        **cells,
    )


def camera_warnings(params: CameraParameters):
    warnings = []
    if params.height_px > params.width_px:
        warnings.append("Camera height is greater than camera width! It means that camera will be rotated by 90°.")
    return warnings


def display_values(geometry: DerivedGeometry):
    """Scalars rounded to 5 decimals for the UI and exports."""
    values = {}
    for name, value in asdict(geometry).items():
        values[name] = to_fixed(value) if isinstance(value, float) else value
    return values
