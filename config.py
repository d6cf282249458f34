# config.py
import os

from dotenv import load_dotenv

load_dotenv()

# ─────────────── Environment ───────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_MAP_CENTER = [float(v) for v in os.getenv("DEFAULT_MAP_CENTER", "55.75,37.62").split(",")]
EXPORT_DIR = os.getenv("EXPORT_DIR", "exports")

# ─────────────── Earth ───────────────
EARTH_RADIUS_M = 6371000.0  # haversine path length, inflated by flight height
MEAN_EARTH_RADIUS_M = 6371008.8  # angle <-> length conversions

# ─────────────── Grid rendering gates (pixels per cell) ───────────────
HIDE_GRID_LABELLED_PX = 70
HIDE_GRID_PLAIN_PX = 15
HIDE_OVERLAYS_PX = 200
TILE_SIZE_PX = 256

# ─────────────── Path planning ───────────────
MIN_PATHS_COUNT = 2  # counts <= this are rejected
MAX_PATHS_COUNT = 20  # counts >= this are rejected
CAPTURE_BASIS_FACTOR = 2  # paths are extended by double capture basis on each side
VARIABLE_RELIEF_THRESHOLD = 0.2

# ─────────────── Defaults for the camera form ───────────────
DEFAULT_CAMERA = {
    "width_px": 4096,
    "height_px": 4096,
    "pixel_size_um": 1.0,
    "focal_length_mm": 100.0,
    "flight_height_m": 1000.0,
    "overlap_between_paths_pct": 60.0,
    "overlap_between_images_pct": 50.0,
    "speed_kmh": 350.0,
}
DEFAULT_MIN_HEIGHT_M = 1.0
DEFAULT_MAX_HEIGHT_M = 1.0
