import pytest

from camera_geometry import CameraParameters
from config import DEFAULT_CAMERA
from models import GridSpec, LatLng


@pytest.fixture
def survey_camera():
    # m = 10 000, Ly = Lx = 1000 m, By = 400 m, Bx = 500 m, 100 m/s
    return CameraParameters(
        width_px=10000,
        height_px=10000,
        pixel_size_um=10.0,
        focal_length_mm=100.0,
        flight_height_m=1000.0,
        overlap_between_paths_pct=60.0,
        overlap_between_images_pct=50.0,
        speed_kmh=360.0,
    )


@pytest.fixture
def default_camera():
    return CameraParameters.from_dict(DEFAULT_CAMERA)


@pytest.fixture
def grid():
    return GridSpec(0.05, 0.05)


@pytest.fixture
def airport():
    return LatLng(55.0, 37.0)
