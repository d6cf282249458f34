import logging
import math

import numpy as np
import shapely
from shapely.geometry import LineString, Polygon

from camera_geometry import DerivedGeometry
from config import EARTH_RADIUS_M, MAX_PATHS_COUNT, MIN_PATHS_COUNT
from models import FlightPath, GridSpec, LatLng, Orientation, PlanError, PlanErrorKind, PlanResult
from nomenclature import round_half_up, to_fixed

logger = logging.getLogger(__name__)


def validate_path_counts(lng_paths_count, lat_paths_count):
    """Returns PlanError when paths count per cell is unusable, None otherwise."""
    if lng_paths_count is None or lat_paths_count is None:
        return PlanError(PlanErrorKind.PATH_COUNT_OUT_OF_RANGE,
                         "Distance between paths hasn't been calculated!")
    if lng_paths_count >= MAX_PATHS_COUNT or lat_paths_count >= MAX_PATHS_COUNT:
        return PlanError(PlanErrorKind.PATH_COUNT_OUT_OF_RANGE,
                         f"Calculated paths count is too big, it should be less than {MAX_PATHS_COUNT}. "
                         "Please, check your values.")
    if lng_paths_count <= MIN_PATHS_COUNT or lat_paths_count <= MIN_PATHS_COUNT:
        return PlanError(PlanErrorKind.PATH_COUNT_OUT_OF_RANGE,
                         f"Calculated paths count is too small, it should be greater than {MIN_PATHS_COUNT}. "
                         "Please, check your values.")
    return None


def clip_line_by_polygon(line, polygon):
    """
    Clips a two-point [lng, lat] line by the polygon.
    Returns the outermost intersection points in the line's direction or None.
    """
    if not isinstance(polygon, shapely.Geometry):
        polygon = Polygon(polygon)
    clipped = LineString(line).intersection(polygon)
    if clipped.is_empty:
        return None

    coords = shapely.get_coordinates(clipped)
    start = np.asarray(line[0], dtype=float)
    direction = np.asarray(line[1], dtype=float) - start
    t = (coords - start) @ direction
    first, last = coords[np.argmin(t)], coords[np.argmax(t)]
    return [[float(first[0]), float(first[1])], [float(last[0]), float(last[1])]]


def sweep_polygon(polygon, orientation, paths_count, grid_distance, extension_deg):
    """
    Sweeps the polygon's bounding box and returns (vertices, segments count).
    Segments are joined back and forth, so vertices form one continuous track.
    """
    min_lng, min_lat, max_lng, max_lat = polygon.bounds
    is_parallels = orientation is Orientation.PARALLEL

    extent = (max_lat - min_lat) if is_parallels else (max_lng - min_lng)
    count = paths_count * math.ceil(to_fixed(extent / grid_distance))
    spacing = extent / count

    vertices = []
    segments = 0
    swap_points = False
    for i in range(count + 1):
        if is_parallels:
            # From north to south
            lat = max_lat - i * spacing if i < count else min_lat
            line = [[min_lng, lat], [max_lng, lat]]
        else:
            # From west to east
            lng = min_lng + i * spacing if i < count else max_lng
            line = [[lng, max_lat], [lng, min_lat]]

        clipped = clip_line_by_polygon(line, polygon)
        if clipped is None:
            continue

        (x0, y0), (x1, y1) = clipped
        if is_parallels:
            x0, x1 = x0 - extension_deg, x1 + extension_deg
        else:
            y0, y1 = y0 + extension_deg, y1 - extension_deg

        if swap_points:
            vertices += [(x1, y1), (x0, y0)]
        else:
            vertices += [(x0, y0), (x1, y1)]
        swap_points = not swap_points
        segments += 1

    return vertices, segments


def line_length_using_flight_height(vertices, flight_height):
    """Haversine length of the polyline on a sphere inflated by flight height"""
    r = EARTH_RADIUS_M + flight_height
    distance = 0.0
    for p1, p2 in zip(vertices, vertices[1:]):
        f1, f2 = math.radians(p1.lat), math.radians(p2.lat)
        df = f2 - f1
        dl = math.radians(p2.lng - p1.lng)
        a = math.sin(df / 2) ** 2 + math.cos(f1) * math.cos(f2) * math.sin(dl / 2) ** 2
        distance += r * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return distance


def flight_time_hours(length_m, speed_mps):
    if speed_mps <= 0:
        return None
    return round(length_m / speed_mps / 3600, 2)


def polygons_of(union):
    if hasattr(union, "geoms"):
        return list(union.geoms)
    return [union]


def _build_path(orientation, polygons, geometry: DerivedGeometry, spec: GridSpec, airport: LatLng):
    if orientation is Orientation.PARALLEL:
        paths_count = geometry.lng_paths_count
        grid_distance = spec.lat_distance
        extension = geometry.parallel_extension_deg
    else:
        paths_count = geometry.lat_paths_count
        grid_distance = spec.lng_distance
        extension = geometry.meridian_extension_deg

    # Airport is both the start and the end of the route
    vertices = [airport]
    segments = 0
    for polygon in polygons:
        points, count = sweep_polygon(polygon, orientation, paths_count, grid_distance, extension)
        vertices += [LatLng(lat, lng) for lng, lat in points]
        segments += count
    vertices.append(airport)

    length = round_half_up(line_length_using_flight_height(vertices, geometry.flight_height_m))
    return FlightPath(
        orientation=orientation,
        vertices=vertices,
        length_m=length,
        flight_time_h=flight_time_hours(length, geometry.speed_mps),
        paths_count=paths_count,
        segment_count=segments,
    )


def plan(union, geometry: DerivedGeometry, spec: GridSpec, airport: LatLng) -> PlanResult:
    """Flight paths by parallels and by meridians covering the union polygon."""
    error = validate_path_counts(geometry.lng_paths_count, geometry.lat_paths_count)
    if error is not None:
        logger.warning(error.message)
        return PlanResult(error=error)

    if union is None or union.is_empty:
        return PlanResult()

    polygons = polygons_of(union)
    result = PlanResult(
        parallel=_build_path(Orientation.PARALLEL, polygons, geometry, spec, airport),
        meridian=_build_path(Orientation.MERIDIAN, polygons, geometry, spec, airport),
    )
    logger.info(f"Planned paths over {len(polygons)} polygon(s): "
                f"parallels {result.parallel.length_m} m, meridians {result.meridian.length_m} m")
    return result
