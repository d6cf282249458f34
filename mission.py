import json
import logging
from dataclasses import asdict

from shapely.geometry import LineString, Point, mapping, shape

from camera_geometry import CameraParameters, compute, display_values
from config import DEFAULT_MAP_CENTER
from flight_calculator import plan
from grid import cell_for_key, cell_key_at
from models import GridSpec, LatLng, Orientation, PlanError, PlanErrorKind, PlanResult
from nomenclature import to_fixed
from selection import SelectionSet

logger = logging.getLogger(__name__)

SELECTED_CELL_NAME = "Selected cell"
AIRPORT_NAME = "Airport"
PATH_NAMES = {
    Orientation.PARALLEL: "Flight paths by parallels",
    Orientation.MERIDIAN: "Flight paths by meridians",
}
NO_PATHS_MESSAGE = "No paths has been drawn! You'll get only selected grid cells and airport position."


def _rounded(value):
    return to_fixed(value) if isinstance(value, float) else value


class MissionModel:
    """
    One survey mission: the grid, the camera, selected cells, the airport
    and the two flight paths computed from them.

    Mutators only change state; call ``recompute`` afterwards to rebuild paths.
    """

    def __init__(self, grid_spec: GridSpec, camera: CameraParameters, airport: LatLng = None):
        self.grid_spec = grid_spec
        self.camera = camera
        self.airport = airport or LatLng(*DEFAULT_MAP_CENTER)
        self.selection = SelectionSet()
        self.paths = {}  # Orientation -> FlightPath
        self.last_error = None
        self.geometry = compute(camera, grid_spec)

    # ─────────────── Mutators ───────────────
    def set_grid(self, grid_spec: GridSpec):
        """Changing the grid invalidates every cell name and path."""
        self.grid_spec = grid_spec
        self.selection.clear()
        self.paths = {}
        self.last_error = None
        self.geometry = compute(self.camera, grid_spec)

    def set_camera(self, camera: CameraParameters):
        self.camera = camera
        self.geometry = compute(camera, self.grid_spec)

    def set_airport(self, lat, lng):
        self.airport = LatLng(lat, lng)

    def toggle_cell_at(self, lat, lng) -> bool:
        key = cell_key_at(lat, lng, self.grid_spec)
        return self.selection.toggle(cell_for_key(key, self.grid_spec))

    def toggle_cell(self, key) -> bool:
        return self.selection.toggle(cell_for_key(key, self.grid_spec))

    def set_cell_heights(self, key, min_height, max_height):
        self.selection.set_heights(key, min_height, max_height)

    # ─────────────── Derived state ───────────────
    @property
    def selected_area(self):
        return self.selection.selected_area(self.geometry.lat_cell_size_m, self.geometry.lng_cell_size_m)

    def cell_errors(self):
        return {entry.key: entry.error for entry in self.selection if not entry.valid}

    def recompute(self) -> PlanResult:
        self.geometry = compute(self.camera, self.grid_spec)
        self.selection.recalculate(self.camera.flight_height_m)
        result = plan(self.selection.union, self.geometry, self.grid_spec, self.airport)

        if not result.ok:
            # Keep the last valid paths on screen until values are corrected
            self.last_error = result.error
            return result

        self.last_error = None
        self.paths = {}
        for path in (result.parallel, result.meridian):
            if path is not None:
                self.paths[path.orientation] = path
        logger.info(f"Recomputed mission: {len(self.selection)} cell(s), {len(self.paths)} path(s)")
        return result

    # ─────────────── Export ───────────────
    def _cell_features(self):
        features = []
        for entry in self.selection:
            properties = {
                "name": SELECTED_CELL_NAME,
                "polygon_name": entry.name,
                "min_height": entry.min_height,
                "max_height": entry.max_height,
                "mean_height": entry.mean_height,
                "absolute_height": entry.absolute_height,
                "elevation_difference": entry.elevation_difference,
                "relief_type": entry.relief_type.value if entry.relief_type else None,
                "valid": entry.valid,
                "error": entry.error.message if entry.error else None,
            }
            features.append({
                "type": "Feature",
                "geometry": mapping(entry.polygon),
                "properties": {k: _rounded(v) for k, v in properties.items()},
            })
        return features

    def _path_feature(self, path):
        properties = {"name": PATH_NAMES[path.orientation], "orientation": path.orientation.value}
        properties.update(asdict(self.camera))
        properties.update(display_values(self.geometry))
        properties.update({
            "selected_area": self.selected_area,
            "path_length_m": path.length_m,
            "flight_time_h": path.flight_time_h,
            "paths_count": path.paths_count,
            "segment_count": path.segment_count,
        })
        line = LineString([(v.lng, v.lat) for v in path.vertices])
        return {
            "type": "Feature",
            "geometry": mapping(line),
            "properties": {k: _rounded(v) for k, v in properties.items()},
        }

    def to_geojson(self):
        """Returns (feature collection, warnings)."""
        warnings = []
        features = self._cell_features()
        features.append({
            "type": "Feature",
            "geometry": mapping(Point(self.airport.lng, self.airport.lat)),
            "properties": {"name": AIRPORT_NAME},
        })

        if not self.paths:
            logger.warning(NO_PATHS_MESSAGE)
            warnings.append(PlanError(PlanErrorKind.NO_PATHS_COMPUTED_YET, NO_PATHS_MESSAGE))
        else:
            for orientation in (Orientation.MERIDIAN, Orientation.PARALLEL):
                if orientation in self.paths:
                    features.append(self._path_feature(self.paths[orientation]))

        return {"type": "FeatureCollection", "features": features}, warnings

    def to_geojson_string(self):
        collection, _ = self.to_geojson()
        return json.dumps(collection)


def parse_geojson(collection):
    """Reads an exported mission back: cells, airport and path properties."""
    if isinstance(collection, (str, bytes)):
        collection = json.loads(collection)

    parsed = {"cells": [], "airport": None, "paths": {}}
    for feature in collection["features"]:
        properties = feature.get("properties") or {}
        geometry = shape(feature["geometry"])
        name = properties.get("name")
        if name == SELECTED_CELL_NAME:
            parsed["cells"].append({**properties, "geometry": geometry})
        elif name == AIRPORT_NAME:
            parsed["airport"] = LatLng(geometry.y, geometry.x)
        elif "orientation" in properties:
            parsed["paths"][Orientation(properties["orientation"])] = {**properties, "geometry": geometry}
    return parsed
