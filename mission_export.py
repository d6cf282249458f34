# mission_export.py
import json
import logging
import os
import zipfile
from datetime import datetime

import pandas as pd
from simplekml import AltitudeMode, Kml

from config import EXPORT_DIR

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ["GeoJSON", "CSV", "KMZ", "All"]


def paths_dataframe(path):
    return pd.DataFrame([(v.lng, v.lat) for v in path.vertices], columns=["longitude", "latitude"])


def build_kml(mission):
    kml = Kml()
    for entry in mission.selection:
        coords = [(x, y) for x, y in entry.polygon.exterior.coords]
        kml.newpolygon(name=entry.name, outerboundaryis=coords)

    kml.newpoint(name="Airport", coords=[(mission.airport.lng, mission.airport.lat)])

    height = mission.camera.flight_height_m
    for orientation, path in mission.paths.items():
        line = kml.newlinestring(
            name=f"Flight paths by {orientation.value}",
            coords=[(v.lng, v.lat, height) for v in path.vertices],
        )
        line.altitudemode = AltitudeMode.relativetoground
    return kml


def create_export_zip(mission, out_dir=EXPORT_DIR, export_format="All", name="mission"):
    """Writes mission files into a timestamped folder, zips it and returns the zip path."""
    if export_format not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {export_format}")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    export_dir = os.path.join(out_dir, f"{name}_{timestamp}")
    os.makedirs(export_dir, exist_ok=True)

    if export_format in ["GeoJSON", "All"]:
        collection, warnings = mission.to_geojson()
        with open(os.path.join(export_dir, f"{name}.geojson"), "w") as f:
            json.dump(collection, f)
        for warning in warnings:
            logger.warning(f"Partial export: {warning.message}")

    if export_format in ["CSV", "All"]:
        for orientation, path in mission.paths.items():
            csv_path = os.path.join(export_dir, f"flight_paths_{orientation.value}.csv")
            paths_dataframe(path).to_csv(csv_path, index=False)

    if export_format in ["KMZ", "All"]:
        build_kml(mission).savekmz(os.path.join(export_dir, "flight_paths.kmz"))

    zip_path = f"{export_dir}.zip"
    with zipfile.ZipFile(zip_path, "w") as zipf:
        for root, _, files in os.walk(export_dir):
            for file in files:
                full_path = os.path.join(root, file)
                zipf.write(full_path, arcname=os.path.relpath(full_path, export_dir))

    logger.info(f"Exported mission to {zip_path}")
    return zip_path
