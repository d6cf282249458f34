import logging

import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from camera_geometry import CameraParameters, camera_warnings, display_values
from camera_specs import CAMERA_SPECS
from config import DEFAULT_CAMERA, DEFAULT_MAP_CENTER, EXPORT_DIR, LOG_LEVEL
from grid import axis_labels, cell_pixel_span, name_labels, should_hide_grid, should_hide_overlays, visible_cells
from map_utils import (
    BASEMAP_OPTIONS,
    add_airport,
    add_cell_overlays,
    add_grid,
    add_paths,
    add_selection_borders,
    create_map,
    search_location,
)
from mission import MissionModel
from mission_export import EXPORT_FORMATS, create_export_zip
from models import Bounds, GridSpec, StandardScale
from utils import create_flight_path_plot

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

MAP_WIDTH, MAP_HEIGHT = 900, 600
LAYER_NAME = "Grid Layer"


def approximate_window(center, zoom):
    """Visible bounds before the map has reported its own."""
    deg_per_px = 360 / (256 * 2 ** zoom)
    half_w, half_h = MAP_WIDTH / 2 * deg_per_px, MAP_HEIGHT / 2 * deg_per_px
    return Bounds(center[0] - half_h, center[1] - half_w, center[0] + half_h, center[1] + half_w)


def grid_settings():
    labels = [scale.label for scale in StandardScale]
    scale = StandardScale.from_label(st.selectbox("Standard scale", labels, index=labels.index("1:100 000")))
    custom = scale is StandardScale.CUSTOM
    default = GridSpec(0.1, 0.1) if custom else GridSpec.for_scale(scale)
    lat_distance = st.number_input("Distance between parallels (°)", min_value=0.0001, value=float(default.lat_distance),
                                   step=0.01, format="%.5f", disabled=not custom, key=f"lat_{scale.name}")
    lng_distance = st.number_input("Distance between meridians (°)", min_value=0.0001, value=float(default.lng_distance),
                                   step=0.01, format="%.5f", disabled=not custom, key=f"lng_{scale.name}")
    return GridSpec(lat_distance, lng_distance, scale)


def camera_settings():
    preset = CAMERA_SPECS[st.selectbox("Camera", list(CAMERA_SPECS.keys()))]
    values = {**DEFAULT_CAMERA, **preset}
    return CameraParameters(
        width_px=st.number_input("Camera width (px)", min_value=1, value=int(values["width_px"])),
        height_px=st.number_input("Camera height (px)", min_value=1, value=int(values["height_px"])),
        pixel_size_um=st.number_input("Pixel size (μm)", min_value=0.001, value=float(values["pixel_size_um"]), step=0.001),
        focal_length_mm=st.number_input("Focal length (mm)", min_value=0.001, value=float(values["focal_length_mm"])),
        flight_height_m=st.number_input("Flight height (m)", min_value=1.0, value=float(values["flight_height_m"])),
        overlap_between_paths_pct=st.slider("Overlay between images from adjacent paths (%)", 60.0, 99.9,
                                            float(values["overlap_between_paths_pct"])),
        overlap_between_images_pct=st.slider("Overlay between images from the same path (%)", 30.0, 99.9,
                                             float(values["overlap_between_images_pct"])),
        speed_kmh=st.number_input("Aircraft speed (km/h)", min_value=0.0, value=float(values["speed_kmh"])),
    )


def heights_table(mission):
    """Editable min/max heights of the selected cells."""
    entries = list(mission.selection)
    if not entries:
        st.caption("Click on grid cells to select them.")
        return
    df = pd.DataFrame([{
        "lat": e.key[0], "lng": e.key[1], "name": e.name,
        "min_height": e.min_height, "max_height": e.max_height,
        "mean_height": e.mean_height, "relief_type": e.relief_type.value if e.relief_type else None,
        "error": e.error.message if e.error else "",
    } for e in entries])
    edited = st.data_editor(df, use_container_width=True, hide_index=True,
                            disabled=["lat", "lng", "name", "mean_height", "relief_type", "error"])
    changed = False
    for row in edited.itertuples():
        entry = mission.selection[(row.lat, row.lng)]
        if (row.min_height, row.max_height) != (entry.min_height, entry.max_height):
            mission.set_cell_heights(entry.key, row.min_height, row.max_height)
            changed = True
    if changed:
        st.rerun()


st.set_page_config(page_title="Synth Grid Flight Planner", layout="wide")
st.title("Aerial Survey Grid Planner")

if "mission" not in st.session_state:
    st.session_state.update({
        "mission": None,
        "map_center": list(DEFAULT_MAP_CENTER),
        "zoom": 9,
        "window": None,
        "last_click": None,
    })

left, right = st.columns([1, 2], gap="large")

with left:
    with st.expander("Grid", expanded=True):
        spec = grid_settings()
    with st.expander("Camera & flight", expanded=True):
        camera = camera_settings()
        for warning in camera_warnings(camera):
            st.warning(warning)

    mission = st.session_state.mission
    if mission is None:
        mission = MissionModel(spec, camera)
        st.session_state.mission = mission
    if spec != mission.grid_spec:
        logger.info(f"Grid changed to {spec}, selection cleared")
        mission.set_grid(spec)
    mission.set_camera(camera)

    with st.expander("Airport", expanded=False):
        airport_lat = st.number_input("Airport latitude", -90.0, 90.0, float(mission.airport.lat), step=0.01, format="%.5f")
        airport_lng = st.number_input("Airport longitude", -180.0, 180.0, float(mission.airport.lng), step=0.01, format="%.5f")
        mission.set_airport(airport_lat, airport_lng)

result = mission.recompute()

with right:
    location_query = st.text_input("Search location", "")
    if location_query:
        found_lat, found_lng = search_location(location_query)
        if found_lat is not None:
            st.session_state.map_center = [found_lat, found_lng]

    basemap_choice = st.selectbox("Basemap", list(BASEMAP_OPTIONS.keys()))
    zoom = st.session_state.zoom
    window = st.session_state.window or approximate_window(st.session_state.map_center, zoom)

    try:
        m = create_map(st.session_state.map_center, zoom, basemap_choice)
        span = cell_pixel_span(spec.lng_distance, zoom)
        if should_hide_grid(span, labelled=spec.is_standard):
            st.info("Grid is hidden at this zoom level. Zoom in to select cells.")
        else:
            cells = list(visible_cells(window, spec, mission.selection.keys()))
            labels = axis_labels(window, spec) + name_labels(cells, spec)
            add_grid(m, cells, labels)
            if not should_hide_overlays(span):
                add_cell_overlays(m, mission.selection)
        add_selection_borders(m, mission.selection.union)
        add_paths(m, mission.paths)
        add_airport(m, mission.airport, LAYER_NAME)

        map_output = st_folium(m, width=MAP_WIDTH, height=MAP_HEIGHT,
                               returned_objects=["last_clicked", "bounds", "zoom", "center"])
    except Exception as e:
        logger.error(f"Error handling map: {str(e)}")
        st.error(f"Error handling map: {str(e)}. Please try refreshing the page.")
        map_output = None

    if map_output:
        rerun = False
        if map_output.get("bounds") and map_output["bounds"].get("_southWest", {}).get("lat") is not None:
            new_window = Bounds.from_folium(map_output["bounds"])
            if new_window != st.session_state.window:
                st.session_state.window = new_window
                rerun = True
        if map_output.get("zoom") and map_output["zoom"] != st.session_state.zoom:
            st.session_state.zoom = map_output["zoom"]
            center = map_output.get("center") or {}
            if center:
                st.session_state.map_center = [center["lat"], center["lng"]]
            rerun = True

        click = map_output.get("last_clicked")
        if click and click != st.session_state.last_click:
            st.session_state.last_click = click
            selected = mission.toggle_cell_at(click["lat"], click["lng"])
            logger.info(f"Cell at ({click['lat']:.5f}, {click['lng']:.5f}) {'selected' if selected else 'deselected'}")
            rerun = True
        if rerun:
            st.rerun()

    st.subheader("Selected cells")
    heights_table(mission)

    if result.error:
        st.error(result.error.message)
    for key, error in mission.cell_errors().items():
        st.warning(f"Cell {key}: {error.message}")

    st.subheader("Parameters")
    values = display_values(mission.geometry)
    st.dataframe(pd.DataFrame(
        [(name, value) for name, value in values.items()] + [("selected_area", mission.selected_area)],
        columns=["parameter", "value"],
    ), use_container_width=True, hide_index=True)

    if mission.paths:
        for orientation, path in mission.paths.items():
            st.info(f"Paths by {orientation.value}: {path.length_m} m, "
                    f"flight time {path.flight_time_h} h, {path.segment_count} passes")
        st.plotly_chart(create_flight_path_plot(mission.selection.union, mission.paths), use_container_width=True)

    st.subheader("Export")
    export_format = st.selectbox("Format", EXPORT_FORMATS, index=EXPORT_FORMATS.index("All"))
    st.download_button("⬇️ GeoJSON", data=mission.to_geojson_string(), file_name="mission.geojson",
                       mime="application/geo+json")
    if st.button("Build export archive"):
        zip_path = create_export_zip(mission, EXPORT_DIR, export_format)
        if not mission.paths:
            st.warning("No paths has been drawn! You'll get only selected grid cells and airport position.")
        with open(zip_path, "rb") as f:
            st.download_button("⬇️ ZIP", data=f.read(), file_name="SynthFlightProject.zip", mime="application/zip")
