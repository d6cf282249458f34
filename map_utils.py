import folium
from folium.features import DivIcon
import streamlit as st
from geopy.geocoders import Nominatim
from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from shapely.geometry import mapping

from models import Orientation

GRID_BORDER_COLOR = "#6495ed"
GRID_FILL_COLOR = "#6495ed"
MERIDIANS_COLOR = "#ad0000"
PARALLELS_COLOR = "#007800"
PATH_COLORS = {Orientation.PARALLEL: PARALLELS_COLOR, Orientation.MERIDIAN: MERIDIANS_COLOR}

BASEMAP_OPTIONS = {
    "OpenStreetMap": "OpenStreetMap",
    "Esri World Imagery": "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
    "Google Satellite": "https://mt1.google.com/vt/lyrs=s&x={x}&y={y}&z={z}",
}


def search_location(query):
    """Search for a location using Nominatim geocoding service"""
    try:
        geolocator = Nominatim(user_agent="synth_grid_planner", timeout=5)
        location = geolocator.geocode(query)
        if location:
            return location.latitude, location.longitude
        return None, None
    except (GeocoderTimedOut, GeocoderServiceError) as e:
        st.warning(f"Location search error: {str(e)}. Using current map location.")
        return None, None


def create_map(center, zoom, basemap_choice="OpenStreetMap"):
    """Create a Folium map with the selected basemap."""
    m = folium.Map(location=center, zoom_start=zoom, tiles=None, control_scale=True)
    folium.TileLayer(
        BASEMAP_OPTIONS[basemap_choice],
        attr="Basemap provided by respective service",
        name=basemap_choice,
    ).add_to(m)
    return m


def _label(location, text, origin="center"):
    anchors = {"center": "translate(-50%,-50%)", "leftCenter": "translate(0,-50%)", "topCenter": "translate(-50%,0)"}
    html = (f"<div style='transform:{anchors.get(origin, anchors['center'])};white-space:nowrap;"
            f"font-size:11px;font-weight:600;color:#1f3b73'>{text}</div>")
    return folium.Marker(location=location, icon=DivIcon(html=html, icon_size=(0, 0)))


def add_grid(m, cells, labels, line_thickness=2):
    """Draw visible cells (selected ones filled) and their labels."""
    grid_group = folium.FeatureGroup(name="Grid")
    for cell in cells:
        folium.Rectangle(
            bounds=[[cell.sw.lat, cell.sw.lng], [cell.ne.lat, cell.ne.lng]],
            color=GRID_BORDER_COLOR,
            fill=cell.is_selected,
            fill_color=GRID_FILL_COLOR,
            weight=line_thickness,
            tooltip=cell.name,
        ).add_to(grid_group)
    grid_group.add_to(m)

    labels_group = folium.FeatureGroup(name="Labels")
    for label in labels:
        _label([label.position.lat, label.position.lng], label.text, label.origin).add_to(labels_group)
    labels_group.add_to(m)


def add_cell_overlays(m, selection):
    """Height summary at the north-west corner of every selected cell."""
    overlays = folium.FeatureGroup(name="Cell parameters")
    for entry in selection:
        min_lng, _, _, max_lat = entry.polygon.bounds
        if entry.valid and entry.relief_type is not None:
            text = f"{entry.name}<br>mean {entry.mean_height} m · {entry.relief_type.value}"
        else:
            text = f"{entry.name}<br><span style='color:#c00'>{entry.error.message if entry.error else ''}</span>"
        html = f"<div style='background:#fffc;padding:2px 4px;font-size:10px;white-space:nowrap'>{text}</div>"
        folium.Marker(location=[max_lat, min_lng], icon=DivIcon(html=html, icon_size=(0, 0))).add_to(overlays)
    overlays.add_to(m)


def add_selection_borders(m, union, line_thickness=2):
    if union is None:
        return
    folium.GeoJson(
        mapping(union),
        name="Selected area",
        style_function=lambda _: {"color": GRID_BORDER_COLOR, "weight": line_thickness * 2, "fill": False},
    ).add_to(m)


def add_paths(m, paths, line_thickness=2):
    for orientation, path in paths.items():
        folium.PolyLine(
            [[v.lat, v.lng] for v in path.vertices],
            color=PATH_COLORS[orientation],
            weight=line_thickness,
            opacity=0.8,
            popup=f"Flight paths by {orientation.value}: {path.length_m} m",
        ).add_to(m)


def add_airport(m, airport, layer_name):
    folium.Marker(
        location=[airport.lat, airport.lng],
        popup=f"Airport for layer {layer_name}",
        icon=folium.Icon(icon="plane", prefix="fa"),
    ).add_to(m)
