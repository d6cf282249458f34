"""
Camera presets for aerial survey sensors
"""

CAMERA_SPECS = {
    "Generic 4096 × 4096": {
        "width_px": 4096,
        "height_px": 4096,
        "pixel_size_um": 1.0,
        "focal_length_mm": 100.0,
    },
    "Phase One iXM-100 (50 mm)": {
        "width_px": 11664,  # px
        "height_px": 8750,  # px
        "pixel_size_um": 3.76,  # micrometers
        "focal_length_mm": 50.0,  # millimeters
    },
    "DJI Zenmuse P1 (35 mm)": {
        "width_px": 8192,
        "height_px": 5460,
        "pixel_size_um": 4.4,
        "focal_length_mm": 35.0,
    },
    "Sony A7R IV (35 mm)": {
        "width_px": 9504,
        "height_px": 6336,
        "pixel_size_um": 3.76,
        "focal_length_mm": 35.0,
    },
    "DJI Mavic 3E (wide)": {
        "width_px": 5280,
        "height_px": 3956,
        "pixel_size_um": 3.3,
        "focal_length_mm": 12.29,
    },
}
