"""
plateplus: position-format conversion and layout inference for microplate data.
"""
from .core import (
    PlateGeometry,
    PlateLayout,
    PositionFormat,
    convert_position,
    create_plate_map,
    detect_format,
    get_plate_dimensions,
    import_plate_layout,
    normalize_plate_data,
)
from .modules.exporter import export_plate_layout

__version__ = "0.1.0"

__all__ = [
    'PlateGeometry', 'PlateLayout', 'PositionFormat',
    'convert_position', 'create_plate_map', 'detect_format', 'get_plate_dimensions',
    'import_plate_layout', 'normalize_plate_data', 'export_plate_layout',
]
