"""
Core functionality package for plate layouts.
"""
from .data import (
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
from .errors import PlateLayoutError

__all__ = [
    'PlateGeometry', 'PlateLayout', 'PositionFormat', 'PlateLayoutError',
    'convert_position', 'create_plate_map', 'detect_format', 'get_plate_dimensions',
    'import_plate_layout', 'normalize_plate_data',
]
