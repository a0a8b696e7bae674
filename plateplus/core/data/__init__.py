"""
Data handling package: geometry, notations, conversion and column inference.
"""
from .geometry import PlateGeometry, get_plate_dimensions, VALID_PLATE_SIZES
from .formats import PositionFormat, detect_format, detect_column_format
from .positions import convert_position, convert_positions, parse_position, format_position, split_position
from .inference import ColumnCandidates, DEFAULT_CANDIDATES, normalize_plate_data, resolve_columns
from .plate_map import create_plate_map
from .models import PlateLayout
from .parser import import_plate_layout, read_table

__all__ = [
    'PlateGeometry', 'get_plate_dimensions', 'VALID_PLATE_SIZES',
    'PositionFormat', 'detect_format', 'detect_column_format',
    'convert_position', 'convert_positions', 'parse_position', 'format_position', 'split_position',
    'ColumnCandidates', 'DEFAULT_CANDIDATES', 'normalize_plate_data', 'resolve_columns',
    'create_plate_map', 'PlateLayout', 'import_plate_layout', 'read_table',
]
