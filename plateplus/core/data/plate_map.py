"""
Module for generating plate map templates.
"""
import logging

import pandas as pd

from plateplus.core.data.formats import PositionFormat
from plateplus.core.data.geometry import get_plate_dimensions
from plateplus.core.data.positions import format_position, parse_position
from plateplus.core.errors import InvalidStartPositionError, PlateLayoutError

ORDERS = ("row", "column")


def _well_order(geometry, order):
    """All (row, col) pairs; row-major for 'row', column-major for 'column'."""
    if order == "row":
        return [(row, col) for row in range(1, geometry.rows + 1) for col in range(1, geometry.cols + 1)]
    return [(row, col) for col in range(1, geometry.cols + 1) for row in range(1, geometry.rows + 1)]


def _parse_start_position(start_position, geometry):
    if not isinstance(start_position, str):
        raise InvalidStartPositionError(
            "Invalid start_position. Must be in letter_number format and within plate bounds.",
            stage="start_position", examined=[repr(start_position)])
    try:
        return parse_position(start_position, PositionFormat.LETTER_NUMBER, geometry)
    except PlateLayoutError as e:
        raise InvalidStartPositionError(
            f"Invalid start_position '{start_position}'. Must be in letter_number format "
            f"and within plate bounds ({e.message})",
            stage="start_position", examined=[start_position]) from e


def create_plate_map(plate_size, start_position="A1", position_format="letter_number",
                     include_all=True, order="row"):
    """
    Create a plate map template listing the wells in visiting order.

    The wells are enumerated in reading order starting at ``start_position``.
    With include_all the sequence wraps past the last well back to the first
    one so every well is listed; otherwise it stops at the last well.

    Args:
        plate_size (int): Number of wells. One of 6, 12, 24, 48, 96, 384, 1536.
        start_position (str): First well, in letter_number format. Default "A1".
        position_format (str or PositionFormat): Notation of the output positions.
        include_all (bool): Whether wells before the start are appended after wrapping.
        order (str): "row" to walk along rows first, "column" to walk down columns first.

    Returns:
        pandas.DataFrame: Single 'position' column in visiting order.
    """
    geometry = get_plate_dimensions(plate_size)
    position_format = PositionFormat.parse(position_format)
    if order not in ORDERS:
        raise ValueError(f"Invalid order '{order}'. Valid options are: {', '.join(ORDERS)}")
    start = _parse_start_position(start_position, geometry)

    wells = _well_order(geometry, order)
    offset = wells.index(start)
    if offset:
        wells = wells[offset:] + wells[:offset] if include_all else wells[offset:]

    positions = [format_position(row, col, position_format, geometry) for row, col in wells]
    logging.getLogger('plateplus').debug(
        f"Plate map: {len(positions)} of {geometry.wells} wells from {start_position} ({order} order)")
    return pd.DataFrame({"position": positions})
