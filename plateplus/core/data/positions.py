"""
Conversion of well positions between the three notations.

All functions take the plate geometry explicitly (a PlateGeometry or a plate
size) and raise on values that do not fit the plate.
"""
import logging
import re

from plateplus.core.data.formats import (
    LETTER_NUMBER_PATTERN,
    NUMBER,
    NUMBER_PATTERN,
    ROW_COLUMN_PATTERN,
    STRING,
    PositionFormat,
    cell_kind,
)
from plateplus.core.data.geometry import get_plate_dimensions
from plateplus.core.errors import InvalidPositionFormatError, PlateLayoutError

ROW_LETTER_PATTERN = re.compile(r'^[A-Za-z]+$')

# Largest plate; used to resolve row labels when no plate size is known yet
_FULL_GEOMETRY = get_plate_dimensions(1536)


def as_whole_number(value, what="position"):
    """Read an int from 3, 3.0, '3' or '03'."""
    kind = cell_kind(value)
    if kind == NUMBER:
        as_float = float(value)
        if as_float.is_integer():
            return int(as_float)
    elif kind == STRING:
        text = str(value).strip()
        if NUMBER_PATTERN.match(text):
            return int(text)
    raise InvalidPositionFormatError(
        f"Expected a whole number for {what}, got {value!r}",
        stage="parse", examined=[repr(value)])


def parse_position(value, position_format, geometry):
    """
    Parse a position into 1-based (row, col).

    Args:
        value: Position in the given notation, e.g. 'B3', 15 or '2_3'.
        position_format (PositionFormat or str): Notation of ``value``.
        geometry (PlateGeometry or int): Plate geometry or plate size.

    Returns:
        tuple: (row_num, col_num)
    """
    position_format = PositionFormat.parse(position_format)
    geometry = get_plate_dimensions(geometry)

    if position_format == PositionFormat.NUMBER:
        index = geometry.check_index(as_whole_number(value))
        return (index - 1) // geometry.cols + 1, (index - 1) % geometry.cols + 1

    text = str(value).strip() if cell_kind(value) == STRING else ''
    if position_format == PositionFormat.LETTER_NUMBER:
        match = LETTER_NUMBER_PATTERN.match(text)
        if not match:
            raise InvalidPositionFormatError(
                f"{value!r} is not a letter_number position (e.g. 'A1')",
                stage="parse", examined=[repr(value)])
        row_num = geometry.row_number(match.group(1))
        col_num = geometry.check_column(int(match.group(2)))
        return row_num, col_num

    match = ROW_COLUMN_PATTERN.match(text)
    if not match:
        raise InvalidPositionFormatError(
            f"{value!r} is not a row_column position (e.g. '1_1')",
            stage="parse", examined=[repr(value)])
    return geometry.check_row(int(match.group(1))), geometry.check_column(int(match.group(2)))


def format_position(row_num, col_num, position_format, geometry):
    """Write 1-based (row, col) in the given notation."""
    position_format = PositionFormat.parse(position_format)
    geometry = get_plate_dimensions(geometry)
    geometry.check_row(row_num)
    geometry.check_column(col_num)
    if position_format == PositionFormat.LETTER_NUMBER:
        return f"{geometry.row_label(row_num)}{col_num}"
    if position_format == PositionFormat.NUMBER:
        return (row_num - 1) * geometry.cols + col_num
    return f"{row_num}_{col_num}"


def convert_position(value, from_format, to_format, geometry):
    """
    Convert one position between notations.

    Converting to the same notation returns ``value`` untouched.

    Args:
        value: Position in ``from_format``.
        from_format (PositionFormat or str): Source notation.
        to_format (PositionFormat or str): Target notation.
        geometry (PlateGeometry or int): Plate geometry or plate size.

    Returns:
        str or int: The position in ``to_format``.
    """
    from_format = PositionFormat.parse(from_format)
    to_format = PositionFormat.parse(to_format)
    if from_format == to_format:
        return value
    row_num, col_num = parse_position(value, from_format, geometry)
    return format_position(row_num, col_num, to_format, geometry)


def convert_positions(values, from_format, to_format, geometry):
    """
    Convert a sequence of positions; missing entries become None.

    The first failing entry aborts the whole conversion.
    """
    from_format = PositionFormat.parse(from_format)
    to_format = PositionFormat.parse(to_format)
    geometry = get_plate_dimensions(geometry)
    converted = []
    for index, value in enumerate(values):
        if cell_kind(value) not in (NUMBER, STRING):
            converted.append(None)
            continue
        try:
            converted.append(convert_position(value, from_format, to_format, geometry))
        except PlateLayoutError as e:
            raise e.at_stage("position_conversion", [f"row {index}: {value!r}"])
    logging.getLogger('plateplus').debug(
        f"Converted {len(converted)} positions from {from_format.value} to {to_format.value} "
        f"on a {geometry.wells}-well plate")
    return converted


def split_position(value, position_format, geometry):
    """Split a position into (row_label, col_num)."""
    geometry = get_plate_dimensions(geometry)
    row_num, col_num = parse_position(value, position_format, geometry)
    return geometry.row_label(row_num), col_num


def position_from_row_column(row_value, col_value, row_is_numeric, geometry=None):
    """
    Build a letter_number position from separate row and column fields.

    Letter rows are concatenated with the column; numeric rows are looked up
    in the row label sequence. Missing fields give None.

    Args:
        row_value: Row field, a letter ('B') or a 1-based number (2).
        col_value: Column field, a 1-based number.
        row_is_numeric (bool): Whether the row field holds numbers.
        geometry (PlateGeometry or int, optional): Plate used to validate rows and columns.
    """
    if cell_kind(row_value) not in (NUMBER, STRING) or cell_kind(col_value) not in (NUMBER, STRING):
        return None
    col_num = as_whole_number(col_value, what="column field")
    lookup = get_plate_dimensions(geometry) if geometry is not None else _FULL_GEOMETRY
    if geometry is not None:
        lookup.check_column(col_num)

    if row_is_numeric:
        label = lookup.row_label(as_whole_number(row_value, what="numeric row field"))
    else:
        text = str(row_value).strip()
        if cell_kind(row_value) != STRING or not ROW_LETTER_PATTERN.match(text):
            raise InvalidPositionFormatError(
                f"Row field {row_value!r} is not a row letter",
                stage="parse", examined=[repr(row_value)])
        label = lookup.row_labels[lookup.row_number(text) - 1]
    return f"{label}{col_num}"
