"""
Module with the fixed table of supported plate geometries.
"""
import string
from dataclasses import dataclass

from plateplus.core.errors import InvalidPlateSizeError, PositionOutOfBoundsError, UnknownRowLabelError

# A..Z followed by AA..AF; 1536-well plates have 32 rows
ROW_LABELS = tuple(string.ascii_uppercase) + ("AA", "AB", "AC", "AD", "AE", "AF")

PLATE_DIMENSIONS = {
    6: (2, 3),
    12: (3, 4),
    24: (4, 6),
    48: (6, 8),
    96: (8, 12),
    384: (16, 24),
    1536: (32, 48),
}

VALID_PLATE_SIZES = tuple(sorted(PLATE_DIMENSIONS))


@dataclass(frozen=True)
class PlateGeometry:
    """Shape of a plate: number of wells, rows and columns."""
    wells: int
    rows: int
    cols: int

    @property
    def row_labels(self):
        """Row letters for this plate, top to bottom."""
        return ROW_LABELS[:self.rows]

    def row_label(self, row_num):
        """Return the letter(s) of a 1-based row number."""
        return ROW_LABELS[self.check_row(row_num) - 1]

    def row_number(self, label):
        """Return the 1-based row number of a row letter (case-insensitive)."""
        key = str(label).strip().upper()
        try:
            return self.row_labels.index(key) + 1
        except ValueError:
            raise UnknownRowLabelError(
                f"Row label '{label}' is not valid for a {self.wells}-well plate "
                f"(rows {self.row_labels[0]}-{self.row_labels[-1]})",
                stage="row_label", examined=[label]) from None

    def check_column(self, col_num):
        if not 1 <= col_num <= self.cols:
            raise PositionOutOfBoundsError(
                f"Column {col_num} is outside a {self.wells}-well plate (1-{self.cols})",
                stage="column", examined=[col_num])
        return col_num

    def check_row(self, row_num):
        if not 1 <= row_num <= self.rows:
            raise PositionOutOfBoundsError(
                f"Row {row_num} is outside a {self.wells}-well plate (1-{self.rows})",
                stage="row", examined=[row_num])
        return row_num

    def check_index(self, index):
        if not 1 <= index <= self.wells:
            raise PositionOutOfBoundsError(
                f"Well index {index} is outside a {self.wells}-well plate (1-{self.wells})",
                stage="index", examined=[index])
        return index


_GEOMETRIES = {wells: PlateGeometry(wells, rows, cols) for wells, (rows, cols) in PLATE_DIMENSIONS.items()}


def _coerce_plate_size(plate_size):
    """Turn 96, 96.0 or '96' into 96; anything else into None."""
    if isinstance(plate_size, bool):
        return None
    if isinstance(plate_size, str):
        text = plate_size.strip()
        return int(text) if text.isdigit() else None
    try:
        as_float = float(plate_size)
    except (TypeError, ValueError):
        return None
    if as_float != as_float or not as_float.is_integer():
        return None
    return int(as_float)


def get_plate_dimensions(plate_size):
    """
    Get the geometry of a plate size.

    Args:
        plate_size (int): Number of wells. One of 6, 12, 24, 48, 96, 384, 1536.

    Returns:
        PlateGeometry: wells, rows and cols of the plate.

    Raises:
        InvalidPlateSizeError: If the plate size is not supported.
    """
    if isinstance(plate_size, PlateGeometry):
        return plate_size
    wells = _coerce_plate_size(plate_size)
    if wells not in _GEOMETRIES:
        raise InvalidPlateSizeError(
            f"Selected plate_size not available! Valid options are: "
            f"{', '.join(str(size) for size in VALID_PLATE_SIZES)}",
            stage="plate_size", examined=[plate_size])
    return _GEOMETRIES[wells]
