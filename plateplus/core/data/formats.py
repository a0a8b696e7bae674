"""
Position notations and the detector that tells them apart.
"""
import re
from enum import Enum

import numpy as np
import pandas as pd

from plateplus.core.errors import InvalidPositionFormatError, UnrecognizedPositionFormatError

LETTER_NUMBER_PATTERN = re.compile(r'^([A-Za-z]+)(\d+)$')
ROW_COLUMN_PATTERN = re.compile(r'^(\d+)_(\d+)$')
NUMBER_PATTERN = re.compile(r'^\d+$')

MISSING = 'missing'
NUMBER = 'number'
STRING = 'string'


class PositionFormat(str, Enum):
    """The three ways a well address can be written."""
    LETTER_NUMBER = 'letter_number'  # A1, B12, AF48
    NUMBER = 'number'                # 1..wells, row-major
    ROW_COLUMN = 'row_column'        # 1_1, 8_12

    @classmethod
    def parse(cls, value):
        """Accept an enum member or any of its spellings."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower() if value is not None else ''
        if key not in FORMAT_ALIASES:
            raise InvalidPositionFormatError(
                f"Invalid position_format '{value}'. Valid options are: {', '.join(FORMAT_ALIASES)}",
                stage="position_format", examined=[value])
        return FORMAT_ALIASES[key]


FORMAT_ALIASES = {
    'letter_number': PositionFormat.LETTER_NUMBER,
    'number': PositionFormat.NUMBER,
    'numeric': PositionFormat.NUMBER,
    'sequential': PositionFormat.NUMBER,
    'row_column': PositionFormat.ROW_COLUMN,
    'numeric_numeric': PositionFormat.ROW_COLUMN,
}


def cell_kind(value):
    """Classify a table cell as 'missing', 'number' or 'string'."""
    if value is None:
        return MISSING
    if isinstance(value, (bool, np.bool_)):
        return STRING
    if isinstance(value, (int, float, np.integer, np.floating)):
        return MISSING if pd.isna(value) else NUMBER
    if isinstance(value, str):
        return MISSING if not value.strip() else STRING
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return MISSING
    return STRING


def is_missing(value):
    return cell_kind(value) == MISSING


def detect_format(sample):
    """
    Classify a single position value.

    Rules are tried in order: letters followed by digits, then digits
    underscore digits, then a number or a digit-only string.

    Args:
        sample: A position value (str, int or float).

    Returns:
        PositionFormat or None: None when the sample is missing or unrecognized.
    """
    kind = cell_kind(sample)
    if kind == MISSING:
        return None
    if kind == NUMBER:
        return PositionFormat.NUMBER
    text = str(sample).strip()
    if LETTER_NUMBER_PATTERN.match(text):
        return PositionFormat.LETTER_NUMBER
    if ROW_COLUMN_PATTERN.match(text):
        return PositionFormat.ROW_COLUMN
    if NUMBER_PATTERN.match(text):
        return PositionFormat.NUMBER
    return None


def first_present(values):
    """Return (index, value) of the first non-missing entry, or (None, None)."""
    for index, value in enumerate(values):
        if not is_missing(value):
            return index, value
    return None, None


def detect_column_format(values, column=None):
    """
    Detect the notation of a column from its first non-missing value.

    The rest of the column is not checked for consistency.

    Raises:
        UnrecognizedPositionFormatError: If the column is empty or the sample is unrecognized.
    """
    label = f"column '{column}'" if column is not None else "positions"
    _, sample = first_present(values)
    if sample is None:
        raise UnrecognizedPositionFormatError(
            f"No non-missing values in {label} to detect a position format from",
            stage="format_detection", examined=[label])
    detected = detect_format(sample)
    if detected is None:
        raise UnrecognizedPositionFormatError(
            f"Could not recognize the position format of {label}; expected A1, 1 or 1_1 style values",
            stage="format_detection", examined=[repr(sample)])
    return detected
