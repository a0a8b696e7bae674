"""
Module containing the plate layout data structure.
"""
import logging

import numpy as np
import pandas as pd

from plateplus.core.data.formats import PositionFormat, is_missing
from plateplus.core.data.geometry import get_plate_dimensions
from plateplus.core.data.inference import normalize_plate_data
from plateplus.core.data.positions import parse_position
from plateplus.core.errors import MissingColumnError, PlateLayoutError


class PlateLayout:
    """Class to store normalized plate data and reshape it onto plates."""

    def __init__(self, df, plate_size=96, position_format="letter_number"):
        """
        Initialize the layout with a normalized DataFrame.

        Args:
            df (pandas.DataFrame): Columns 'position', 'value' and optionally 'plate'. Can be None.
            plate_size (int): Number of wells per plate. Default 96.
            position_format (str or PositionFormat): Notation of the 'position' column.
        """
        self.geometry = get_plate_dimensions(plate_size)
        self.position_format = PositionFormat.parse(position_format)
        if df is None:
            self.df = pd.DataFrame(columns=['position', 'value'])
        else:
            missing = [column for column in ('position', 'value') if column not in df.columns]
            if missing:
                raise MissingColumnError(
                    f"Plate data needs columns 'position' and 'value'; missing {', '.join(missing)}",
                    stage="plate_layout", examined=list(df.columns))
            self.df = df.copy(deep=True).reset_index(drop=True)
        self.plates = self._get_plates()

    @classmethod
    def from_table(cls, table, plate_size=96, position_format="letter_number", **hints):
        """Normalize a raw table and wrap the result."""
        df = normalize_plate_data(table, plate_size=plate_size, position_format=position_format, **hints)
        return cls(df, plate_size=plate_size, position_format=position_format)

    @property
    def is_multi_plate(self):
        return 'plate' in self.df.columns

    def _get_plates(self):
        """Plate identifiers in order of first appearance; [None] for single-plate data."""
        if not self.is_multi_plate:
            return [None]
        return list(dict.fromkeys(plate for plate in self.df['plate'].tolist() if not is_missing(plate)))

    def get_plate_data(self, plate=None):
        """
        Get the rows of one plate.

        Args:
            plate (optional): Plate identifier. Required for multi-plate data.

        Returns:
            pandas.DataFrame: Rows of that plate.
        """
        if not self.is_multi_plate:
            return self.df
        if plate is None:
            raise ValueError(f"Multi-plate data; choose one of the plates: {self.plates}")
        if plate not in self.plates:
            raise KeyError(f"Plate {plate!r} not found. Available plates: {self.plates}")
        return self.df[self.df['plate'] == plate]

    def to_grid(self, plate=None):
        """
        Reshape one plate into a rows x cols array.

        Empty wells are NaN (numeric values) or None (other values). When a
        position appears more than once the last value wins.

        Returns:
            numpy.ndarray: Array of shape (rows, cols).
        """
        data = self.get_plate_data(plate)
        values = data['value']
        numeric = pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values)
        shape = (self.geometry.rows, self.geometry.cols)
        grid = np.full(shape, np.nan) if numeric else np.full(shape, None, dtype=object)

        for index, (position, value) in enumerate(zip(data['position'].tolist(), values.tolist())):
            if is_missing(position):
                continue
            try:
                row_num, col_num = parse_position(position, self.position_format, self.geometry)
            except PlateLayoutError as e:
                raise e.at_stage("to_grid", [f"row {index}: {position!r}"])
            grid[row_num - 1, col_num - 1] = value
        return grid

    def duplicate_positions(self, plate=None):
        """Rows whose position occurs more than once on the plate."""
        data = self.get_plate_data(plate)
        present = data[data['position'].notna()]
        duplicated = present[present.duplicated(subset=['position'], keep=False)]
        if not duplicated.empty:
            logging.getLogger('plateplus').debug(
                f"Plate {plate!r}: {len(duplicated)} rows share a position")
        return duplicated
