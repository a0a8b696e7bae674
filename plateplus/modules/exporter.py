"""
Module for data exporting functionalities.
"""
import logging

import pandas as pd

from plateplus.core.data.formats import PositionFormat, is_missing
from plateplus.core.data.geometry import get_plate_dimensions
from plateplus.core.data.parser import CSV_EXTENSIONS, EXCEL_EXTENSIONS, TSV_EXTENSIONS, file_extension
from plateplus.core.data.positions import split_position
from plateplus.core.errors import MissingColumnError, PlateLayoutError, UnsupportedFileTypeError


def split_plate_positions(df: pd.DataFrame, position_column="position", position_format="letter_number",
                          plate_size=96):
    """
    Add 'plate_row' (row letter) and 'plate_column' (number) columns derived from positions.

    Args:
        df (pandas.DataFrame): Plate data.
        position_column (str): Column with the positions.
        position_format (str): Notation of the positions.
        plate_size (int): Number of wells.

    Returns:
        pandas.DataFrame: A copy of ``df`` with the two extra columns.
    """
    geometry = get_plate_dimensions(plate_size)
    position_format = PositionFormat.parse(position_format)
    rows, cols = [], []
    for index, position in enumerate(df[position_column].tolist()):
        if is_missing(position):
            rows.append(None)
            cols.append(None)
            continue
        try:
            row_label, col_num = split_position(position, position_format, geometry)
        except PlateLayoutError as e:
            raise e.at_stage("split_position", [f"row {index}: {position!r}"])
        rows.append(row_label)
        cols.append(col_num)

    result = df.copy()
    result['plate_row'] = rows
    result['plate_column'] = pd.array(cols, dtype="Int64")
    return result


def export_plate_layout(data: pd.DataFrame, file_path: str, position_column="position", value_column="value",
                        split_position=False, position_format="letter_number", plate_size=96, **kwargs):
    """
    Export plate layout data to a CSV, TSV or Excel file.

    Args:
        data (pandas.DataFrame): Plate data.
        file_path (str): Output path; the extension selects csv, tsv/txt or xlsx.
        position_column (str): Column with positions. Default 'position'.
        value_column (str): Column with values. Default 'value'.
        split_position (bool): Add separate 'plate_row' and 'plate_column' fields.
        position_format (str): Notation of the positions. Only used with split_position.
        plate_size (int): Number of wells. Only used with split_position.
        **kwargs: Passed on to the pandas writer.
    """
    PositionFormat.parse(position_format)
    if split_position:
        get_plate_dimensions(plate_size)

    for column, role in ((position_column, "Position"), (value_column, "Value")):
        if column not in data.columns:
            raise MissingColumnError(
                f"{role} column '{column}' not found in data",
                stage="export", examined=list(data.columns))

    extension = file_extension(file_path)
    if extension not in CSV_EXTENSIONS + TSV_EXTENSIONS + EXCEL_EXTENSIONS:
        raise UnsupportedFileTypeError(
            "Unsupported file type. Supported types are: CSV, TSV, TXT, XLSX",
            stage="export", examined=[file_path])

    export_data = data.copy()
    if split_position:
        export_data = split_plate_positions(export_data, position_column, position_format, plate_size)

    if extension in CSV_EXTENSIONS:
        export_data.to_csv(file_path, index=False, **kwargs)
    elif extension in TSV_EXTENSIONS:
        export_data.to_csv(file_path, sep='\t', index=False, **kwargs)
    else:
        export_data.to_excel(file_path, index=False, **kwargs)

    logging.getLogger('plateplus').info(f"Exported {len(export_data)} rows to {file_path}")
