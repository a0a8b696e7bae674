"""
Module for reading plate layout tables from CSV, TSV and Excel files.
"""
import logging
import os

import pandas as pd

from plateplus.core.data.formats import PositionFormat
from plateplus.core.data.geometry import get_plate_dimensions
from plateplus.core.data.inference import normalize_plate_data
from plateplus.core.errors import UnsupportedFileTypeError

CSV_EXTENSIONS = ('csv',)
TSV_EXTENSIONS = ('tsv', 'txt')
EXCEL_EXTENSIONS = ('xlsx',)


def file_extension(file_path):
    return os.path.splitext(str(file_path))[1].lstrip('.').lower()


def read_table(file_path, sheet=0, **kwargs):
    """
    Read a table from a CSV, TSV or Excel file.

    Args:
        file_path (str): Path to the file. The extension selects the reader.
        sheet (int or str): Excel sheet index or name. Default first sheet.
        **kwargs: Passed on to the pandas reader.

    Returns:
        pandas.DataFrame: The table as read.
    """
    extension = file_extension(file_path)
    if extension in CSV_EXTENSIONS:
        df = pd.read_csv(file_path, **kwargs)
    elif extension in TSV_EXTENSIONS:
        df = pd.read_csv(file_path, sep='\t', **kwargs)
    elif extension in EXCEL_EXTENSIONS:
        df = pd.read_excel(file_path, sheet_name=sheet, **kwargs)
    else:
        raise UnsupportedFileTypeError(
            "Unsupported file type. Supported types are: CSV, TSV, TXT, XLSX",
            stage="read", examined=[file_path])
    logging.getLogger('plateplus').info(f"Read {len(df)} rows x {len(df.columns)} columns from {file_path}")
    return df


def import_plate_layout(file_path, plate_size=96, value_column=None, position_format="letter_number",
                        position_column=None, row_column=None, row_is_numeric=None, plate_column=None,
                        sheet=0, candidates=None, **kwargs):
    """
    Import plate layout data from a file.

    Args:
        file_path (str): CSV, TSV/TXT or Excel file.
        plate_size (int): Number of wells. One of 6, 12, 24, 48, 96, 384, 1536. Default 96.
        value_column (str, optional): Column with the values; detected when None.
        position_format (str): Output notation: 'letter_number', 'number' or 'row_column'.
        position_column (str, optional): Column with positions; detected when None.
        row_column (tuple, optional): Separate (row, column) field names.
        row_is_numeric (bool, optional): Whether the row field holds numbers.
        plate_column (str, optional): Column identifying plates in multi-plate files.
        sheet (int or str): Excel sheet. Default first sheet.
        candidates (ColumnCandidates, optional): Conventional column names to try.
        **kwargs: Passed on to the pandas reader.

    Returns:
        pandas.DataFrame: Columns 'position', 'value' and optionally 'plate'.
    """
    # Fail on bad arguments before touching the file
    get_plate_dimensions(plate_size)
    PositionFormat.parse(position_format)

    data = read_table(file_path, sheet=sheet, **kwargs)
    return normalize_plate_data(
        data,
        plate_size=plate_size,
        value_column=value_column,
        position_format=position_format,
        position_column=position_column,
        row_column=row_column,
        row_is_numeric=row_is_numeric,
        plate_column=plate_column,
        candidates=candidates,
    )
