"""
Module that turns loosely structured tables into normalized plate data.

The resolution works through a chain of stages (explicit hints first, then
conventional column names) and stops at the first one that succeeds. The
conventional names live in ColumnCandidates so new instrument conventions
can be added without changing the resolution code.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import pandas as pd

from plateplus.core.data.formats import (
    STRING,
    PositionFormat,
    cell_kind,
    detect_column_format,
    first_present,
)
from plateplus.core.data.geometry import get_plate_dimensions
from plateplus.core.data.positions import (
    ROW_LETTER_PATTERN,
    convert_positions,
    position_from_row_column,
)
from plateplus.core.errors import (
    InvalidPlateSizeError,
    MissingColumnError,
    PlateLayoutError,
    PositionColumnNotFoundError,
    ValueColumnNotFoundError,
)

POSITION_COLUMN_CANDIDATES = (
    "position", "well", "well_id", "well_position", "wellposition",
    "pos", "location", "well_loc", "wellloc",
)

ROW_COLUMN_PAIR_CANDIDATES = (
    ("row", "col"),
    ("row", "column"),
    ("plate_row", "plate_column"),
    ("plate_row", "plate_col"),
    ("row_id", "column_id"),
    ("row_num", "col_num"),
)

VALUE_COLUMN_CANDIDATES = (
    "value", "values", "intensity", "signal", "measurement",
    "reading", "result", "response", "od", "concentration",
)

# Never picked as the fallback numeric value column
POSITION_RELATED_COLUMNS = (
    "row", "col", "column", "plate_row", "plate_column", "row_id", "column_id",
)


@dataclass(frozen=True)
class ColumnCandidates:
    """Conventional column names, in priority order."""
    position_columns: Tuple[str, ...] = POSITION_COLUMN_CANDIDATES
    row_column_pairs: Tuple[Tuple[str, str], ...] = ROW_COLUMN_PAIR_CANDIDATES
    value_columns: Tuple[str, ...] = VALUE_COLUMN_CANDIDATES
    position_related: Tuple[str, ...] = POSITION_RELATED_COLUMNS

    def extended(self, position_columns=(), row_column_pairs=(), value_columns=()):
        """Return a copy with extra names appended after the built-in ones."""
        pairs = [tuple(pair) for pair in row_column_pairs]
        for pair in pairs:
            if len(pair) != 2:
                raise ValueError(f"Row/column pair must have two names, got {pair}")
        return replace(
            self,
            position_columns=_append_new(self.position_columns, position_columns),
            row_column_pairs=_append_new(self.row_column_pairs, pairs),
            value_columns=_append_new(self.value_columns, value_columns),
            position_related=_append_new(self.position_related, [name for pair in pairs for name in pair]),
        )


def _append_new(existing, extra):
    return tuple(existing) + tuple(item for item in dict.fromkeys(extra) if item not in existing)


DEFAULT_CANDIDATES = ColumnCandidates()


@dataclass
class ColumnResolution:
    """How a table was resolved into positions and values."""
    position_stage: str
    consumed_columns: Tuple[str, ...]
    value_column: str
    value_stage: str
    source_format: Optional[PositionFormat]
    target_format: PositionFormat
    plate_size: Optional[int] = None
    plate_column: Optional[str] = None
    row_is_numeric: Optional[bool] = None
    converted: bool = False
    positions: list = field(default_factory=list, repr=False)


def _as_frame(table):
    if isinstance(table, pd.DataFrame):
        return table
    return pd.DataFrame(table)


def _find_column(columns, names, case_sensitive=True):
    """First candidate name (in candidate order) present among columns."""
    for name in names:
        if case_sensitive:
            if name in columns:
                return name
            continue
        lowered = str(name).lower()
        for column in columns:
            if str(column).lower() == lowered:
                return column
    return None


def _row_field_is_numeric(values):
    """Row fields are letters when the first sample is a string containing a letter."""
    _, sample = first_present(values)
    if sample is None:
        return True
    text = str(sample).strip()
    return not (cell_kind(sample) == STRING and ROW_LETTER_PATTERN.match(text))


def _synthesize_positions(df, row_field, col_field, row_is_numeric, geometry, stage):
    positions = []
    for index, (row_value, col_value) in enumerate(zip(df[row_field].tolist(), df[col_field].tolist())):
        try:
            positions.append(position_from_row_column(row_value, col_value, row_is_numeric, geometry))
        except PlateLayoutError as e:
            raise e.at_stage(stage, [f"row {index}: {row_field}={row_value!r}, {col_field}={col_value!r}"])
    return positions


def _resolve_positions(df, position_column, row_column, row_is_numeric, geometry, candidates):
    """Return (stage, positions, consumed columns, row_is_numeric)."""
    columns = list(df.columns)

    if row_column is not None:
        if isinstance(row_column, str) or len(row_column) != 2:
            raise ValueError(
                "row_column must be a pair of column names specifying row and column field names")
        row_field, col_field = row_column
        for name, role in ((row_field, "Row"), (col_field, "Column")):
            if name not in columns:
                raise MissingColumnError(
                    f"{role} field '{name}' not found in data",
                    stage="row_column_hint", examined=columns)
        if row_is_numeric is None:
            row_is_numeric = _row_field_is_numeric(df[row_field].tolist())
        positions = _synthesize_positions(df, row_field, col_field, row_is_numeric, geometry, "row_column_hint")
        return "row_column_hint", positions, (row_field, col_field), row_is_numeric

    if position_column is not None:
        if position_column not in columns:
            raise MissingColumnError(
                f"Position column '{position_column}' not found in data",
                stage="position_column_hint", examined=columns)
        return "position_column_hint", df[position_column].tolist(), (position_column,), None

    found = _find_column(columns, candidates.position_columns)
    if found is not None:
        return "position_candidates", df[found].tolist(), (found,), None

    for row_field, col_field in candidates.row_column_pairs:
        if row_field in columns and col_field in columns:
            pair_is_numeric = _row_field_is_numeric(df[row_field].tolist())
            positions = _synthesize_positions(
                df, row_field, col_field, pair_is_numeric, geometry, "row_column_candidates")
            return "row_column_candidates", positions, (row_field, col_field), pair_is_numeric

    tried = list(candidates.position_columns) + [f"{row}+{col}" for row, col in candidates.row_column_pairs]
    raise PositionColumnNotFoundError(
        "Could not automatically detect position column. "
        "Please specify position_column or row_column parameters. "
        f"Available columns: {', '.join(str(column) for column in columns)}",
        stage="position_column", examined=tried)


def _resolve_value_column(df, value_column, consumed, plate_column, candidates):
    """Return (value column, stage)."""
    columns = list(df.columns)
    if value_column is not None:
        if value_column not in columns:
            raise MissingColumnError(
                f"Value column '{value_column}' not found in data",
                stage="value_column_hint", examined=columns)
        return value_column, "value_column_hint"

    found = _find_column(columns, candidates.value_columns, case_sensitive=False)
    if found is not None:
        return found, "value_candidates"

    excluded = set(consumed) | set(candidates.position_related)
    if plate_column is not None:
        excluded.add(plate_column)
    for column in columns:
        if column in excluded or pd.api.types.is_bool_dtype(df[column]):
            continue
        if pd.api.types.is_numeric_dtype(df[column]):
            return column, "first_numeric_column"

    raise ValueColumnNotFoundError(
        "Could not automatically detect value column. Please specify value_column parameter. "
        f"Available columns: {', '.join(str(column) for column in columns)}",
        stage="value_column", examined=list(candidates.value_columns) + ["first numeric column"])


def resolve_columns(table, plate_size=None, value_column=None, position_format="letter_number",
                    position_column=None, row_column=None, row_is_numeric=None, plate_column=None,
                    candidates=None):
    """
    Work out which columns hold positions and values and normalize the positions.

    Args:
        table (pandas.DataFrame): Raw table, any column names and types.
        plate_size (int, optional): Plate size. Required when the positions
            need converting to another notation.
        value_column (str, optional): Column with the values.
        position_format (str or PositionFormat): Output notation. Default 'letter_number'.
        position_column (str, optional): Column with combined positions.
        row_column (tuple, optional): (row field, column field) names.
        row_is_numeric (bool, optional): Whether the row field holds numbers.
            None infers it from the first row value.
        plate_column (str, optional): Column identifying the plate in multi-plate tables.
        candidates (ColumnCandidates, optional): Conventional names to try.

    Returns:
        ColumnResolution: Resolution details with the converted positions.
    """
    target_format = PositionFormat.parse(position_format)
    geometry = get_plate_dimensions(plate_size) if plate_size is not None else None
    candidates = candidates or DEFAULT_CANDIDATES
    df = _as_frame(table)
    logger = logging.getLogger('plateplus')

    if plate_column is not None and plate_column not in df.columns:
        raise MissingColumnError(
            f"Plate column '{plate_column}' not found in data",
            stage="plate_column_hint", examined=list(df.columns))

    position_stage, positions, consumed, row_is_numeric = _resolve_positions(
        df, position_column, row_column, row_is_numeric, geometry, candidates)
    logger.info(f"Positions resolved from {', '.join(map(str, consumed))} ({position_stage})")

    value_column, value_stage = _resolve_value_column(df, value_column, consumed, plate_column, candidates)
    logger.info(f"Values resolved from '{value_column}' ({value_stage})")

    resolution = ColumnResolution(
        position_stage=position_stage,
        consumed_columns=tuple(consumed),
        value_column=value_column,
        value_stage=value_stage,
        source_format=None,
        target_format=target_format,
        plate_size=geometry.wells if geometry is not None else None,
        plate_column=plate_column,
        row_is_numeric=row_is_numeric,
        positions=positions,
    )
    if df.empty:
        return resolution

    label = consumed[0] if len(consumed) == 1 else "position"
    resolution.source_format = detect_column_format(positions, column=label)
    if resolution.source_format == target_format:
        return resolution

    if geometry is None:
        raise InvalidPlateSizeError(
            f"plate_size is required to convert {resolution.source_format.value} positions "
            f"to {target_format.value}",
            stage="position_conversion", examined=[label])
    resolution.positions = convert_positions(positions, resolution.source_format, target_format, geometry)
    resolution.converted = True
    return resolution


def _log_duplicates(result):
    keys = ["plate", "position"] if "plate" in result.columns else ["position"]
    present = result[result["position"].notna()]
    duplicated = present[present.duplicated(subset=keys, keep=False)]
    if not duplicated.empty:
        logging.getLogger('plateplus').warning(
            f"{duplicated['position'].nunique()} position(s) appear more than once "
            f"({len(duplicated)} rows); the last value wins when reshaped to a plate")


def normalize_plate_data(table, plate_size=None, value_column=None, position_format="letter_number",
                         position_column=None, row_column=None, row_is_numeric=None, plate_column=None,
                         candidates=None):
    """
    Normalize a table into plate data with position, value and optional plate columns.

    Takes the same arguments as resolve_columns. The call either succeeds for
    every row or raises; no rows are skipped.

    Returns:
        pandas.DataFrame: Columns 'position', 'value' and, with plate_column, 'plate'.
    """
    df = _as_frame(table)
    resolution = resolve_columns(
        df, plate_size=plate_size, value_column=value_column, position_format=position_format,
        position_column=position_column, row_column=row_column, row_is_numeric=row_is_numeric,
        plate_column=plate_column, candidates=candidates)

    data = {
        "position": pd.Series(resolution.positions, dtype=object),
        "value": df[resolution.value_column].reset_index(drop=True),
    }
    if plate_column is not None:
        data["plate"] = df[plate_column].reset_index(drop=True)
    result = pd.DataFrame(data)

    if (resolution.converted and resolution.target_format == PositionFormat.NUMBER
            and result["position"].notna().all()):
        result["position"] = result["position"].astype("int64")

    _log_duplicates(result)
    return result
