import numpy as np
import pandas as pd
import pytest

from plateplus.core.data.formats import PositionFormat
from plateplus.core.data.inference import (
    DEFAULT_CANDIDATES,
    ColumnCandidates,
    normalize_plate_data,
    resolve_columns,
)
from plateplus.core.errors import (
    InvalidPlateSizeError,
    InvalidPositionFormatError,
    MissingColumnError,
    PositionColumnNotFoundError,
    PositionOutOfBoundsError,
    UnknownRowLabelError,
    UnrecognizedPositionFormatError,
    ValueColumnNotFoundError,
)


def test_row_column_pair_with_letter_rows():
    table = pd.DataFrame({
        'plate_row': ['A', 'A', 'B', 'B'],
        'plate_column': [1, 2, 1, 2],
        'sample_type': ['sample', 'blank', 'sample', 'control'],
    })
    result = normalize_plate_data(table, row_column=("plate_row", "plate_column"), value_column="sample_type")

    assert list(result.columns) == ['position', 'value']
    assert result['position'].tolist() == ['A1', 'A2', 'B1', 'B2']
    assert result['value'].tolist() == ['sample', 'blank', 'sample', 'control']


def test_row_column_pair_with_numeric_rows():
    table = pd.DataFrame({'r': [1, 2], 'c': [3, 4], 'signal': [0.1, 0.2]})
    forced = normalize_plate_data(table, row_column=("r", "c"), row_is_numeric=True)
    inferred = normalize_plate_data(table, row_column=("r", "c"))
    assert forced['position'].tolist() == ['A3', 'B4']
    assert inferred['position'].tolist() == ['A3', 'B4']
    assert forced['value'].tolist() == [0.1, 0.2]


def test_row_column_pair_missing_field():
    table = pd.DataFrame({'plate_row': ['A'], 'value': [1]})
    with pytest.raises(MissingColumnError) as excinfo:
        normalize_plate_data(table, row_column=("plate_row", "plate_column"))
    assert "plate_column" in str(excinfo.value)
    assert excinfo.value.stage == "row_column_hint"


def test_row_column_pair_must_be_a_pair():
    table = pd.DataFrame({'plate_row': ['A'], 'value': [1]})
    with pytest.raises(ValueError):
        normalize_plate_data(table, row_column=("plate_row",))


def test_ill_formed_row_fails_whole_call():
    table = pd.DataFrame({'r': ['A', '1x'], 'c': [1, 2], 'value': [1, 2]})
    with pytest.raises(InvalidPositionFormatError) as excinfo:
        normalize_plate_data(table, row_column=("r", "c"), row_is_numeric=False)
    assert excinfo.value.stage == "row_column_hint"
    assert "row 1" in str(excinfo.value)


def test_explicit_position_column_and_case_insensitive_value(reader_export):
    table = reader_export.rename(columns={'Well': 'Well ID', 'OD600': 'Signal'})
    result = normalize_plate_data(table, position_column="Well ID")
    assert result['position'].tolist() == ['A1', 'A2', 'B1', 'H12']
    assert result['value'].tolist() == [0.12, 0.45, 0.33, 0.91]


def test_explicit_position_column_missing():
    with pytest.raises(MissingColumnError):
        normalize_plate_data(pd.DataFrame({'well': ['A1'], 'value': [1]}), position_column="Well")


def test_candidate_position_column_order():
    table = pd.DataFrame({'location': ['B1'], 'pos': ['A1'], 'value': [1]})
    resolution = resolve_columns(table)
    assert resolution.position_stage == "position_candidates"
    assert resolution.consumed_columns == ('pos',)
    assert resolution.positions == ['A1']


def test_candidate_row_column_pair():
    table = pd.DataFrame({'row': ['A', 'B'], 'column': [1, 1], 'Reading': [5, 6]})
    resolution = resolve_columns(table)
    assert resolution.position_stage == "row_column_candidates"
    assert resolution.consumed_columns == ('row', 'column')
    assert resolution.row_is_numeric is False
    assert resolution.value_column == 'Reading'
    assert resolution.positions == ['A1', 'B1']


def test_fallback_to_first_numeric_value_column():
    table = pd.DataFrame({'row_num': [1, 2], 'col_num': [1, 1], 'note': ['x', 'y'], 'x': [1.5, 2.5]})
    resolution = resolve_columns(table)
    assert resolution.value_stage == "first_numeric_column"
    assert resolution.value_column == 'x'
    assert resolution.positions == ['A1', 'B1']


def test_fallback_skips_plate_and_boolean_columns():
    table = pd.DataFrame({
        'well': ['A1', 'A2'],
        'plate_id': [1, 1],
        'flag': [True, False],
        'ct': [20.5, 21.0],
    })
    result = normalize_plate_data(table, plate_column='plate_id')
    assert result['value'].tolist() == [20.5, 21.0]
    assert result['plate'].tolist() == [1, 1]


def test_position_column_not_found_lists_what_was_tried():
    table = pd.DataFrame({'sample': ['x'], 'value': [1]})
    with pytest.raises(PositionColumnNotFoundError) as excinfo:
        normalize_plate_data(table)
    message = str(excinfo.value)
    assert "well_id" in message
    assert "plate_row+plate_column" in message
    assert "sample" in message


def test_value_column_not_found():
    table = pd.DataFrame({'well': ['A1'], 'note': ['x']})
    with pytest.raises(ValueColumnNotFoundError) as excinfo:
        normalize_plate_data(table)
    assert "concentration" in str(excinfo.value)


def test_explicit_value_column_missing():
    with pytest.raises(MissingColumnError):
        normalize_plate_data(pd.DataFrame({'well': ['A1'], 'value': [1]}), value_column="od")


def test_convert_to_number(reader_export):
    result = normalize_plate_data(reader_export, position_column="Well", position_format="number", plate_size=96)
    assert result['position'].tolist() == [1, 2, 13, 96]
    assert result['position'].dtype == np.int64


def test_convert_to_row_column(reader_export):
    result = normalize_plate_data(reader_export, position_column="Well", position_format="row_column", plate_size=96)
    assert result['position'].tolist() == ['1_1', '1_2', '2_1', '8_12']


def test_conversion_requires_plate_size():
    with pytest.raises(InvalidPlateSizeError) as excinfo:
        resolve_columns(pd.DataFrame({'position': [1, 13], 'value': [1.0, 2.0]}))
    assert excinfo.value.stage == "position_conversion"
    with pytest.raises(InvalidPlateSizeError) as excinfo:
        normalize_plate_data(pd.DataFrame({'well': ['A1', 'B1'], 'value': [1, 2]}), position_format="number")
    assert excinfo.value.stage == "position_conversion"


def test_sparse_sequential_positions_use_declared_plate():
    table = pd.DataFrame({'position': [1, 13], 'value': [1.0, 2.0]})
    resolution = resolve_columns(table, plate_size=96)
    assert resolution.source_format == PositionFormat.NUMBER
    assert resolution.plate_size == 96
    assert resolution.positions == ['A1', 'B1']
    result = normalize_plate_data(pd.DataFrame({'well': ['A1', 'B1'], 'value': [1, 2]}),
                                  position_format="number", plate_size=96)
    assert result['position'].tolist() == [1, 13]


def test_same_format_needs_no_plate_size():
    result = normalize_plate_data(pd.DataFrame({'well': ['A1', 'B1'], 'value': [1, 2]}))
    assert result['position'].tolist() == ['A1', 'B1']


def test_sequential_to_letter_number_with_declared_plate_size():
    table = pd.DataFrame({'position': [1, 24], 'value': [1.0, 2.0]})
    result = normalize_plate_data(table, plate_size=96)
    assert result['position'].tolist() == ['A1', 'B12']


def test_row_column_source_to_letter_number():
    table = pd.DataFrame({'well': ['1_1', '8_12'], 'value': [1, 2]})
    result = normalize_plate_data(table, plate_size=96)
    assert result['position'].tolist() == ['A1', 'H12']


def test_same_format_is_not_converted():
    table = pd.DataFrame({'well': ['a1', 'Z99'], 'value': [1, 2]})
    resolution = resolve_columns(table, plate_size=96)
    assert resolution.converted is False
    assert resolution.positions == ['a1', 'Z99']


def test_conversion_failure_is_atomic():
    table = pd.DataFrame({'well': ['A1', 'Z1'], 'value': [1, 2]})
    with pytest.raises(UnknownRowLabelError) as excinfo:
        normalize_plate_data(table, position_format="number", plate_size=96)
    assert excinfo.value.stage == "position_conversion"
    assert "row 1" in str(excinfo.value)


def test_unrecognized_position_format():
    table = pd.DataFrame({'well': ['??', 'A1'], 'value': [1, 2]})
    with pytest.raises(UnrecognizedPositionFormatError):
        normalize_plate_data(table, position_format="number", plate_size=96)


def test_missing_positions_pass_through():
    table = pd.DataFrame({'well': [None, 'A2'], 'value': [1, 2]})
    result = normalize_plate_data(table, position_format="number", plate_size=96)
    assert result['position'].tolist() == [None, 2]


def test_plate_column(sequencing_plan):
    result = normalize_plate_data(
        sequencing_plan,
        row_column=("plate_row", "plate_column"),
        value_column="sample_id",
        plate_column="plate",
    )
    assert list(result.columns) == ['position', 'value', 'plate']
    assert result['plate'].tolist() == [1, 1, 1, 1, 2, 2]
    assert result['position'].tolist() == ['A1', 'A2', 'B1', 'B2', 'A1', 'A2']


def test_plate_column_missing(sequencing_plan):
    with pytest.raises(MissingColumnError):
        normalize_plate_data(sequencing_plan, value_column="sample_id", plate_column="plate_id")


def test_invalid_plate_size_rejected_first():
    with pytest.raises(InvalidPlateSizeError):
        normalize_plate_data(pd.DataFrame({'anything': [1]}), plate_size=100)


def test_invalid_position_format_rejected_first():
    with pytest.raises(InvalidPositionFormatError):
        normalize_plate_data(pd.DataFrame({'anything': [1]}), position_format="letters")


def test_extended_candidates():
    table = pd.DataFrame({'Destination Well': ['A1', 'B2'], 'Transfer Volume': [2.5, 5.0]})
    with pytest.raises(PositionColumnNotFoundError):
        normalize_plate_data(table)
    candidates = DEFAULT_CANDIDATES.extended(
        position_columns=['Destination Well'], value_columns=['transfer volume'])
    result = normalize_plate_data(table, candidates=candidates)
    assert result['position'].tolist() == ['A1', 'B2']
    assert result['value'].tolist() == [2.5, 5.0]


def test_extended_pairs_are_position_related():
    candidates = ColumnCandidates().extended(row_column_pairs=[('Dest Row', 'Dest Col')])
    assert candidates.row_column_pairs[-1] == ('Dest Row', 'Dest Col')
    assert 'Dest Col' in candidates.position_related
    table = pd.DataFrame({'Dest Row': [1], 'Dest Col': [2], 'volume': [3.0]})
    result = normalize_plate_data(table, candidates=candidates)
    assert result['position'].tolist() == ['A2']
    assert result['value'].tolist() == [3.0]


def test_accepts_plain_mapping():
    result = normalize_plate_data({'well': ['A1'], 'value': [3]})
    assert result.to_dict('records') == [{'position': 'A1', 'value': 3}]


def test_empty_table():
    result = normalize_plate_data(pd.DataFrame({'well': [], 'value': []}), position_format="number")
    assert result.empty
    assert list(result.columns) == ['position', 'value']


def test_duplicates_are_kept():
    table = pd.DataFrame({'well': ['A1', 'A1'], 'value': [1, 2]})
    result = normalize_plate_data(table)
    assert len(result) == 2


def test_row_column_fields_checked_against_plate():
    table = pd.DataFrame({'r': ['A'], 'c': [99], 'value': [1.0]})
    with pytest.raises(PositionOutOfBoundsError) as excinfo:
        normalize_plate_data(table, row_column=("r", "c"), plate_size=6)
    assert excinfo.value.stage == "row_column_hint"
    with pytest.raises(PositionOutOfBoundsError):
        normalize_plate_data(pd.DataFrame({'row': [1], 'col': [4], 'value': [1.0]}), plate_size=6)
    # without a plate size only the row labels are bounded
    assert normalize_plate_data(table, row_column=("r", "c"))['position'].tolist() == ['A99']
