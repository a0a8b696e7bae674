import pytest

from plateplus.core.data.geometry import (
    PLATE_DIMENSIONS,
    VALID_PLATE_SIZES,
    get_plate_dimensions,
)
from plateplus.core.errors import InvalidPlateSizeError, PositionOutOfBoundsError, UnknownRowLabelError


@pytest.mark.parametrize("wells,rows,cols", [
    (6, 2, 3), (12, 3, 4), (24, 4, 6), (48, 6, 8), (96, 8, 12), (384, 16, 24), (1536, 32, 48),
])
def test_plate_dimensions(wells, rows, cols):
    geometry = get_plate_dimensions(wells)
    assert (geometry.rows, geometry.cols) == (rows, cols)
    assert geometry.rows * geometry.cols == geometry.wells == wells


def test_only_seven_sizes_supported():
    assert VALID_PLATE_SIZES == (6, 12, 24, 48, 96, 384, 1536)
    assert len(PLATE_DIMENSIONS) == 7


@pytest.mark.parametrize("bad", [42, 0, -96, 96.5, "abc", True, None, [96]])
def test_invalid_plate_size(bad):
    with pytest.raises(InvalidPlateSizeError) as excinfo:
        get_plate_dimensions(bad)
    assert isinstance(excinfo.value, ValueError)
    assert "6, 12, 24, 48, 96, 384, 1536" in str(excinfo.value)


def test_plate_size_accepts_integral_float_and_digit_string():
    assert get_plate_dimensions(96.0).wells == 96
    assert get_plate_dimensions("384").wells == 384


def test_row_labels_extend_past_z():
    assert get_plate_dimensions(96).row_labels == tuple("ABCDEFGH")
    labels = get_plate_dimensions(1536).row_labels
    assert len(labels) == 32
    assert labels[25:] == ("Z", "AA", "AB", "AC", "AD", "AE", "AF")


def test_row_lookup():
    geometry = get_plate_dimensions(96)
    assert geometry.row_number("h") == 8
    assert geometry.row_label(1) == "A"
    with pytest.raises(UnknownRowLabelError):
        geometry.row_number("I")
    with pytest.raises(PositionOutOfBoundsError):
        geometry.row_label(9)


def test_row_label_uses_row_bounds():
    geometry = get_plate_dimensions(6)
    assert geometry.row_label(2) == "B"
    with pytest.raises(PositionOutOfBoundsError) as excinfo:
        geometry.row_label(0)
    assert excinfo.value.stage == "row"
