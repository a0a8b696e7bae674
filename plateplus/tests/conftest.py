import logging

import pandas as pd
import pytest

from plateplus.utils import logger as plateplus_logger


@pytest.fixture(autouse=True)
def reset_plateplus_logging():
    """Drop handlers installed by setup_logging so each test starts clean."""
    yield
    logger = logging.getLogger('plateplus')
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    plateplus_logger._LOGGER_INSTANCE = None
    plateplus_logger._LOG_FILE_HANDLER = None
    plateplus_logger._CONSOLE_HANDLER = None
    plateplus_logger._LOG_FILE_PATH = None


@pytest.fixture
def sequencing_plan():
    """Two plates with separate letter row and numeric column fields."""
    return pd.DataFrame({
        'plate': [1, 1, 1, 1, 2, 2],
        'plate_row': ['A', 'A', 'B', 'B', 'A', 'A'],
        'plate_column': [1, 2, 1, 2, 1, 2],
        'sample_type': ['sample', 'blank', 'sample', 'control', 'sample', 'sample'],
        'sample_id': ['S1', 'B1', 'S2', 'C1', 'S3', 'S4'],
    })


@pytest.fixture
def reader_export():
    """Plate reader style table with a well column and an OD reading."""
    return pd.DataFrame({
        'Well': ['A1', 'A2', 'B1', 'H12'],
        'OD600': [0.12, 0.45, 0.33, 0.91],
        'Time': [0, 0, 0, 0],
    })
