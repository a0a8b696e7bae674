"""
Utility package for plateplus.

This package exports:
- logger: functions to configure the logging system.
"""
from .logger import setup_logging

__all__ = [
    'setup_logging',
]
