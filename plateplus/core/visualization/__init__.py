"""
Visualization package for plate data.
"""
from .plots import create_plate_figure, create_multi_plate_figure

__all__ = ['create_plate_figure', 'create_multi_plate_figure']
