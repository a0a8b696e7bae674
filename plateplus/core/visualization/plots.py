"""
Module for plate data visualization.
"""
import math

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from plateplus.core.data.formats import is_missing


def _value_categories(layout):
    """Category order for non-numeric values, None for numeric data."""
    values = layout.df['value']
    if pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values):
        return None
    return list(dict.fromkeys(str(value) for value in values.tolist() if not is_missing(value)))


def _plate_matrix(layout, plate, categories):
    """Return (z, text) matrices for one plate."""
    grid = layout.to_grid(plate)
    z = np.full(grid.shape, np.nan)
    text = np.full(grid.shape, '', dtype=object)
    codes = {category: code for code, category in enumerate(categories or [])}
    for (row, col), value in np.ndenumerate(grid):
        if is_missing(value):
            continue
        text[row, col] = str(value)
        z[row, col] = codes[str(value)] if categories is not None else value
    return z, text


def _heatmap(layout, plate, categories, show_labels):
    z, text = _plate_matrix(layout, plate, categories)
    heatmap = go.Heatmap(
        z=z,
        x=list(range(1, layout.geometry.cols + 1)),
        y=list(layout.geometry.row_labels),
        text=text,
        hovertemplate="%{y}%{x}: %{text}<extra></extra>",
        coloraxis="coloraxis",
        xgap=2,
        ygap=2,
    )
    if show_labels:
        heatmap.texttemplate = "%{text}"
    return heatmap


def _coloraxis(categories):
    if categories is None:
        return dict(colorscale="Viridis")
    # Categorical values are drawn as integer codes with the names on the colorbar
    upper = max(len(categories) - 1, 1)
    return dict(
        colorscale="Viridis",
        cmin=0,
        cmax=upper,
        colorbar=dict(tickvals=list(range(len(categories))), ticktext=categories),
    )


def create_plate_figure(layout, plate=None, title=None, show_labels=False):
    """
    Create a heatmap of one plate.

    Args:
        layout (PlateLayout): Normalized plate data.
        plate (optional): Plate identifier. Required for multi-plate data.
        title (str, optional): Figure title.
        show_labels (bool, optional): Whether to print the values inside the wells. Default False.

    Returns:
        plotly.graph_objects.Figure: Plate heatmap, row A at the top.
    """
    categories = _value_categories(layout)
    fig = go.Figure(_heatmap(layout, plate, categories, show_labels))
    fig.update_yaxes(autorange="reversed", scaleanchor="x")
    fig.update_xaxes(side="top", dtick=1)
    fig.update_layout(title=title, coloraxis=_coloraxis(categories))
    return fig


def create_multi_plate_figure(layout, ncols=None, title=None, show_labels=False):
    """
    Create one heatmap per plate, side by side, sharing one color scale.

    Args:
        layout (PlateLayout): Normalized plate data, usually with a 'plate' column.
        ncols (int, optional): Number of facet columns. Default about the square root of the plate count.
        title (str, optional): Figure title.
        show_labels (bool, optional): Whether to print the values inside the wells.

    Returns:
        plotly.graph_objects.Figure: Faceted figure with one trace per plate.
    """
    plates = layout.plates
    ncols = ncols or math.ceil(math.sqrt(len(plates)))
    nrows = math.ceil(len(plates) / ncols)
    categories = _value_categories(layout)

    fig = make_subplots(
        rows=nrows,
        cols=ncols,
        subplot_titles=[str(plate) if plate is not None else "" for plate in plates],
    )
    for index, plate in enumerate(plates):
        fig.add_trace(_heatmap(layout, plate, categories, show_labels),
                      row=index // ncols + 1, col=index % ncols + 1)

    fig.update_yaxes(autorange="reversed")
    fig.update_xaxes(dtick=1)
    fig.update_layout(title=title, coloraxis=_coloraxis(categories))
    return fig
