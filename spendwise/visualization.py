"""Plotly visualisation helpers for the SpendWise dashboard.

Each function accepts one of the derived values produced by
:mod:`spendwise.derivation` and returns a ``plotly.graph_objects.Figure``
that Streamlit renders via ``st.plotly_chart``.  Empty input produces a
blank figure titled "No data to display" rather than an error, so the
dashboard can always draw both charts.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_pie_chart(category_totals: Dict[str, float], title: Optional[str] = None) -> go.Figure:
    """Generate a pie chart of spending per category.

    Parameters
    ----------
    category_totals : dict
        Mapping of category name to summed amount, as returned by
        :func:`spendwise.derivation.category_totals`.
    title : str, optional
        Title for the chart.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart, one slice per category with a non-zero total.
    """
    if not category_totals:
        return _empty_figure()
    df = pd.DataFrame(list(category_totals.items()), columns=["Category", "Amount"])
    df = df[df["Amount"] > 0]
    if df.empty:
        return _empty_figure()
    fig = px.pie(df, names="Category", values="Amount")
    fig.update_layout(title=title or "Spending by category")
    return fig


def create_daily_spend_chart(
    daily_totals: Sequence[float],
    year_month: Optional[str] = None,
    title: Optional[str] = None,
) -> go.Figure:
    """Create a line chart of spending for each day of a month.

    Parameters
    ----------
    daily_totals : sequence of float
        One value per calendar day, index 0 being day 1, as returned by
        :func:`spendwise.derivation.daily_totals`.
    year_month : str, optional
        ``"YYYY-MM"`` label used in the default title.
    title : str, optional
        Title for the chart.

    Returns
    -------
    plotly.graph_objects.Figure
        Line chart (with markers) of day of month vs amount spent.
    """
    if len(daily_totals) == 0:
        return _empty_figure()
    df = pd.DataFrame({
        "Day": np.arange(1, len(daily_totals) + 1),
        "Amount": np.asarray(daily_totals, dtype=float),
    })
    fig = px.line(df, x="Day", y="Amount", markers=True)
    fig.update_layout(
        title=title or (f"Daily spending, {year_month}" if year_month else "Daily spending"),
        xaxis_title="Day",
        yaxis_title="Amount",
    )
    fig.update_xaxes(dtick=1)
    return fig
