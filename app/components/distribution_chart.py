"""Plotly figures comparing simulated and exact distributions."""

from decimal import Decimal
from typing import Dict, Optional

import pandas as pd
import plotly.graph_objects as go

from binomsim.experiment.analysis import ConvergenceResult, compare_distributions
from binomsim.results.histogram import Histogram


def build_distribution_frame(
    histogram: Histogram,
    exact: Dict[int, Optional[Decimal]],
) -> pd.DataFrame:
    """Per-count frame with simulated frequency and exact probability.

    Args:
        histogram: Simulated histogram.
        exact: Exact probability per success count (None if unavailable).

    Returns:
        DataFrame from compare_distributions, one row per success count.
    """
    return compare_distributions(histogram, exact)


def build_distribution_figure(
    histogram: Histogram,
    exact: Dict[int, Optional[Decimal]],
    target: Optional[int] = None,
) -> go.Figure:
    """Bar chart of simulated frequencies with the exact PMF overlaid.

    Args:
        histogram: Simulated histogram.
        exact: Exact probability per success count.
        target: Success count to highlight, if any.

    Returns:
        Plotly figure with a "Simulated" bar trace and an "Exact"
        marker trace.
    """
    df = build_distribution_frame(histogram, exact)

    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=df["successes"],
        y=df["frequency"],
        name="Simulated",
        marker_color="#636efa",
    ))

    fig.add_trace(go.Scatter(
        x=df["successes"],
        y=df["exact"],
        name="Exact",
        mode="markers+lines",
        marker=dict(color="#ff4b4b", size=7),
        line=dict(color="#ff4b4b", width=1, dash="dot"),
    ))

    if target is not None:
        fig.add_vline(
            x=target,
            line_dash="dash",
            line_color="#29b09d",
            annotation_text=f"k = {target}",
        )

    fig.update_layout(
        title=f"Binomial distribution ({histogram.iterations:,} iterations)",
        xaxis_title="Successes",
        yaxis_title="Probability",
        bargap=0.1,
        legend=dict(orientation="h", y=1.1),
    )
    return fig


def build_convergence_figure(result: ConvergenceResult) -> go.Figure:
    """Absolute error against iterations, with the tolerance band.

    Both axes are logarithmic; the tolerance (n_se standard errors)
    falls as 1 / sqrt(iterations).
    """
    df = result.to_dataframe()

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=df["iterations"],
        y=df["abs_error"],
        name="|frequency - exact|",
        mode="markers+lines",
        marker=dict(color="#636efa", size=8),
    ))

    fig.add_trace(go.Scatter(
        x=df["iterations"],
        y=df["se"] * result.n_se,
        name=f"{result.n_se:g} standard errors",
        mode="lines",
        line=dict(color="#ff4b4b", dash="dash"),
    ))

    fig.update_layout(
        title=f"Convergence of P({result.target})",
        xaxis_title="Iterations",
        yaxis_title="Absolute error",
        xaxis_type="log",
        yaxis_type="log",
    )
    return fig
