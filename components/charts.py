"""Plotly chart builders for the Condominium Parking Lottery."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Dict


def results_by_stage_bar(stage_df: pd.DataFrame, title: str = "Assignments by Stage") -> go.Figure:
    """Stacked bar of strict vs relaxed assignments per stage (from report.stage_summary)."""
    df = stage_df.copy()
    df["Strict"] = df["Assigned"] - df["Relaxed"]
    fig = px.bar(
        df, x="Stage", y=["Strict", "Relaxed"],
        labels={"value": "Spots", "variable": ""},
        title=title,
        color_discrete_map={"Strict": "#4A90D9", "Relaxed": "#F5C542"},
    )
    fig.update_layout(legend_title_text="", height=380, barmode="stack")
    return fig


def results_by_sector_bar(sector_df: pd.DataFrame, title: str = "Assignments by Sector") -> go.Figure:
    fig = px.bar(
        sector_df, x="Sector", y="Assigned",
        title=title,
        color_discrete_sequence=["#4A90D9"],
    )
    fig.update_layout(height=350, xaxis_type="category")
    fig.update_traces(texttemplate="%{y}", textposition="outside")
    return fig


def priority_donut(stats: Dict[str, int], title: str = "Results by Priority") -> go.Figure:
    """Donut of PcD / Idoso / Comum counts (from publisher.priority_stats)."""
    labels = ["PcD", "Idoso", "Comum"]
    values = [stats.get("pcd", 0), stats.get("idoso", 0), stats.get("comum", 0)]
    total = sum(values)
    fig = go.Figure(data=[go.Pie(
        labels=labels,
        values=values,
        hole=0.6,
        marker_colors=["#E8734A", "#F5C542", "#4A90D9"],
        textinfo="percent+label",
    )])
    fig.update_layout(
        title=title,
        height=350,
        showlegend=True,
        annotations=[dict(text=f"{total}", x=0.5, y=0.5, font_size=16, showarrow=False)],
    )
    return fig


def spot_usage_donut(assigned: int, total: int, title: str = "Spot Usage") -> go.Figure:
    """Donut chart of assigned vs remaining spots."""
    fig = go.Figure(data=[go.Pie(
        labels=["Assigned", "Remaining"],
        values=[assigned, max(0, total - assigned)],
        hole=0.6,
        marker_colors=["#E8734A", "#4A90D9"],
        textinfo="percent+label",
    )])
    fig.update_layout(
        title=title,
        height=350,
        showlegend=True,
        annotations=[dict(text=f"{assigned}/{total}", x=0.5, y=0.5, font_size=16, showarrow=False)],
    )
    return fig
