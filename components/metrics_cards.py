"""Reusable KPI metric card widgets."""

import streamlit as st


def render_metric_row(metrics: list[dict]):
    """Render a row of metric cards.

    Each metric dict should have: label, value, and optionally delta, delta_color.
    """
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        with col:
            st.metric(
                label=m["label"],
                value=m["value"],
                delta=m.get("delta"),
                delta_color=m.get("delta_color", "normal"),
            )


def render_draw_stats(stats: dict):
    """Pre-draw counts: participants by stage, spots by kind and sector."""
    render_metric_row([
        {"label": "Participants", "value": stats["participants"]},
        {"label": "PcD", "value": stats["pcd"]},
        {"label": "Single Spot", "value": stats["single"]},
        {"label": "Double/Linked", "value": stats["double"]},
        {"label": "Defaulters", "value": stats["defaulters"]},
    ])
    shortfall = stats["requested_spots"] - stats["spots"]
    render_metric_row([
        {"label": "Available Spots", "value": stats["spots"]},
        {"label": "PcD Spots", "value": stats["pcd_spots"]},
        {"label": "Normal Spots", "value": stats["normal_spots"]},
        {
            "label": "Requested Spots",
            "value": stats["requested_spots"],
            "delta": f"{shortfall} short" if shortfall > 0 else None,
            "delta_color": "inverse",
        },
    ])
    if stats["spots_by_sector"]:
        st.caption("Spots by sector: " + ", ".join(f"{k}: {v}" for k, v in stats["spots_by_sector"].items()))


def render_alert_card(message: str, level: str = "warning"):
    """Render an alert card with appropriate styling."""
    if level == "error":
        st.error(message, icon="🔴")
    elif level == "warning":
        st.warning(message, icon="🟡")
    else:
        st.info(message, icon="🔵")
