"""Styled dataframe display helpers."""

import streamlit as st
import pandas as pd
from typing import Optional


def render_styled_table(
    df: pd.DataFrame,
    title: Optional[str] = None,
    height: Optional[int] = None,
    use_container_width: bool = True,
):
    """Render a styled, non-editable dataframe."""
    if title:
        st.subheader(title)
    st.dataframe(df, height=height, use_container_width=use_container_width)


def render_results_table(df: pd.DataFrame, tag_column: str = "Tag"):
    """Render draw results with manual, relaxed and fallback tags highlighted."""
    def color_tag(val):
        text = str(val)
        if text == "pcd-manual-selection":
            return "background-color: #ffcccc; color: #cc0000; font-weight: bold"
        elif text.endswith("-relaxed"):
            return "background-color: #fff3cd; color: #856404"
        elif text.endswith("-any") or text in ("random", "defaulter"):
            return "color: #6c757d"
        return ""

    if tag_column in df.columns:
        styled = df.style.map(color_tag, subset=[tag_column])
        st.dataframe(styled, use_container_width=True)
    else:
        st.dataframe(df, use_container_width=True)


def render_unfilled_table(df: pd.DataFrame):
    """Render unfilled requests, manual skips in amber and shortages in red."""
    def color_reason(val):
        if val == "no_spots_left":
            return "background-color: #ffcccc; color: #cc0000; font-weight: bold"
        elif val in ("manual_skip", "gate_timeout", "invalid_choice"):
            return "background-color: #fff3cd; color: #856404; font-weight: bold"
        return ""

    if df.empty:
        st.success("Every requested spot was assigned.")
    elif "Reason" in df.columns:
        st.dataframe(df.style.map(color_reason, subset=["Reason"]), use_container_width=True)
    else:
        st.dataframe(df, use_container_width=True)
