"""Global sidebar controls for building selection and draw settings."""

import streamlit as st
from dataclasses import dataclass
from typing import Optional
from data.session_store import (
    get_buildings, get_active_building, set_active_building_id,
    get_lottery_config, set_lottery_config, is_data_loaded,
)


@dataclass
class SidebarState:
    building_id: Optional[str]
    random_seed: Optional[int]
    manual_gate_timeout_seconds: Optional[float]
    publish_results: bool


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    with st.sidebar:
        st.title("Parking Lottery")
        st.divider()

        buildings = get_buildings()
        names = {b.id: b.name for b in buildings}
        building_ids = list(names.keys())
        active = get_active_building()

        selected_id = None
        if building_ids:
            current_id = active.id if active and active.id in building_ids else building_ids[0]
            selected_id = st.selectbox(
                "Building",
                options=building_ids,
                format_func=lambda x: names.get(x, x),
                index=building_ids.index(current_id),
            )
            set_active_building_id(selected_id)

        st.divider()
        cfg = dict(get_lottery_config())

        seed_text = st.text_input(
            "Random seed (blank = random)",
            value="" if cfg.get("random_seed") is None else str(cfg["random_seed"]),
            key="sidebar_seed",
        )
        seed = int(seed_text) if seed_text.strip().isdigit() else None

        timeout = st.number_input(
            "Manual choice timeout (s, 0 = wait)",
            min_value=0, max_value=3600,
            value=int(cfg.get("manual_gate_timeout_seconds") or 0),
            key="sidebar_timeout",
        )
        publish = st.checkbox(
            "Publish results after the draw",
            value=cfg.get("publish_results", True),
            key="sidebar_publish",
        )

        cfg.update({
            "random_seed": seed,
            "manual_gate_timeout_seconds": timeout or None,
            "publish_results": publish,
        })
        set_lottery_config(cfg)

        st.divider()
        if is_data_loaded():
            st.success("Data loaded")
        else:
            st.warning("No data loaded — go to the Data tab")

    return SidebarState(
        building_id=selected_id,
        random_seed=seed,
        manual_gate_timeout_seconds=timeout or None,
        publish_results=publish,
    )
