"""Operator form for a pending manual PcD spot choice."""

import streamlit as st
from typing import Optional

from engine.manual_gate import GateDecision, ManualChoiceRequest


def _spot_label(spot) -> str:
    coverage = "coberta" if spot.covered else ("descoberta" if spot.uncovered else "-")
    return f"{spot.number} | {spot.floor} | setor {spot.sector.label} | {coverage}"


def render_manual_choice(request: ManualChoiceRequest) -> Optional[GateDecision]:
    """Render the choice form; returns the operator's decision once submitted."""
    participant = request.participant
    st.warning(
        f"No accessible (PcD) spot is left for **{participant.display_name}**. "
        "Choose one of the remaining spots or skip.",
        icon="♿",
    )
    labels = {s.id: _spot_label(s) for s in request.candidates}

    with st.form(key=f"manual_choice_{request.sequence}"):
        spot_id = st.selectbox(
            f"Spot for {participant.name}",
            options=request.candidate_ids,
            format_func=lambda x: labels.get(x, x),
        )
        col_choose, col_skip = st.columns(2)
        with col_choose:
            chosen = st.form_submit_button("Assign spot", type="primary")
        with col_skip:
            skipped = st.form_submit_button("Skip")

    if chosen and spot_id:
        return GateDecision.chosen(spot_id)
    if skipped:
        return GateDecision.skipped()
    return None
