"""Tab 2: Draw — pre-draw stats, run the sector draw, answer manual PcD choices."""

import asyncio
import logging
import streamlit as st
from datetime import datetime

from components.manual_choice import render_manual_choice
from components.metrics_cards import render_draw_stats, render_alert_card
from data.report import draw_stats
from data.session_store import (
    get_active_building, get_participants, get_parking_spots, get_store, get_backend,
    get_lottery_config, get_pending_draw, start_pending_draw, record_pending_decision,
    clear_pending_draw, set_last_report, extend_audit_log,
)
from engine.draw_service import run_building_draw
from engine.errors import DrawPreconditionError, ManualChoicePending
from engine.explainer import summarize_outcome
from engine.manual_gate import GateDecision, ScriptedSelectionGate
from engine.random_source import RandomSource

logger = logging.getLogger(__name__)


def _decision_with_timeout(decision: GateDecision, pending: dict, timeout) -> GateDecision:
    """An answer given after the configured timeout counts as a timed-out skip."""
    opened = pending.get("request_opened_at")
    if timeout and opened and (datetime.now() - opened).total_seconds() > timeout:
        return GateDecision.timed_out()
    return decision


def _continue_draw(building, pending: dict):
    """Replay the draw with every recorded decision; stops at the next open choice."""
    cfg = dict(get_lottery_config())
    cfg["random_seed"] = pending["seed"]
    gate = ScriptedSelectionGate(pending["decisions"])
    try:
        report = asyncio.run(run_building_draw(get_store(), building, gate, cfg, sink=get_backend()))
    except ManualChoicePending as e:
        if pending.get("request_sequence") != e.request.sequence:
            pending["request_sequence"] = e.request.sequence
            pending["request_opened_at"] = datetime.now()
        decision = render_manual_choice(e.request)
        if decision is not None:
            decision = _decision_with_timeout(decision, pending, cfg.get("manual_gate_timeout_seconds"))
            record_pending_decision(decision)
            st.rerun()
        return
    except DrawPreconditionError as e:
        clear_pending_draw()
        st.error(str(e))
        return

    clear_pending_draw()
    set_last_report(report)
    extend_audit_log(report.audit)
    st.success(f"Draw complete: **{report.session.name}**")
    for line in summarize_outcome(report.outcome):
        st.write(f"- {line}")
    if report.publish is not None and not report.publish.success:
        render_alert_card(f"Results saved but not published: {report.publish.error}", "warning")
    st.caption("See the Results tab for the full list.")


def render(sidebar_state):
    """Render the Draw tab."""
    st.header("Sector Draw")

    building = get_active_building()
    if building is None:
        st.info("Load or select a building in the Data tab first.")
        return

    participants = get_participants()
    spots = get_parking_spots()
    render_draw_stats(draw_stats(participants, spots))
    st.divider()

    pending = get_pending_draw()
    if pending is None:
        st.caption(
            "Stages: 1) PcD, 2) single spot by sector, 3) double/linked, "
            "4) random remainder, 5) defaulters."
        )
        if st.button("Run draw", type="primary", key="btn_run_draw"):
            seed = RandomSource(sidebar_state.random_seed).seed
            logger.info("Operator started a draw for %s with seed %s", building.id, seed)
            start_pending_draw(seed)
            _continue_draw(building, get_pending_draw())
        return

    st.info(f"Draw in progress (seed {pending['seed']}, {len(pending['decisions'])} manual decision(s) so far)")
    if st.button("Cancel draw", key="btn_cancel_draw"):
        clear_pending_draw()
        st.rerun()
    _continue_draw(building, pending)
