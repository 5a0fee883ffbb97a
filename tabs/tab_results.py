"""Tab 3: Results — session history, charts, search, reassignment and publishing."""

import streamlit as st

from components.charts import results_by_stage_bar, results_by_sector_bar, priority_donut, spot_usage_donut
from components.metrics_cards import render_metric_row
from components.tables import render_results_table, render_unfilled_table
from data.report import (
    results_to_dataframe, unfilled_to_dataframe, search_results, stage_summary, sector_summary,
)
from data.session_store import (
    get_active_building, get_store, get_backend, get_participants, get_parking_spots, add_audit_entry,
)
from engine.draw_service import republish
from engine.errors import LotteryError
from engine.explainer import explain_participant
from engine.publisher import build_public_projection, priority_stats, filter_results_by_priority
from engine.session_builder import reassign_result

PRIORITY_FILTERS = {
    "all": "All",
    "special-needs": "PcD",
    "elderly": "Idoso",
    "normal": "Comum",
}


def _render_reassign(session, spots):
    """Point one result at a spot nobody holds in this session."""
    with st.expander("Reassign a result"):
        results = {r.id: r for r in session.results}
        result_id = st.selectbox(
            "Result",
            options=list(results.keys()),
            format_func=lambda rid: f"{results[rid].participant_snapshot.name} -> {results[rid].spot_snapshot.number}",
            key="reassign_result",
        )
        taken = {r.parking_spot_id for r in session.results}
        free = {s.id: s for s in spots if s.id not in taken}
        if not free:
            st.caption("No free spot to reassign to.")
            return
        spot_id = st.selectbox(
            "New spot", options=list(free.keys()),
            format_func=lambda sid: f"{free[sid].number} ({free[sid].floor}, setor {free[sid].sector.label})",
            key="reassign_spot",
        )
        if st.button("Reassign", key="btn_reassign"):
            try:
                updated = reassign_result(session, result_id, free[spot_id])
            except LotteryError as e:
                st.error(str(e))
                return
            get_store().save_session(updated)
            add_audit_entry(
                "reassign", session.building_id, results[result_id].spot_snapshot.number,
                free[spot_id].number, session_id=session.id,
                participant_id=results[result_id].participant_id, rationale="Manual reassignment",
            )
            st.rerun()


def render(sidebar_state):
    """Render the Results tab."""
    st.header("Results")

    building = get_active_building()
    if building is None:
        st.info("Load or select a building in the Data tab first.")
        return

    sessions = get_store().list_sessions(building.id)
    if not sessions:
        st.info("No draw has been run for this building yet.")
        return

    by_id = {s.id: s for s in sessions}
    session_id = st.selectbox(
        "Session", options=list(by_id.keys()),
        format_func=lambda sid: f"{by_id[sid].name} ({len(by_id[sid].results)} results)",
        key="results_session",
    )
    session = by_id[session_id]
    participants = get_participants()
    spots = get_parking_spots()

    render_metric_row([
        {"label": "Assigned Spots", "value": len(session.results)},
        {"label": "Participants", "value": len(session.participant_ids)},
        {"label": "Available Spots", "value": len(session.available_spot_ids)},
        {"label": "Unfilled", "value": len(session.unfilled)},
        {"label": "Seed", "value": session.seed if session.seed is not None else "-"},
    ])

    public = build_public_projection(session, building.name, participants, spots, building.company)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(results_by_stage_bar(stage_summary(session.results)), use_container_width=True)
    with col2:
        st.plotly_chart(priority_donut(priority_stats(public["results"])), use_container_width=True)
    col3, col4 = st.columns(2)
    with col3:
        st.plotly_chart(results_by_sector_bar(sector_summary(session.results)), use_container_width=True)
    with col4:
        st.plotly_chart(
            spot_usage_donut(len(session.results), len(session.available_spot_ids)), use_container_width=True,
        )

    st.subheader("Assignments")
    col_search, col_filter = st.columns([2, 1])
    with col_search:
        query = st.text_input("Search by name, block, unit or spot", key="results_search")
    with col_filter:
        priority = st.selectbox(
            "Priority", options=list(PRIORITY_FILTERS.keys()),
            format_func=lambda k: PRIORITY_FILTERS[k], key="results_priority",
        )
    allowed = {r["id"] for r in filter_results_by_priority(public["results"], priority)}
    shown = [r for r in search_results(session.results, query) if r.id in allowed]
    df = results_to_dataframe(shown)
    render_results_table(df)
    st.download_button(
        "Download CSV", df.to_csv(index=False).encode("utf-8"),
        file_name=f"{session.name.replace('/', '-')}.csv", mime="text/csv",
    )

    st.subheader("Unfilled Requests")
    render_unfilled_table(unfilled_to_dataframe(session))

    with st.expander("Explain a participant"):
        names = {r.participant_id: r.participant_snapshot.name for r in session.results}
        names.update({u.participant_id: u.participant_name for u in session.unfilled})
        if names:
            pid = st.selectbox("Participant", options=list(names.keys()),
                               format_func=lambda x: names[x], key="explain_participant")
            for line in explain_participant(pid, session.results, session.unfilled):
                st.write(f"- {line}")

    _render_reassign(session, spots)

    if st.button("Publish results", key="btn_publish"):
        outcome = republish(session, building, participants, spots, get_backend())
        add_audit_entry(
            "publish", building.id, "", "published" if outcome.success else "failed",
            session_id=session.id, rationale=outcome.error or "",
        )
        if outcome.success:
            st.success("Results published.")
        else:
            st.error(f"Publish failed: {outcome.error}")
