"""Tab 1: Data — building setup, participant and spot upload, audit trail."""

import re
import streamlit as st
import pandas as pd

from components.tables import render_styled_table
from data.loader import load_file, load_multi_sheet_excel, parse_participants, parse_spots
from data.validator import validate_participants, validate_spots
from data.sample_data import (
    generate_participants_df, generate_spots_df,
    SAMPLE_BUILDING_ID, SAMPLE_BUILDING_NAME, SAMPLE_SECTOR_PROXIMITY,
)
from data.report import participants_to_dataframe, spots_to_dataframe
from data.session_store import (
    add_building, add_audit_entry, get_audit_log, get_participants, get_parking_spots,
    get_active_building,
)
from models.building import Building


def _building_id(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "building"


def _parse_proximity(text: str) -> dict:
    """'A: A, B, C' per line -> {'A': ['A', 'B', 'C']}."""
    mapping = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        home, nearby = line.split(":", 1)
        sectors = [s.strip() for s in nearby.split(",") if s.strip()]
        if home.strip() and sectors:
            mapping[home.strip()] = sectors
    return mapping


def _load_and_validate(building: Building, participants_df: pd.DataFrame, spots_df: pd.DataFrame):
    """Validate and store uploaded data."""
    errors = []
    warnings = []
    for r in [validate_participants(participants_df), validate_spots(spots_df)]:
        errors.extend(r.errors)
        warnings.extend(r.warnings)

    if errors:
        for e in errors:
            st.error(e)
        return False

    for w in warnings:
        st.warning(w)

    participants = parse_participants(participants_df, building.id)
    spots = parse_spots(spots_df, building.id)
    add_building(building, participants, spots)
    add_audit_entry(
        "upload", building.id, "", f"{len(participants)} participants, {len(spots)} spots",
        rationale="Data upload",
    )
    st.success(f"Data loaded for {building.name}: {len(participants)} participants, {len(spots)} spots")
    return True


def render(sidebar_state):
    """Render the Data tab."""
    st.header("Building Data")

    st.subheader("Building")
    col_name, col_company = st.columns(2)
    with col_name:
        name = st.text_input("Building name", value=SAMPLE_BUILDING_NAME, key="data_building_name")
    with col_company:
        company = st.text_input("Company", value="", key="data_company")
    proximity_text = st.text_area(
        "Sector proximity (one line per home sector, e.g. 'A: A, B, C')",
        value="\n".join(f"{k}: {', '.join(v)}" for k, v in SAMPLE_SECTOR_PROXIMITY.items()),
        key="data_proximity",
    )

    st.subheader("Upload")
    upload_mode = st.radio(
        "Upload mode",
        ["Single Excel file (2 tabs)", "Two separate files"],
        horizontal=True,
        key="upload_mode",
    )

    def building_from_form() -> Building:
        return Building(
            id=_building_id(name),
            name=name,
            company=company or None,
            sector_proximity=_parse_proximity(proximity_text),
        )

    if upload_mode == "Single Excel file (2 tabs)":
        st.caption("Upload one `.xlsx` file with sheets named **Participants** and **Spots** "
                   "(also accepts 'Participantes' and 'Vagas').")
        single_file = st.file_uploader("Excel workbook with 2 tabs", type=["xlsx"], key="upload_single")
        if st.button("Upload & Validate", type="primary", key="btn_upload_single"):
            if single_file:
                try:
                    p_df, s_df = load_multi_sheet_excel(single_file)
                    _load_and_validate(building_from_form(), p_df, s_df)
                except ValueError as e:
                    st.error(f"Error loading file: {e}")
            else:
                st.warning("Please upload an Excel file.")
    else:
        col_p, col_s = st.columns(2)
        with col_p:
            p_file = st.file_uploader("Participants (CSV/XLSX)", type=["csv", "xlsx"], key="upload_participants")
        with col_s:
            s_file = st.file_uploader("Spots (CSV/XLSX)", type=["csv", "xlsx"], key="upload_spots")
        if st.button("Upload & Validate", type="primary", key="btn_upload_files"):
            if p_file and s_file:
                try:
                    _load_and_validate(building_from_form(), load_file(p_file), load_file(s_file))
                except ValueError as e:
                    st.error(f"Error loading file: {e}")
            else:
                st.warning("Please upload both files.")

    if st.button("Load sample data", key="btn_sample"):
        sample = Building(
            id=SAMPLE_BUILDING_ID,
            name=SAMPLE_BUILDING_NAME,
            company=company or None,
            sector_proximity=dict(SAMPLE_SECTOR_PROXIMITY),
        )
        _load_and_validate(sample, generate_participants_df(), generate_spots_df())

    building = get_active_building()
    if building is not None:
        st.divider()
        render_styled_table(participants_to_dataframe(get_participants()), title=f"Participants — {building.name}")
        render_styled_table(spots_to_dataframe(get_parking_spots()), title="Parking Spots")

    st.divider()
    st.subheader("Audit Trail")
    log = get_audit_log()
    if log:
        render_styled_table(pd.DataFrame([{
            "Time": e.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            "Action": e.action,
            "Building": e.building_id,
            "Session": e.session_id or "",
            "Participant": e.participant_id or "",
            "Old": e.old_value,
            "New": e.new_value,
            "Rationale": e.rationale,
        } for e in reversed(log)]))
    else:
        st.caption("No actions recorded yet.")
