"""Typed wrapper around st.session_state for application data."""

import streamlit as st
from typing import List, Optional
from datetime import datetime
from models.building import Building
from models.participant import Participant
from models.parking_spot import ParkingSpot
from models.audit import AuditEntry
from data.store import EntityStore, InMemoryKeyValueStore
from config.defaults import DEFAULT_LOTTERY_CONFIG


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    if "backend" not in st.session_state:
        st.session_state["backend"] = InMemoryKeyValueStore()
    defaults = {
        "active_building_id": None,
        "audit_log": [],
        "data_loaded": False,
        "lottery_config": dict(DEFAULT_LOTTERY_CONFIG),
        # In-progress draw, replayed on every rerun until it completes
        "pending_draw": None,
        "last_report": None,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_backend() -> InMemoryKeyValueStore:
    return st.session_state["backend"]


def get_store() -> EntityStore:
    return EntityStore(get_backend())


def get_buildings() -> List[Building]:
    return get_store().list_buildings()


def get_active_building() -> Optional[Building]:
    building_id = st.session_state.get("active_building_id")
    if building_id is None:
        return None
    return get_store().get_building(building_id)


def get_participants() -> List[Participant]:
    building = get_active_building()
    return get_store().get_participants(building.id) if building else []


def get_parking_spots() -> List[ParkingSpot]:
    building = get_active_building()
    return get_store().get_parking_spots(building.id) if building else []


def get_audit_log() -> List[AuditEntry]:
    return st.session_state.get("audit_log", [])


def get_lottery_config() -> dict:
    return st.session_state.get("lottery_config", {})


def get_pending_draw() -> Optional[dict]:
    return st.session_state.get("pending_draw")


def get_last_report():
    return st.session_state.get("last_report")


def is_data_loaded() -> bool:
    return st.session_state.get("data_loaded", False)


# --- Setters ---

def set_active_building_id(building_id: Optional[str]):
    if st.session_state.get("active_building_id") != building_id:
        st.session_state["pending_draw"] = None
        st.session_state["last_report"] = None
    st.session_state["active_building_id"] = building_id


def add_building(building: Building, participants: List[Participant], spots: List[ParkingSpot]):
    store = get_store()
    store.save_building(building)
    store.set_participants(building.id, participants)
    store.set_parking_spots(building.id, spots)
    set_active_building_id(building.id)
    st.session_state["data_loaded"] = True


def set_lottery_config(config: dict):
    st.session_state["lottery_config"] = config


def set_last_report(report):
    st.session_state["last_report"] = report


# --- Pending draw (manual PcD choices) ---

def start_pending_draw(seed: int):
    """Begin a draw: fixes the seed so every rerun replays the same random choices."""
    st.session_state["pending_draw"] = {"seed": seed, "decisions": [], "started_at": datetime.now()}


def record_pending_decision(decision):
    st.session_state["pending_draw"]["decisions"].append(decision)


def clear_pending_draw():
    st.session_state["pending_draw"] = None


# --- Audit ---

def add_audit_entry(
    action: str,
    building_id: str,
    old_value: str,
    new_value: str,
    session_id: Optional[str] = None,
    participant_id: Optional[str] = None,
    rationale: str = "",
):
    entry = AuditEntry(
        timestamp=datetime.now(),
        action=action,
        building_id=building_id,
        session_id=session_id,
        participant_id=participant_id,
        old_value=old_value,
        new_value=new_value,
        rationale=rationale,
    )
    st.session_state["audit_log"].append(entry)


def extend_audit_log(entries: List[AuditEntry]):
    st.session_state["audit_log"].extend(entries)
