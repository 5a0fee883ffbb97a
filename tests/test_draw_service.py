"""Tests for the end-to-end draw pipeline."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest

from models.building import Building
from models.participant import Participant
from models.parking_spot import ParkingSpot
from data.store import EntityStore, InMemoryKeyValueStore
from engine.draw_service import run_building_draw, run_building_draw_sync, check_preconditions
from engine.errors import NoAvailableSpotsError, NoBuildingSelectedError, NoParticipantsError
from engine.manual_gate import ScriptedSelectionGate


def assignments(report):
    return [(r.participant_id, r.parking_spot_id) for r in report.session.results]


def make_store(participants=None, spots=None):
    store = EntityStore(InMemoryKeyValueStore())
    building = Building(id="b1", name="Aurora", company="exvagas")
    store.save_building(building)
    store.set_participants("b1", participants if participants is not None else [
        Participant(id="p1", building_id="b1", name="Ana", block="A", unit="101", has_special_needs=True),
        Participant(id="p2", building_id="b1", name="Bruno", block="A", unit="102"),
    ])
    store.set_parking_spots("b1", spots if spots is not None else [
        ParkingSpot(id="s1", building_id="b1", number="1"),
        ParkingSpot(id="s2", building_id="b1", number="2"),
        ParkingSpot(id="s3", building_id="b1", number="3", status="occupied"),
    ])
    return store, building


class TestPreconditions:
    def test_no_building(self):
        store, _ = make_store()
        with pytest.raises(NoBuildingSelectedError):
            check_preconditions(store, None)

    def test_no_participants(self):
        store, building = make_store(participants=[])
        with pytest.raises(NoParticipantsError):
            check_preconditions(store, building)

    def test_only_unavailable_spots(self):
        store, building = make_store(spots=[ParkingSpot(id="s1", building_id="b1", number="1", status="reserved")])
        with pytest.raises(NoAvailableSpotsError):
            check_preconditions(store, building)

    def test_filters_available(self):
        store, building = make_store()
        participants, spots = check_preconditions(store, building)
        assert len(participants) == 2
        assert [s.id for s in spots] == ["s1", "s2"]


class TestRunBuildingDraw:
    def test_saves_publishes_and_audits(self):
        store, building = make_store()
        sink = InMemoryKeyValueStore()
        gate = ScriptedSelectionGate(["s2"])

        report = asyncio.run(run_building_draw(store, building, gate, {"random_seed": 8}, sink=sink))

        assert report.session.seed == 8
        assert store.get_session("b1", report.session.id) == report.session
        assert report.publish.success
        assert sink.get("public/results/b1")["company"] == "exvagas"
        actions = [e.action for e in report.audit]
        assert actions[0] == "draw"
        assert "manual_choice" in actions
        assert actions[-1] == "publish"

    def test_publish_disabled(self):
        store, building = make_store()
        sink = InMemoryKeyValueStore()
        report = run_building_draw_sync(store, building, lottery_config={"publish_results": False}, sink=sink)
        assert report.publish is None
        assert sink.get("public/results/b1") is None

    def test_skip_is_audited(self):
        store, building = make_store()
        report = run_building_draw_sync(store, building, lottery_config={"random_seed": 3})
        skips = [e for e in report.audit if e.action == "manual_skip"]
        assert len(skips) == 1
        assert skips[0].participant_id == "p1"
        assert skips[0].rationale == "manual_skip"

    def test_replay_with_same_seed_and_decisions(self):
        store, building = make_store()
        cfg = {"random_seed": 21, "publish_results": False}
        first = run_building_draw_sync(store, building, ScriptedSelectionGate(["s1"]), cfg)
        second = run_building_draw_sync(store, building, ScriptedSelectionGate(["s1"]), cfg)
        assert assignments(first) == assignments(second)
        assert len(store.list_sessions("b1")) == 2
