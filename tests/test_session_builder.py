"""Tests for session packaging and post-hoc reassignment."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime
import pytest

from models.building import Building
from models.participant import Participant
from models.parking_spot import ParkingSpot
from engine.errors import ResultNotFoundError, SpotUnavailableError
from engine.lottery_engine import run_draw_sync
from engine.session_builder import build_session, default_session_name, reassign_result


def make_building():
    return Building(id="b1", name="Aurora")


def make_spot(sid, number=None, **kwargs):
    return ParkingSpot(id=sid, building_id="b1", number=number or sid, **kwargs)


def make_session(n_participants=2, n_spots=3):
    participants = [Participant(id=f"p{i}", building_id="b1", name=f"P{i}", block="A", unit=str(i))
                    for i in range(n_participants)]
    spots = [make_spot(f"s{i}") for i in range(n_spots)]
    outcome = run_draw_sync(participants, spots, seed=11)
    return build_session(outcome, make_building(), date=datetime(2024, 3, 9, 10, 0))


class TestBuildSession:
    def test_default_name(self):
        assert default_session_name(datetime(2024, 3, 9)) == "Sorteio Setorial 09/03/2024"
        assert default_session_name(datetime(2024, 3, 9), "Draw") == "Draw 09/03/2024"

    def test_session_fields(self):
        session = make_session()
        assert session.id.startswith("sector-session-")
        assert session.building_id == "b1"
        assert session.status == "completed"
        assert session.name == "Sorteio Setorial 09/03/2024"
        assert session.seed == 11
        assert len(session.results) == 2
        assert session.available_spot_ids == ("s0", "s1", "s2")
        assert session.settings.prioritize_special_needs


class TestReassignResult:
    def test_reassign_to_free_spot(self):
        session = make_session()
        target = session.results[0]
        free_id = next(s for s in session.available_spot_ids
                       if s not in {r.parking_spot_id for r in session.results})

        updated = reassign_result(session, target.id, make_spot(free_id, number="99"))

        moved = updated.result_by_id()[target.id]
        assert moved.parking_spot_id == free_id
        assert moved.spot_snapshot.number == "99"
        assert moved.participant_snapshot == target.participant_snapshot
        assert moved.tag == target.tag
        assert session.result_by_id()[target.id].parking_spot_id == target.parking_spot_id

    def test_reassign_back_restores(self):
        session = make_session()
        target = session.results[0]
        original = make_spot(target.parking_spot_id)
        free_id = next(s for s in session.available_spot_ids
                       if s not in {r.parking_spot_id for r in session.results})

        restored = reassign_result(reassign_result(session, target.id, make_spot(free_id)), target.id, original)
        assert restored.result_by_id()[target.id].parking_spot_id == target.parking_spot_id

    def test_spot_held_by_another_result(self):
        session = make_session()
        first, second = session.results
        with pytest.raises(SpotUnavailableError):
            reassign_result(session, first.id, make_spot(second.parking_spot_id))

    def test_unknown_result(self):
        with pytest.raises(ResultNotFoundError):
            reassign_result(make_session(), "result-missing", make_spot("s9"))
