"""Tests for the public results projection and publishing."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime
from dataclasses import replace

from models.building import Building
from models.participant import Participant
from models.parking_spot import ParkingSpot
from data.store import InMemoryKeyValueStore
from engine.lottery_engine import run_draw_sync
from engine.publisher import (
    normalize_priority, priority_label, priority_stats, filter_results_by_priority,
    build_public_projection, publish_results,
)
from engine.session_builder import build_session


def make_participants():
    return [
        Participant(id="p1", building_id="b1", name="Ana", block="A", unit="101", has_special_needs=True),
        Participant(id="p2", building_id="b1", name="Bruno", block="A", unit="102", is_elderly=True),
        Participant(id="p3", building_id="b1", name="Carla", block="B", unit="201", is_up_to_date=True),
    ]


def make_spots():
    return [
        ParkingSpot(id="pcd", building_id="b1", number="1", type=("Vaga PcD",)),
        ParkingSpot(id="s2", building_id="b1", number="2", is_covered=True),
        ParkingSpot(id="s3", building_id="b1", number="3", type=["Vaga Descoberta"]),
    ]


def make_session():
    outcome = run_draw_sync(make_participants(), make_spots(), seed=4)
    return build_session(outcome, Building(id="b1", name="Aurora"), name="Sorteio Teste",
                         date=datetime(2024, 5, 1, 9, 30))


class FailingSink:
    def set(self, key, value):
        raise ConnectionError("backend offline")


class TestPriorityHelpers:
    def test_normalize(self):
        assert normalize_priority("up-to-date") == "normal"
        assert normalize_priority("special-needs") == "special-needs"
        assert normalize_priority("whatever") == "normal"

    def test_labels(self):
        assert priority_label("special-needs") == "PcD"
        assert priority_label("elderly") == "Idoso"
        assert priority_label("up-to-date") == "Comum"

    def test_stats_and_filter(self):
        results = [{"priority": "special-needs"}, {"priority": "up-to-date"}, {"priority": "normal"}]
        assert priority_stats(results) == {"pcd": 1, "idoso": 0, "comum": 2}
        assert len(filter_results_by_priority(results, "comum")) == 2
        assert len(filter_results_by_priority(results, "special-needs")) == 1
        assert len(filter_results_by_priority(results, "all")) == 3


class TestPublicProjection:
    def test_projection_shape(self):
        session = make_session()
        data = build_public_projection(session, "Aurora", make_participants(), make_spots(),
                                       company="exvagas", now=datetime(2024, 5, 1, 10, 0))
        assert data["building"] == "b1"
        assert data["buildingName"] == "Aurora"
        assert data["sessionName"] == "Sorteio Teste"
        assert data["totalParticipants"] == 3
        assert data["totalSpots"] == 3
        assert data["company"] == "exvagas"
        assert data["publishedAt"] == "2024-05-01T10:00:00"
        assert len(data["results"]) == 3
        row = data["results"][0]
        assert set(row) >= {"participantSnapshot", "spotSnapshot", "priority", "tag", "timestamp"}
        assert isinstance(row["spotSnapshot"]["type"], list)

    def test_projection_uses_snapshots_not_live_entities(self):
        session = make_session()
        renamed = [replace(p, name="Changed") for p in make_participants()]
        data = build_public_projection(session, "Aurora", renamed, make_spots())
        assert "Changed" not in {r["participantSnapshot"]["name"] for r in data["results"]}

    def test_no_company_key_when_missing(self):
        data = build_public_projection(make_session(), "Aurora", [], [])
        assert "company" not in data
        assert data["totalParticipants"] == 3


class TestPublishResults:
    def test_writes_to_sink(self):
        sink = InMemoryKeyValueStore()
        result = publish_results(make_session(), "Aurora", make_participants(), make_spots(), "exvagas", sink)
        assert result.success
        assert sink.get("public/results/b1")["buildingName"] == "Aurora"

    def test_sink_failure_is_reported_not_raised(self):
        result = publish_results(make_session(), "Aurora", make_participants(), make_spots(), None, FailingSink())
        assert not result.success
        assert "backend offline" in result.error

    def test_empty_session_refused(self):
        session = make_session().with_results([])
        result = publish_results(session, "Aurora", [], [], None, InMemoryKeyValueStore())
        assert not result.success
