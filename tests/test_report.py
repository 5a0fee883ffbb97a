"""Tests for result reports, search and draw explanations."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime

from models.lottery import Stage, UnfilledReason, UnfilledRequest
from models.participant import Participant
from models.parking_spot import ParkingSpot
from data.report import (
    draw_stats, results_to_dataframe, search_results, stage_summary, sector_summary,
    unfilled_to_dataframe,
)
from engine.explainer import explain_tag, explain_participant, explain_unfilled, summarize_outcome
from engine.lottery_engine import run_draw_sync
from engine.session_builder import build_session
from models.building import Building


def make_participants():
    return [
        Participant(id="p1", building_id="b1", name="Ana Souza", block="A", unit="101", has_special_needs=True),
        Participant(id="p2", building_id="b1", name="Bruno", block="B", unit="202", number_of_spots=2, sector="B"),
        Participant(id="p3", building_id="b1", name="Carla", block="C", unit="303", is_up_to_date=False),
        Participant(id="p4", building_id="b1", name="Diego", block="A", unit="104", sector="A"),
    ]


def make_spots():
    return [
        ParkingSpot(id="pcd", building_id="b1", number="P1", sector="A", type=("Vaga PcD",)),
        ParkingSpot(id="a1", building_id="b1", number="A1", sector="A"),
        ParkingSpot(id="b1", building_id="b1", number="B1", sector="B"),
        ParkingSpot(id="b2", building_id="b1", number="B2", sector="B"),
        ParkingSpot(id="x", building_id="b1", number="X", sector="B", status="occupied"),
    ]


class TestDrawStats:
    def test_counts(self):
        stats = draw_stats(make_participants(), make_spots())
        assert stats["participants"] == 4
        assert stats["pcd"] == 1
        assert stats["single"] == 1
        assert stats["double"] == 1
        assert stats["defaulters"] == 1
        assert stats["requested_spots"] == 5
        assert stats["spots"] == 4
        assert stats["pcd_spots"] == 1
        assert stats["normal_spots"] == 3
        assert stats["spots_by_sector"] == {"A": 2, "B": 2}


class TestResultReports:
    def test_full_draw_tables(self):
        outcome = run_draw_sync(make_participants(), make_spots(), seed=2)
        df = results_to_dataframe(outcome.results)
        assert len(df) == 4
        assert set(df["Name"]) == {"Ana Souza", "Bruno", "Diego"}
        assert df.loc[df["Name"] == "Ana Souza", "Priority"].iloc[0] == "PcD"

        stages = stage_summary(outcome.results)
        assert list(stages["Assigned"]) == [1, 1, 2, 0, 0]
        assert sector_summary(outcome.results)["Assigned"].sum() == 4

    def test_empty_results_keep_columns(self):
        df = results_to_dataframe([])
        assert df.empty
        assert "Spot" in df.columns

    def test_search(self):
        outcome = run_draw_sync(make_participants(), make_spots(), seed=2)
        assert {r.participant_id for r in search_results(outcome.results, "souza")} == {"p1"}
        assert {r.participant_id for r in search_results(outcome.results, "202")} == {"p2"}
        assert len(search_results(outcome.results, "")) == 4

    def test_unfilled_table(self):
        outcome = run_draw_sync(make_participants(), make_spots(), seed=2)
        session = build_session(outcome, Building(id="b1", name="Aurora"))
        df = unfilled_to_dataframe(session)
        assert "Carla" in set(df["Name"])
        assert set(df["Reason"]) == {"no_spots_left"}


class TestExplainer:
    def test_tags(self):
        assert "PcD" in explain_tag("pcd-priority")
        assert "by hand" in explain_tag("pcd-manual-selection")
        assert "sector A" in explain_tag("unique-sector-A")
        assert "coverage" in explain_tag("double-sector-B-relaxed")
        assert "any" in explain_tag("unique-any")

    def test_participant_story(self):
        outcome = run_draw_sync(make_participants(), make_spots(), seed=2)
        lines = explain_participant("p2", outcome.results, outcome.unfilled)
        assert len(lines) == 2
        assert all(line.startswith("Stage 3") for line in lines)
        assert explain_participant("nobody", outcome.results) == ["Participant was not reached by any stage."]

    def test_unfilled_text(self):
        entry = UnfilledRequest("p1", "Ana", Stage.PCD, UnfilledReason.GATE_TIMEOUT, datetime(2024, 1, 1))
        assert "timed out" in explain_unfilled(entry)

    def test_summary(self):
        outcome = run_draw_sync(make_participants(), make_spots(), seed=2)
        lines = summarize_outcome(outcome)
        assert lines[0].startswith("4 spot(s) assigned out of 4 available")
        assert any("short of" in line for line in lines)
