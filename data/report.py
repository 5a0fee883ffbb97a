"""Tabular views over draw inputs and results."""

from collections import Counter
from typing import Dict, List, Sequence

import pandas as pd

from models.lottery import LotteryResult, LotterySession, Stage
from models.participant import Participant
from models.parking_spot import ParkingSpot
from engine.classification import (
    is_defaulter, qualifies_for_pcd_stage, qualifies_for_single_stage,
    qualifies_for_double_stage, spot_sector,
)
from engine.explainer import STAGE_TITLES, explain_tag, explain_unfilled
from engine.publisher import priority_label

RESULT_COLUMNS = [
    "Name", "Block", "Unit", "Spot", "Floor", "Sector", "Covered",
    "Priority", "Stage", "Tag", "How",
]


def draw_stats(participants: Sequence[Participant], spots: Sequence[ParkingSpot]) -> Dict[str, object]:
    """Pre-draw counts shown before the operator starts a draw."""
    available = [s for s in spots if s.is_available]
    pcd_spots = [s for s in available if s.is_pcd]
    return {
        "participants": len(participants),
        "pcd": sum(1 for p in participants if qualifies_for_pcd_stage(p)),
        "single": sum(1 for p in participants if qualifies_for_single_stage(p)),
        "double": sum(1 for p in participants if qualifies_for_double_stage(p)),
        "defaulters": sum(1 for p in participants if is_defaulter(p)),
        "requested_spots": sum(p.number_of_spots for p in participants),
        "spots": len(available),
        "pcd_spots": len(pcd_spots),
        "normal_spots": len(available) - len(pcd_spots),
        "spots_by_sector": dict(sorted(Counter(spot_sector(s).label for s in available).items())),
    }


def _result_row(result: LotteryResult) -> dict:
    p = result.participant_snapshot
    s = result.spot_snapshot
    return {
        "Name": p.name,
        "Block": p.block,
        "Unit": p.unit,
        "Spot": s.number,
        "Floor": s.floor,
        "Sector": s.sector or "-",
        "Covered": "Yes" if s.is_covered else ("No" if s.is_uncovered else "-"),
        "Priority": priority_label(result.priority),
        "Stage": STAGE_TITLES[result.stage],
        "Tag": result.tag,
        "How": explain_tag(result.tag),
    }


def results_to_dataframe(results: Sequence[LotteryResult]) -> pd.DataFrame:
    """One row per assigned spot, ordered by block, unit and spot number."""
    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    df = pd.DataFrame([_result_row(r) for r in results], columns=RESULT_COLUMNS)
    return df.sort_values(["Block", "Unit", "Spot"]).reset_index(drop=True)


def unfilled_to_dataframe(session: LotterySession) -> pd.DataFrame:
    rows = [{
        "Name": u.participant_name,
        "Stage": STAGE_TITLES[u.stage],
        "Reason": u.reason.value,
        "Detail": explain_unfilled(u),
    } for u in session.unfilled]
    return pd.DataFrame(rows, columns=["Name", "Stage", "Reason", "Detail"])


def search_results(results: Sequence[LotteryResult], query: str) -> List[LotteryResult]:
    """Case-insensitive match on name, block, unit or spot number."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(results)
    matches = []
    for r in results:
        p = r.participant_snapshot
        haystack = (p.name, p.block, p.unit, r.spot_snapshot.number)
        if any(needle in str(value).lower() for value in haystack):
            matches.append(r)
    return matches


def stage_summary(results: Sequence[LotteryResult]) -> pd.DataFrame:
    """Assignments per stage, including stages that assigned nothing."""
    counts = Counter(r.stage for r in results)
    relaxed = Counter(r.stage for r in results if r.relaxed)
    rows = [{
        "Stage": STAGE_TITLES[stage],
        "Assigned": counts.get(stage, 0),
        "Relaxed": relaxed.get(stage, 0),
    } for stage in Stage]
    return pd.DataFrame(rows, columns=["Stage", "Assigned", "Relaxed"])


def sector_summary(results: Sequence[LotteryResult]) -> pd.DataFrame:
    counts = Counter(r.spot_snapshot.sector or "-" for r in results)
    rows = [{"Sector": sector, "Assigned": n} for sector, n in sorted(counts.items())]
    return pd.DataFrame(rows, columns=["Sector", "Assigned"])


def participants_to_dataframe(participants: Sequence[Participant]) -> pd.DataFrame:
    rows = [{
        "Name": p.name,
        "Block": p.block,
        "Unit": p.unit,
        "Sector": p.sector.label,
        "PcD": p.has_special_needs,
        "Elderly": p.is_elderly,
        "Defaulter": is_defaulter(p),
        "Spots": p.number_of_spots,
        "Preferred Sectors": ", ".join(s.label for s in p.preferred_sectors),
    } for p in participants]
    return pd.DataFrame(rows)


def spots_to_dataframe(spots: Sequence[ParkingSpot]) -> pd.DataFrame:
    rows = [{
        "Number": s.number,
        "Floor": s.floor,
        "Sector": s.sector.label,
        "Type": ", ".join(s.type),
        "Size": s.size,
        "Covered": s.covered,
        "Status": s.status,
    } for s in spots]
    return pd.DataFrame(rows)
