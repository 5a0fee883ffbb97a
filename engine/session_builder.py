"""Package a finished draw into a LotterySession and support post-hoc edits."""

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional

from models.building import Building
from models.lottery import LotterySession, SessionSettings
from models.parking_spot import ParkingSpot
from engine.context import snapshot_spot
from engine.errors import ResultNotFoundError, SpotUnavailableError
from engine.lottery_engine import AllocationOutcome
from config.defaults import SESSION_NAME_PREFIX, DEFAULT_SESSION_SETTINGS


def default_session_name(when: datetime, prefix: str = SESSION_NAME_PREFIX) -> str:
    return f"{prefix} {when.strftime('%d/%m/%Y')}"


def build_session(
    outcome: AllocationOutcome,
    building: Building,
    name: Optional[str] = None,
    settings: Optional[SessionSettings] = None,
    date: Optional[datetime] = None,
) -> LotterySession:
    """Create the immutable, completed session record for a draw."""
    when = date or datetime.now()
    return LotterySession(
        id=f"sector-session-{uuid.uuid4().hex}",
        building_id=building.id,
        name=name or default_session_name(when),
        date=when,
        participant_ids=tuple(outcome.participant_ids),
        available_spot_ids=tuple(outcome.available_spot_ids),
        results=tuple(outcome.results),
        unfilled=tuple(outcome.unfilled),
        status="completed",
        settings=settings or SessionSettings(**DEFAULT_SESSION_SETTINGS),
        seed=outcome.seed,
    )


def reassign_result(session: LotterySession, result_id: str, new_spot: ParkingSpot) -> LotterySession:
    """Return a copy of the session with one result pointed at another spot.

    The spot snapshot is refreshed; the participant snapshot, priority and
    stage tag are kept. Reassigning back to the original spot undoes the edit.
    """
    by_id = session.result_by_id()
    if result_id not in by_id:
        raise ResultNotFoundError(result_id)

    taken = {r.parking_spot_id for r in session.results if r.id != result_id}
    if new_spot.id in taken:
        raise SpotUnavailableError(new_spot.id)

    updated = replace(by_id[result_id], parking_spot_id=new_spot.id, spot_snapshot=snapshot_spot(new_spot))
    return session.with_results(updated if r.id == result_id else r for r in session.results)
