"""Draw orchestration — load a building, run the engine, save and publish."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from models.audit import AuditEntry
from models.building import Building
from models.lottery import LotterySession, UnfilledReason
from engine.errors import NoAvailableSpotsError, NoBuildingSelectedError, NoParticipantsError
from engine.lottery_engine import AllocationOutcome, SectorLotteryEngine
from engine.manual_gate import ManualSelectionGate, SkipSelectionGate
from engine.publisher import PublishResult, publish_results
from engine.random_source import RandomSource
from engine.session_builder import build_session, default_session_name
from config.defaults import DEFAULT_LOTTERY_CONFIG, SESSION_NAME_PREFIX, DEFAULT_COMPANY, TAG_PCD_MANUAL

logger = logging.getLogger(__name__)


@dataclass
class DrawReport:
    session: LotterySession
    outcome: AllocationOutcome
    publish: Optional[PublishResult] = None
    audit: List[AuditEntry] = field(default_factory=list)


def check_preconditions(store, building: Optional[Building]):
    """Load draw inputs, rejecting an unusable draw before the engine starts."""
    if building is None:
        raise NoBuildingSelectedError()
    participants = store.get_participants(building.id)
    if not participants:
        raise NoParticipantsError(building.id)
    spots = [s for s in store.get_parking_spots(building.id) if s.is_available]
    if not spots:
        raise NoAvailableSpotsError(building.id)
    return participants, spots


def build_audit_entries(session: LotterySession, when: Optional[datetime] = None) -> List[AuditEntry]:
    """Audit trail of a draw: the draw itself plus every manual decision."""
    when = when or datetime.now()
    entries = [AuditEntry(
        timestamp=when,
        action="draw",
        building_id=session.building_id,
        session_id=session.id,
        participant_id=None,
        old_value="",
        new_value=f"{len(session.results)} results",
        rationale=f"seed={session.seed}",
    )]
    for r in session.results:
        if r.tag == TAG_PCD_MANUAL:
            entries.append(AuditEntry(
                when, "manual_choice", session.building_id, session.id, r.participant_id,
                "", r.parking_spot_id, "No PcD spot left; operator chose a spot",
            ))
    for u in session.unfilled:
        if u.reason in (UnfilledReason.MANUAL_SKIP, UnfilledReason.GATE_TIMEOUT):
            entries.append(AuditEntry(
                when, "manual_skip", session.building_id, session.id, u.participant_id,
                "", "", u.reason.value,
            ))
    return entries


async def run_building_draw(
    store,
    building: Optional[Building],
    gate: Optional[ManualSelectionGate] = None,
    lottery_config: Optional[dict] = None,
    sink=None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> DrawReport:
    """Full draw pipeline: preconditions, engine, session, save, publish."""
    cfg = lottery_config or {}
    participants, spots = check_preconditions(store, building)

    engine = SectorLotteryEngine(
        gate=gate or SkipSelectionGate(),
        random_source=RandomSource(cfg.get("random_seed", DEFAULT_LOTTERY_CONFIG["random_seed"])),
        building=building,
        should_cancel=should_cancel,
    )
    outcome = await engine.run(participants, spots)

    now = datetime.now()
    prefix = cfg.get("session_name_prefix", SESSION_NAME_PREFIX)
    session = build_session(outcome, building, name=default_session_name(now, prefix), date=now)
    store.save_session(session)
    report = DrawReport(session=session, outcome=outcome, audit=build_audit_entries(session, now))

    if sink is not None and cfg.get("publish_results", DEFAULT_LOTTERY_CONFIG["publish_results"]):
        report.publish = republish(session, building, participants, spots, sink)
        report.audit.append(AuditEntry(
            now, "publish", building.id, session.id, None, "",
            "published" if report.publish.success else "failed",
            report.publish.error or "",
        ))
    return report


def run_building_draw_sync(store, building, gate=None, lottery_config=None, sink=None) -> DrawReport:
    return asyncio.run(run_building_draw(store, building, gate, lottery_config, sink))


def republish(session: LotterySession, building: Building, participants, spots, sink) -> PublishResult:
    """Publish (or re-publish) a completed session; never raises."""
    result = publish_results(
        session, building.name, participants, spots,
        building.company or DEFAULT_COMPANY, sink,
    )
    if not result.success:
        logger.warning("Session %s saved but not published: %s", session.id, result.error)
    return result
