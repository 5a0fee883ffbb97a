"""Public, read-only projection of a finished draw.

Publishing never raises: failures come back as PublishResult(success=False)
and the completed session stays valid for a later retry.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from models.lottery import LotteryResult, LotterySession
from models.participant import Participant
from models.parking_spot import ParkingSpot
from config.defaults import (
    PUBLIC_RESULTS_KEY, PRIORITY_SPECIAL_NEEDS, PRIORITY_ELDERLY, PRIORITY_NORMAL,
    PRIORITY_LABELS,
)

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    success: bool
    error: Optional[str] = None
    data: Optional[dict] = None


def normalize_priority(priority: str) -> str:
    """Fold 'up-to-date' (and anything unknown) into 'normal'."""
    if priority in (PRIORITY_SPECIAL_NEEDS, PRIORITY_ELDERLY):
        return priority
    return PRIORITY_NORMAL


def priority_label(priority: str) -> str:
    return PRIORITY_LABELS[normalize_priority(priority)]


def priority_stats(results: Sequence[dict]) -> Dict[str, int]:
    """Count public results as PcD / Idoso / Comum."""
    counts = {PRIORITY_SPECIAL_NEEDS: 0, PRIORITY_ELDERLY: 0, PRIORITY_NORMAL: 0}
    for r in results:
        counts[normalize_priority(r.get("priority", PRIORITY_NORMAL))] += 1
    return {
        "pcd": counts[PRIORITY_SPECIAL_NEEDS],
        "idoso": counts[PRIORITY_ELDERLY],
        "comum": counts[PRIORITY_NORMAL],
    }


def filter_results_by_priority(results: Sequence[dict], priority_filter: str) -> List[dict]:
    """Filter public results: 'all', 'special-needs', 'elderly', 'normal' or 'comum'."""
    if priority_filter == "all":
        return list(results)
    wanted = PRIORITY_NORMAL if priority_filter == "comum" else priority_filter
    return [r for r in results if normalize_priority(r.get("priority", PRIORITY_NORMAL)) == wanted]


def _public_result(result: LotteryResult) -> dict:
    spot = asdict(result.spot_snapshot)
    spot["type"] = list(spot["type"])
    return {
        "id": result.id,
        "participantId": result.participant_id,
        "parkingSpotId": result.parking_spot_id,
        "participantSnapshot": asdict(result.participant_snapshot),
        "spotSnapshot": spot,
        "priority": result.priority,
        "tag": result.tag,
        "timestamp": result.timestamp.isoformat(),
    }


def validate_session_for_publish(session: LotterySession) -> PublishResult:
    if not session.building_id:
        return PublishResult(False, "Session has no building id")
    if not session.results:
        return PublishResult(False, "No results to publish")
    return PublishResult(True)


def build_public_projection(
    session: LotterySession,
    building_name: str,
    participants: Sequence[Participant],
    spots: Sequence[ParkingSpot],
    company: Optional[str] = None,
    published_by: str = "system",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Denormalize a session into the public results document (PublicLotteryData).

    Result rows come from the frozen snapshots, never from the live entities.
    """
    data = {
        "building": session.building_id,
        "buildingName": building_name or "Condomínio",
        "sessionName": session.name or "Sorteio",
        "date": session.date.isoformat(),
        "totalParticipants": len(participants) if participants else len(session.participant_ids),
        "totalSpots": len(spots) if spots else len(session.available_spot_ids),
        "publishedAt": (now or datetime.now()).isoformat(),
        "publishedBy": published_by,
        "results": [_public_result(r) for r in session.results],
    }
    if company:
        data["company"] = company
    return data


def publish_results(
    session: LotterySession,
    building_name: str,
    participants: Sequence[Participant],
    spots: Sequence[ParkingSpot],
    company: Optional[str],
    sink,
    published_by: str = "system",
) -> PublishResult:
    """Write the public projection to `sink` (anything with set(key, value))."""
    validation = validate_session_for_publish(session)
    if not validation.success:
        logger.error("Refusing to publish session %s: %s", session.id, validation.error)
        return validation

    try:
        payload = build_public_projection(
            session, building_name, participants, spots, company, published_by,
        )
        key = PUBLIC_RESULTS_KEY.format(building_id=session.building_id)
        sink.set(key, payload)
    except Exception as exc:
        logger.exception("Publishing results for building %s failed", session.building_id)
        return PublishResult(False, str(exc) or exc.__class__.__name__)

    logger.info("Published %d results to %s", len(session.results), key)
    return PublishResult(True, data={"buildingId": session.building_id, "key": key})
