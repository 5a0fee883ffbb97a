"""Shared mutable state of one draw, passed explicitly to every stage."""

import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Set, Tuple

from models.lottery import (
    LotteryResult, ParticipantSnapshot, SpotSnapshot, Stage, UnfilledReason, UnfilledRequest,
)
from models.participant import Participant
from models.parking_spot import ParkingSpot
from engine.classification import priority_tier, required_spots

logger = logging.getLogger(__name__)


def snapshot_participant(participant: Participant) -> ParticipantSnapshot:
    return ParticipantSnapshot(
        name=participant.name,
        block=participant.block,
        unit=participant.unit,
        has_large_car=bool(participant.has_large_car),
        prefers_covered=bool(participant.prefers_covered),
        prefers_uncovered=bool(participant.prefers_uncovered),
        prefers_linked_spot=bool(participant.prefers_linked_spot),
        prefers_unlinked_spot=bool(participant.prefers_unlinked_spot),
        number_of_spots=participant.number_of_spots,
    )


def snapshot_spot(spot: ParkingSpot) -> SpotSnapshot:
    return SpotSnapshot(
        number=spot.number,
        floor=spot.floor,
        type=tuple(spot.type),
        size=spot.size,
        sector=spot.sector.name,
        is_covered=spot.covered,
        is_uncovered=spot.uncovered,
    )


def new_result_id() -> str:
    return f"result-{uuid.uuid4().hex}"


@dataclass
class AllocationContext:
    """Working pools of a single draw.

    Invariant: a spot leaves `available_spots` and enters `assigned_spot_ids`
    exactly once, together with the append of its LotteryResult.
    """
    available_spots: List[ParkingSpot]
    assigned_spot_ids: Set[str] = field(default_factory=set)
    assigned_participant_ids: Set[str] = field(default_factory=set)
    results: List[LotteryResult] = field(default_factory=list)
    unfilled: List[UnfilledRequest] = field(default_factory=list)
    clock: Callable[[], datetime] = datetime.now
    _counts: Counter = field(default_factory=Counter)

    @classmethod
    def from_spots(cls, spots: List[ParkingSpot], clock: Optional[Callable[[], datetime]] = None) -> "AllocationContext":
        return cls(available_spots=[s for s in spots if s.is_available], clock=clock or datetime.now)

    def non_pcd_spots(self) -> List[ParkingSpot]:
        return [s for s in self.available_spots if not s.is_pcd]

    def pcd_spots(self) -> List[ParkingSpot]:
        return [s for s in self.available_spots if s.is_pcd]

    def count_for(self, participant_id: str) -> int:
        return self._counts[participant_id]

    def missing_for(self, participant: Participant) -> int:
        return max(0, required_spots(participant) - self.count_for(participant.id))

    def assign(self, participant: Participant, spot: ParkingSpot, stage: Stage, tag: str) -> LotteryResult:
        if spot.id in self.assigned_spot_ids:
            raise ValueError(f"Spot {spot.id} was already assigned in this draw")
        self.available_spots = [s for s in self.available_spots if s.id != spot.id]
        self.assigned_spot_ids.add(spot.id)

        result = LotteryResult(
            id=new_result_id(),
            participant_id=participant.id,
            parking_spot_id=spot.id,
            priority=priority_tier(participant),
            stage=stage,
            tag=tag,
            participant_snapshot=snapshot_participant(participant),
            spot_snapshot=snapshot_spot(spot),
            timestamp=self.clock(),
        )
        self.results.append(result)
        self._counts[participant.id] += 1
        logger.debug("%s: %s -> spot %s", tag, participant.display_name, spot.number)
        return result

    def record_unfilled(self, participant: Participant, stage: Stage, reason: UnfilledReason) -> UnfilledRequest:
        entry = UnfilledRequest(
            participant_id=participant.id,
            participant_name=participant.name,
            stage=stage,
            reason=reason,
            timestamp=self.clock(),
        )
        self.unfilled.append(entry)
        logger.warning("%s stage: no spot for %s (%s)", stage.value, participant.display_name, reason.value)
        return entry

    def mark_if_complete(self, participant: Participant) -> bool:
        if self.count_for(participant.id) >= required_spots(participant):
            self.assigned_participant_ids.add(participant.id)
            return True
        return False

    def freeze(self) -> Tuple[Tuple[LotteryResult, ...], Tuple[UnfilledRequest, ...]]:
        return tuple(self.results), tuple(self.unfilled)
