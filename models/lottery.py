from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class Stage(str, Enum):
    PCD = "pcd"
    SINGLE = "single"
    DOUBLE = "double"
    RANDOM = "random"
    DEFAULTER = "defaulter"


class UnfilledReason(str, Enum):
    NO_SPOTS_LEFT = "no_spots_left"
    MANUAL_SKIP = "manual_skip"
    GATE_TIMEOUT = "gate_timeout"
    INVALID_CHOICE = "invalid_choice"


@dataclass(frozen=True)
class ParticipantSnapshot:
    name: str
    block: str
    unit: str
    has_large_car: bool = False
    prefers_covered: bool = False
    prefers_uncovered: bool = False
    prefers_linked_spot: bool = False
    prefers_unlinked_spot: bool = False
    number_of_spots: int = 1


@dataclass(frozen=True)
class SpotSnapshot:
    number: str
    floor: str
    type: Tuple[str, ...]
    size: str
    sector: Optional[str] = None
    is_covered: bool = False
    is_uncovered: bool = False


@dataclass(frozen=True)
class LotteryResult:
    """One (participant, spot) assignment, frozen at draw time."""
    id: str
    participant_id: str
    parking_spot_id: str
    priority: str          # "special-needs", "elderly", "up-to-date", "normal"
    stage: Stage
    tag: str               # e.g. "pcd-priority", "unique-sector-A-relaxed"
    participant_snapshot: ParticipantSnapshot
    spot_snapshot: SpotSnapshot
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def relaxed(self) -> bool:
        return self.tag.endswith("-relaxed")


@dataclass(frozen=True)
class UnfilledRequest:
    """One requested spot that the draw could not (or chose not to) fill."""
    participant_id: str
    participant_name: str
    stage: Stage
    reason: UnfilledReason
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class SessionSettings:
    allow_shared_spots: bool = False
    prioritize_elders: bool = False
    prioritize_special_needs: bool = True
    zone_by_proximity: bool = True


@dataclass(frozen=True)
class LotterySession:
    id: str
    building_id: str
    name: str
    date: datetime
    participant_ids: Tuple[str, ...]
    available_spot_ids: Tuple[str, ...]
    results: Tuple[LotteryResult, ...]
    unfilled: Tuple[UnfilledRequest, ...] = ()
    status: str = "completed"  # "pending", "running", "completed"
    settings: SessionSettings = field(default_factory=SessionSettings)
    seed: Optional[int] = None

    def result_by_id(self) -> Dict[str, LotteryResult]:
        return {r.id: r for r in self.results}

    def with_results(self, results) -> "LotterySession":
        return replace(self, results=tuple(results))
