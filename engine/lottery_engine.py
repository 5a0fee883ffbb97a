"""Sector-aware five-stage parking lottery — the core allocation engine.

Stages run in a fixed order over one AllocationContext; later stages never
revisit earlier assignments:

1. PcD participants (accessible spots, manual choice when none are left)
2. Single-spot participants, by sector priority
3. Double / linked-spot participants, same sector cascade
4. Anyone (except defaulters) still short of spots, at random
5. Defaulters, last, any remaining spot
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from models.building import Building
from models.lottery import LotteryResult, Stage, UnfilledReason, UnfilledRequest
from models.participant import Participant
from models.parking_spot import ParkingSpot
from models.sector import Sector
from engine.classification import (
    coverage_matches, has_coverage_preference, is_defaulter, known_sectors, on_preferred_floor,
    qualifies_for_double_stage, qualifies_for_pcd_stage, qualifies_for_single_stage,
    required_spots, sector_priority,
)
from engine.context import AllocationContext
from engine.errors import DrawCancelledError, NoAvailableSpotsError, NoParticipantsError
from engine.manual_gate import ManualSelectionGate, SkipSelectionGate
from engine.random_source import RandomSource
from config.defaults import (
    TAG_PCD_PRIORITY, TAG_PCD_MANUAL, TAG_UNIQUE_PREFIX, TAG_DOUBLE_PREFIX,
    TAG_RANDOM, TAG_DEFAULTER, RELAXED_SUFFIX,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    spot: Optional[ParkingSpot]
    tag: Optional[str]
    attempts: Tuple[str, ...] = ()  # e.g. ("strict:A", "strict:B", "relaxed:A", "any")


@dataclass(frozen=True)
class AllocationOutcome:
    results: Tuple[LotteryResult, ...]
    unfilled: Tuple[UnfilledRequest, ...]
    participant_ids: Tuple[str, ...]
    available_spot_ids: Tuple[str, ...]
    seed: int
    manual_requests: int = 0
    shortfalls: Dict[str, int] = field(default_factory=dict)  # participant id -> spots still missing

    def results_for(self, participant_id: str) -> List[LotteryResult]:
        return [r for r in self.results if r.participant_id == participant_id]

    @property
    def assigned_spot_ids(self) -> List[str]:
        return [r.parking_spot_id for r in self.results]


def prefer_floors(spots: List[ParkingSpot], participant: Participant) -> List[ParkingSpot]:
    """Narrow to the participant's preferred floors when that leaves anything."""
    if participant.preferred_floors:
        on_floor = [s for s in spots if on_preferred_floor(s, participant)]
        if on_floor:
            return on_floor
    return spots


def prefer_coverage(spots: List[ParkingSpot], participant: Participant) -> List[ParkingSpot]:
    """Narrow to matching coverage when that leaves anything."""
    if has_coverage_preference(participant):
        matching = [s for s in spots if coverage_matches(s, participant)]
        if matching:
            return matching
    return spots


def sector_candidates(
    ctx: AllocationContext,
    participant: Participant,
    sector: Sector,
    strict_coverage: bool,
) -> List[ParkingSpot]:
    spots = [s for s in ctx.non_pcd_spots() if sector.accepts(s.sector)]
    if strict_coverage and has_coverage_preference(participant):
        spots = [s for s in spots if coverage_matches(s, participant)]
        if not spots:
            return []
    return prefer_floors(spots, participant)


def resolve_sector_spot(
    ctx: AllocationContext,
    participant: Participant,
    priority: Sequence[Sector],
    rng: RandomSource,
    prefix: str,
) -> CascadeResult:
    """Pick one non-PcD spot: strict sector pass, relaxed pass, then any spot.

    The relaxed pass (coverage ignored, floors still preferred) only runs for
    participants with a coverage preference.
    """
    attempts = []
    for sector in priority:
        attempts.append(f"strict:{sector.label}")
        candidates = sector_candidates(ctx, participant, sector, strict_coverage=True)
        if candidates:
            return CascadeResult(rng.pick(candidates), f"{prefix}-sector-{sector.label}", tuple(attempts))

    if has_coverage_preference(participant):
        for sector in priority:
            attempts.append(f"relaxed:{sector.label}")
            candidates = sector_candidates(ctx, participant, sector, strict_coverage=False)
            if candidates:
                logger.info("%s placed without coverage preference (none left)", participant.display_name)
                return CascadeResult(
                    rng.pick(candidates), f"{prefix}-sector-{sector.label}-{RELAXED_SUFFIX}", tuple(attempts),
                )

    attempts.append("any")
    remaining = ctx.non_pcd_spots()
    if remaining:
        return CascadeResult(rng.pick(remaining), f"{prefix}-any", tuple(attempts))
    return CascadeResult(None, None, tuple(attempts))


async def run_pcd_stage(
    ctx: AllocationContext,
    participants: List[Participant],
    rng: RandomSource,
    gate: ManualSelectionGate,
) -> None:
    population = rng.shuffle([
        p for p in participants
        if qualifies_for_pcd_stage(p) and p.id not in ctx.assigned_participant_ids
    ])
    logger.info("Stage 1 (PcD): %d participants, %d PcD spots", len(population), len(ctx.pcd_spots()))

    for participant in population:
        for _ in range(required_spots(participant)):
            pcd_spots = ctx.pcd_spots()
            if pcd_spots:
                ctx.assign(participant, rng.pick(pcd_spots), Stage.PCD, TAG_PCD_PRIORITY)
                continue

            normal_spots = ctx.non_pcd_spots()
            if not normal_spots:
                ctx.record_unfilled(participant, Stage.PCD, UnfilledReason.NO_SPOTS_LEFT)
                continue

            decision = await gate.request_choice(participant, normal_spots)
            if decision.spot_id is None:
                ctx.record_unfilled(participant, Stage.PCD, decision.reason or UnfilledReason.MANUAL_SKIP)
                continue

            chosen = next((s for s in normal_spots if s.id == decision.spot_id), None)
            if chosen is None:
                ctx.record_unfilled(participant, Stage.PCD, UnfilledReason.INVALID_CHOICE)
                continue
            ctx.assign(participant, chosen, Stage.PCD, TAG_PCD_MANUAL)

        ctx.mark_if_complete(participant)


def _run_sector_stage(
    ctx: AllocationContext,
    population: List[Participant],
    rng: RandomSource,
    sectors_for: Callable[[Participant], List[Sector]],
    stage: Stage,
    prefix: str,
) -> None:
    for participant in population:
        priority = sectors_for(participant)
        logger.debug(
            "%s: sector priority %s", participant.display_name, " -> ".join(s.label for s in priority),
        )
        for _ in range(ctx.missing_for(participant)):
            cascade = resolve_sector_spot(ctx, participant, priority, rng, prefix)
            if cascade.spot is None:
                ctx.record_unfilled(participant, stage, UnfilledReason.NO_SPOTS_LEFT)
                continue
            ctx.assign(participant, cascade.spot, stage, cascade.tag)
        ctx.mark_if_complete(participant)


def run_single_stage(ctx, participants, rng, sectors_for) -> None:
    population = rng.shuffle([
        p for p in participants
        if qualifies_for_single_stage(p) and p.id not in ctx.assigned_participant_ids
    ])
    logger.info("Stage 2 (single spot): %d participants", len(population))
    _run_sector_stage(ctx, population, rng, sectors_for, Stage.SINGLE, TAG_UNIQUE_PREFIX)


def run_double_stage(ctx, participants, rng, sectors_for) -> None:
    population = rng.shuffle([
        p for p in participants
        if qualifies_for_double_stage(p) and p.id not in ctx.assigned_participant_ids
    ])
    logger.info("Stage 3 (double/linked): %d participants", len(population))
    _run_sector_stage(ctx, population, rng, sectors_for, Stage.DOUBLE, TAG_DOUBLE_PREFIX)


def run_random_stage(ctx: AllocationContext, participants: List[Participant], rng: RandomSource) -> None:
    population = rng.shuffle([
        p for p in participants
        if p.id not in ctx.assigned_participant_ids and not is_defaulter(p)
    ])
    logger.info("Stage 4 (random remainder): %d participants", len(population))

    for participant in population:
        for _ in range(ctx.missing_for(participant)):
            eligible = prefer_floors(prefer_coverage(list(ctx.available_spots), participant), participant)
            spot = rng.pick(eligible)
            if spot is None:
                ctx.record_unfilled(participant, Stage.RANDOM, UnfilledReason.NO_SPOTS_LEFT)
                continue
            ctx.assign(participant, spot, Stage.RANDOM, TAG_RANDOM)
        ctx.mark_if_complete(participant)


def run_defaulter_stage(ctx: AllocationContext, participants: List[Participant], rng: RandomSource) -> None:
    population = rng.shuffle([
        p for p in participants
        if p.id not in ctx.assigned_participant_ids and is_defaulter(p)
    ])
    logger.info("Stage 5 (defaulters): %d participants", len(population))

    for participant in population:
        for _ in range(ctx.missing_for(participant)):
            spot = rng.pick(ctx.available_spots)
            if spot is None:
                ctx.record_unfilled(participant, Stage.DEFAULTER, UnfilledReason.NO_SPOTS_LEFT)
                continue
            ctx.assign(participant, spot, Stage.DEFAULTER, TAG_DEFAULTER)
        ctx.mark_if_complete(participant)


class SectorLotteryEngine:
    """Runs the five stages for one building's participants and spots.

    `run` is a coroutine whose only suspension point is the manual selection
    gate in stage 1. `should_cancel` is polled between stages.
    """

    def __init__(
        self,
        gate: Optional[ManualSelectionGate] = None,
        random_source: Optional[RandomSource] = None,
        building: Optional[Building] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.gate = gate or SkipSelectionGate()
        self.rng = random_source or RandomSource()
        self.building = building
        self.should_cancel = should_cancel

    def _checkpoint(self, stage: Stage) -> None:
        if self.should_cancel is not None and self.should_cancel():
            logger.warning("Draw cancelled after stage %s", stage.value)
            raise DrawCancelledError(stage.value)

    async def run(
        self,
        participants: Sequence[Participant],
        spots: Sequence[ParkingSpot],
    ) -> AllocationOutcome:
        building_id = self.building.id if self.building else ""
        participants = list(participants)
        if not participants:
            raise NoParticipantsError(building_id)
        ctx = AllocationContext.from_spots(list(spots))
        if not ctx.available_spots:
            raise NoAvailableSpotsError(building_id)

        initial_spot_ids = tuple(s.id for s in ctx.available_spots)
        sectors = known_sectors(ctx.available_spots)

        def sectors_for(participant: Participant) -> List[Sector]:
            return sector_priority(participant, sectors, self.building)

        logger.info(
            "Starting sector draw: %d participants, %d available spots, sectors %s, seed %s",
            len(participants), len(initial_spot_ids), [s.label for s in sectors], self.rng.seed,
        )
        requests_before = len(self.gate.requests)

        await run_pcd_stage(ctx, participants, self.rng, self.gate)
        self._checkpoint(Stage.PCD)
        run_single_stage(ctx, participants, self.rng, sectors_for)
        self._checkpoint(Stage.SINGLE)
        run_double_stage(ctx, participants, self.rng, sectors_for)
        self._checkpoint(Stage.DOUBLE)
        run_random_stage(ctx, participants, self.rng)
        self._checkpoint(Stage.RANDOM)
        run_defaulter_stage(ctx, participants, self.rng)

        results, unfilled = ctx.freeze()
        shortfalls = {
            p.id: ctx.missing_for(p) for p in participants if ctx.missing_for(p) > 0
        }
        logger.info(
            "Sector draw finished: %d assignments, %d/%d participants fully served, %d spots left",
            len(results), len(ctx.assigned_participant_ids), len(participants), len(ctx.available_spots),
        )
        return AllocationOutcome(
            results=results,
            unfilled=unfilled,
            participant_ids=tuple(p.id for p in participants),
            available_spot_ids=initial_spot_ids,
            seed=self.rng.seed,
            manual_requests=len(self.gate.requests) - requests_before,
            shortfalls=shortfalls,
        )


def run_draw_sync(
    participants: Sequence[Participant],
    spots: Sequence[ParkingSpot],
    building: Optional[Building] = None,
    gate: Optional[ManualSelectionGate] = None,
    seed: Optional[int] = None,
) -> AllocationOutcome:
    """Run a draw to completion from synchronous code."""
    engine = SectorLotteryEngine(gate=gate, random_source=RandomSource(seed), building=building)
    return asyncio.run(engine.run(participants, spots))
