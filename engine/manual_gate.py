"""Manual Selection Gate: the one point where a draw waits for a human.

Stage 1 calls ``await gate.request_choice(participant, candidates)`` when a PcD
participant cannot get an accessible spot. Gates are strictly sequential: the
engine never has more than one request open.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from models.lottery import UnfilledReason
from models.participant import Participant
from models.parking_spot import ParkingSpot
from engine.errors import GateBusyError, ManualChoicePending

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualChoiceRequest:
    participant: Participant
    candidates: Tuple[ParkingSpot, ...]
    sequence: int = 0  # 0-based index of this request within the draw

    @property
    def candidate_ids(self) -> List[str]:
        return [s.id for s in self.candidates]


@dataclass(frozen=True)
class GateDecision:
    spot_id: Optional[str]
    reason: Optional[UnfilledReason] = None  # Set when spot_id is None

    @classmethod
    def chosen(cls, spot_id: str) -> "GateDecision":
        return cls(spot_id=spot_id)

    @classmethod
    def skipped(cls) -> "GateDecision":
        return cls(spot_id=None, reason=UnfilledReason.MANUAL_SKIP)

    @classmethod
    def timed_out(cls) -> "GateDecision":
        return cls(spot_id=None, reason=UnfilledReason.GATE_TIMEOUT)

    @classmethod
    def from_answer(cls, spot_id: Optional[str]) -> "GateDecision":
        return cls.chosen(spot_id) if spot_id else cls.skipped()


class ManualSelectionGate(ABC):
    """Interface between the draw and whoever decides manual PcD choices."""

    def __init__(self) -> None:
        self.requests: List[ManualChoiceRequest] = []

    def _open(self, participant: Participant, candidates: Iterable[ParkingSpot]) -> ManualChoiceRequest:
        request = ManualChoiceRequest(participant, tuple(candidates), sequence=len(self.requests))
        self.requests.append(request)
        logger.info(
            "Manual choice #%d requested for %s (%d candidate spots)",
            request.sequence, participant.display_name, len(request.candidates),
        )
        return request

    @abstractmethod
    async def request_choice(
        self, participant: Participant, candidates: Sequence[ParkingSpot],
    ) -> GateDecision:
        """Suspend until a decision for `participant` is available."""
        ...


class SkipSelectionGate(ManualSelectionGate):
    """Non-interactive gate: every manual choice is skipped."""

    async def request_choice(self, participant, candidates) -> GateDecision:
        self._open(participant, candidates)
        return GateDecision.skipped()


class CallbackSelectionGate(ManualSelectionGate):
    """Delegates each request to a callable returning a spot id or None.

    The callable may be a plain function or a coroutine function.
    """

    def __init__(self, callback: Callable, timeout_seconds: Optional[float] = None) -> None:
        super().__init__()
        self.callback = callback
        self.timeout_seconds = timeout_seconds

    async def request_choice(self, participant, candidates) -> GateDecision:
        request = self._open(participant, candidates)
        answer = self.callback(request)
        if inspect.isawaitable(answer):
            try:
                answer = await asyncio.wait_for(answer, self.timeout_seconds)
            except asyncio.TimeoutError:
                logger.warning("Manual choice for %s timed out; skipping", participant.display_name)
                return GateDecision.timed_out()
        return GateDecision.from_answer(answer)


class ScriptedSelectionGate(ManualSelectionGate):
    """Answers from a recorded list of decisions, in request order.

    When the list is exhausted it raises ManualChoicePending carrying the open
    request. Combined with a seeded RandomSource this lets a stateless caller
    (the Streamlit console) replay the draw up to the next unanswered choice.
    """

    def __init__(self, decisions: Optional[Sequence] = None) -> None:
        super().__init__()
        self.decisions = list(decisions or [])  # spot ids, None (skip) or GateDecision

    async def request_choice(self, participant, candidates) -> GateDecision:
        request = self._open(participant, candidates)
        if request.sequence >= len(self.decisions):
            raise ManualChoicePending(request)
        decision = self.decisions[request.sequence]
        if isinstance(decision, GateDecision):
            return decision
        return GateDecision.from_answer(decision)


class InteractiveSelectionGate(ManualSelectionGate):
    """Future-backed gate answered by another task or thread.

    The caller watches ``pending`` (or awaits ``next_request()``) and answers
    with ``choose(spot_id)`` or ``skip()``. With ``timeout_seconds`` set, an
    unanswered request resolves to a skip with reason GATE_TIMEOUT.
    """

    def __init__(self, timeout_seconds: Optional[float] = None) -> None:
        super().__init__()
        self.timeout_seconds = timeout_seconds
        self._pending: Optional[ManualChoiceRequest] = None
        self._future: Optional[asyncio.Future] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._announced: Optional[asyncio.Queue] = None

    @property
    def pending(self) -> Optional[ManualChoiceRequest]:
        return self._pending

    def _queue(self) -> asyncio.Queue:
        if self._announced is None:
            self._announced = asyncio.Queue()
        return self._announced

    async def next_request(self) -> ManualChoiceRequest:
        """Wait until the draw opens its next manual choice."""
        return await self._queue().get()

    async def request_choice(self, participant, candidates) -> GateDecision:
        if self._future is not None and not self._future.done():
            raise GateBusyError(participant.id)

        self._loop = asyncio.get_running_loop()
        self._future = self._loop.create_future()
        self._pending = self._open(participant, candidates)
        self._queue().put_nowait(self._pending)
        try:
            if self.timeout_seconds is None:
                answer = await self._future
            else:
                answer = await asyncio.wait_for(self._future, self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Manual choice for %s timed out; skipping", participant.display_name)
            return GateDecision.timed_out()
        finally:
            self._pending = None
            self._future = None
        return GateDecision.from_answer(answer)

    def choose(self, spot_id: str) -> None:
        self._resolve(spot_id)

    def skip(self) -> None:
        self._resolve(None)

    def _resolve(self, answer: Optional[str]) -> None:
        if self._future is None or self._loop is None:
            raise RuntimeError("No manual choice is pending")
        future = self._future

        def _set():
            if not future.done():
                future.set_result(answer)

        self._loop.call_soon_threadsafe(_set)
