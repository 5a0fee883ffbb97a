"""Lottery error hierarchy.

Spot exhaustion, manual skips and gate timeouts are not errors: they are
recorded as UnfilledRequest entries on the outcome. Exceptions here cover
preconditions, gate protocol misuse, cancellation and post-hoc editing.
"""

from enum import Enum


class ErrorCode(Enum):
    NO_BUILDING_SELECTED = "NO_BUILDING_SELECTED"
    NO_PARTICIPANTS = "NO_PARTICIPANTS"
    NO_AVAILABLE_SPOTS = "NO_AVAILABLE_SPOTS"
    GATE_BUSY = "GATE_BUSY"
    MANUAL_CHOICE_PENDING = "MANUAL_CHOICE_PENDING"
    DRAW_CANCELLED = "DRAW_CANCELLED"
    RESULT_NOT_FOUND = "RESULT_NOT_FOUND"
    SPOT_UNAVAILABLE = "SPOT_UNAVAILABLE"


class LotteryError(Exception):
    """Base exception for lottery operations."""

    code: ErrorCode

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class DrawPreconditionError(LotteryError):
    """Raised before the engine starts when the draw inputs are unusable."""


class NoBuildingSelectedError(DrawPreconditionError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.NO_BUILDING_SELECTED, "Select a building before running the draw")


class NoParticipantsError(DrawPreconditionError):
    def __init__(self, building_id: str) -> None:
        super().__init__(ErrorCode.NO_PARTICIPANTS, f"Building {building_id} has no participants")
        self.building_id = building_id


class NoAvailableSpotsError(DrawPreconditionError):
    def __init__(self, building_id: str) -> None:
        super().__init__(ErrorCode.NO_AVAILABLE_SPOTS, f"Building {building_id} has no available parking spots")
        self.building_id = building_id


class GateBusyError(LotteryError):
    """Raised when a second manual choice is requested while one is still open."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(
            ErrorCode.GATE_BUSY,
            f"A manual choice is already pending; cannot open one for participant {participant_id}",
        )
        self.participant_id = participant_id


class ManualChoicePending(LotteryError):
    """Raised by a scripted gate that has no recorded decision for the current request.

    Carries the request so an interactive caller can ask the operator, record
    the answer and replay the draw.
    """

    def __init__(self, request) -> None:
        super().__init__(
            ErrorCode.MANUAL_CHOICE_PENDING,
            f"Waiting for a manual spot choice for participant {request.participant.id}",
        )
        self.request = request


class DrawCancelledError(LotteryError):
    def __init__(self, completed_stage: str) -> None:
        super().__init__(ErrorCode.DRAW_CANCELLED, f"Draw cancelled after stage '{completed_stage}'")
        self.completed_stage = completed_stage


class ResultNotFoundError(LotteryError):
    def __init__(self, result_id: str) -> None:
        super().__init__(ErrorCode.RESULT_NOT_FOUND, f"Result {result_id} not found in session")
        self.result_id = result_id


class SpotUnavailableError(LotteryError):
    def __init__(self, spot_id: str) -> None:
        super().__init__(ErrorCode.SPOT_UNAVAILABLE, f"Spot {spot_id} is already assigned in this session")
        self.spot_id = spot_id
