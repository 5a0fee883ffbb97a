from models.sector import Sector, UNASSIGNED
from models.building import Building
from models.participant import Participant
from models.parking_spot import ParkingSpot
from models.lottery import (
    LotteryResult, LotterySession, ParticipantSnapshot, SessionSettings,
    SpotSnapshot, Stage, UnfilledReason, UnfilledRequest,
)
from models.audit import AuditEntry
