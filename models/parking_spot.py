from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from models.sector import Sector, UNASSIGNED
from config.defaults import (
    SPOT_TYPE_PCD, SPOT_TYPE_COVERED, SPOT_TYPE_UNCOVERED,
    DEFAULT_FLOOR, DEFAULT_SPOT_SIZE,
)


@dataclass
class ParkingSpot:
    id: str
    building_id: str
    number: str
    floor: str = DEFAULT_FLOOR
    sector: Sector = UNASSIGNED
    type: Tuple[str, ...] = ()     # Category tags, e.g. ("Vaga PcD", "Vaga Coberta")
    size: str = DEFAULT_SPOT_SIZE  # "P", "M", "G", "XG"
    status: str = "available"      # "available", "occupied", "reserved"
    is_covered: Optional[bool] = None
    is_uncovered: Optional[bool] = None
    group_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.sector = Sector.of(self.sector)
        if isinstance(self.type, str):
            self.type = (self.type,)
        self.type = tuple(self.type or ())

    @property
    def covered(self) -> bool:
        """Coverage from either legacy encoding: the type tag or the boolean flag."""
        return SPOT_TYPE_COVERED in self.type or bool(self.is_covered)

    @property
    def uncovered(self) -> bool:
        return SPOT_TYPE_UNCOVERED in self.type or bool(self.is_uncovered)

    @property
    def is_pcd(self) -> bool:
        return SPOT_TYPE_PCD in self.type

    @property
    def is_available(self) -> bool:
        return self.status == "available"
