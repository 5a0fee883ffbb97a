from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

from models.sector import Sector, UNASSIGNED


@dataclass
class Participant:
    id: str
    building_id: str
    name: str
    block: str
    unit: str
    sector: Sector = UNASSIGNED       # Home sector
    has_special_needs: bool = False   # PcD
    is_elderly: bool = False
    is_up_to_date: Optional[bool] = None  # False = defaulter; None/True = not a defaulter
    has_small_car: bool = False
    has_large_car: bool = False
    has_motorcycle: bool = False
    group_id: Optional[str] = None    # Linked-spot co-allocation group (informational)
    number_of_spots: int = 1
    prefers_common_spot: bool = False
    prefers_covered: bool = False
    prefers_uncovered: bool = False
    prefers_linked_spot: bool = False
    prefers_unlinked_spot: bool = False
    prefers_small_spot: bool = False
    preferred_floors: FrozenSet[str] = frozenset()
    preferred_sectors: Tuple[Sector, ...] = ()  # First = most preferred
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.sector = Sector.of(self.sector)
        self.preferred_floors = frozenset(self.preferred_floors or ())
        self.preferred_sectors = tuple(
            s for s in (Sector.of(v) for v in (self.preferred_sectors or ())) if not s.is_unassigned
        )
        if self.number_of_spots is None or self.number_of_spots < 1:
            self.number_of_spots = 1

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.block}/{self.unit})"
