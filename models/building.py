from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class Building:
    id: str
    name: str
    address: Optional[str] = None
    company: Optional[str] = None
    sector_proximity: Dict[str, List[str]] = field(default_factory=dict)  # home sector -> nearby sectors in order
    created_at: datetime = field(default_factory=datetime.now)

    def proximity_for(self, sector_name: str) -> List[str]:
        return list(self.sector_proximity.get(sector_name, []))
