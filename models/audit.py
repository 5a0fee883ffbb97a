from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class AuditEntry:
    timestamp: datetime
    action: str              # "draw", "manual_choice", "manual_skip", "publish", "reassign", "upload"
    building_id: str
    session_id: Optional[str]
    participant_id: Optional[str]
    old_value: str
    new_value: str
    rationale: str = ""
