from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PARTICIPANT_COLORS = ("blue", "pink")


@dataclass
class Participant:
    id: int
    name: str
    email: str
    color: str  # "blue" or "pink", distinguishes ownership in displays
    created_at: Optional[datetime] = None
