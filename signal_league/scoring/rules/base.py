from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime

from signal_league.scoring.models import RedFlag


@dataclass
class ScamInputs:
    """One snapshot of everything the detection rules look at."""

    now: datetime
    pricing_model: str = "free"
    price: str | None = None
    founded_at: date | None = None
    total_trades: int = 0
    win_trades: int = 0
    scam_reports: int = 0
    recent_mentions: int = 0
    negative_mentions: int = 0


class DetectionRule(ABC):
    name: str = ""

    @abstractmethod
    def evaluate(self, inputs: ScamInputs) -> RedFlag | None:
        """Return a flag when the rule fires, else None."""
        ...
