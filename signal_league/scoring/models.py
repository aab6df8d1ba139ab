from typing import Literal

from pydantic import BaseModel

Tier = Literal["S", "A", "B", "C", "D", "F", "UNRANKED"]
Severity = Literal["low", "medium", "high", "critical"]

SEVERITY_ORDER: dict[str, int] = {
    "low": 0,
    "medium": 1,
    "high": 2,
    "critical": 3,
}


def max_severity(a: Severity, b: Severity) -> Severity:
    return a if SEVERITY_ORDER[a] >= SEVERITY_ORDER[b] else b


class TierResult(BaseModel):
    group_id: str
    tier: Tier
    score: float  # 0 when UNRANKED


class TransparencyFactors(BaseModel):
    shows_losses: int = 0  # max 20
    track_record_age: int = 0  # max 15
    verified_performance: int = 0  # max 25
    fair_pricing: int = 0  # max 10
    responsive_to_criticism: int = 0  # max 10
    open_community: int = 0  # max 10
    no_fake_testimonials: int = 0  # max 10

    def total(self) -> int:
        return (
            self.shows_losses
            + self.track_record_age
            + self.verified_performance
            + self.fair_pricing
            + self.responsive_to_criticism
            + self.open_community
            + self.no_fake_testimonials
        )


class TransparencyResult(BaseModel):
    group_id: str
    score: int  # 0 - 100
    factors: TransparencyFactors


class RedFlag(BaseModel):
    flag: str
    description: str
    severity: Severity


class ScamResult(BaseModel):
    group_id: str
    risk: Severity
    flags: list[RedFlag] = []


class RecalculationReport(BaseModel):
    tiers: list[TierResult] = []
    transparency: list[TransparencyResult] = []
    scam: list[ScamResult] = []
    failed: list[str] = []  # group ids skipped after an error

    @property
    def processed(self) -> int:
        return len(self.tiers)
