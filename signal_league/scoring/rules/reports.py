from signal_league.scoring.models import RedFlag
from signal_league.scoring.rules.base import DetectionRule, ScamInputs

CRITICAL_REPORTS = 5
HIGH_REPORTS = 3


class MultipleScamReportsRule(DetectionRule):
    name = "multiple_scam_reports"

    def evaluate(self, inputs: ScamInputs) -> RedFlag | None:
        count = inputs.scam_reports

        if count >= CRITICAL_REPORTS:
            return RedFlag(
                flag=self.name,
                description=(
                    f"{count} users have reported this group as a scam. "
                    "Exercise extreme caution."
                ),
                severity="critical",
            )

        if count >= HIGH_REPORTS:
            return RedFlag(
                flag=self.name,
                description=(
                    f"{count} users have reported this group as a scam. "
                    "Proceed with caution."
                ),
                severity="high",
            )

        return None
