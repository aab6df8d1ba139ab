from signal_league.scoring.models import RedFlag
from signal_league.scoring.rules.base import DetectionRule, ScamInputs
from signal_league.scoring.transparency import months_since

MIN_MONTHS = 3


class AccountTooNewRule(DetectionRule):
    name = "account_too_new"

    def evaluate(self, inputs: ScamInputs) -> RedFlag | None:
        if inputs.founded_at is None:
            return None

        months = months_since(inputs.founded_at, inputs.now)
        if months >= MIN_MONTHS:
            return None
        months = max(months, 0)  # founding date in the future

        plural = "" if months == 1 else "s"
        return RedFlag(
            flag=self.name,
            description=(
                f"Group was founded less than {MIN_MONTHS} months ago "
                f"({months} month{plural} old). New groups have no proven track record."
            ),
            severity="medium",
        )
