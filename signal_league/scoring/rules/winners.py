from signal_league.scoring.models import RedFlag
from signal_league.scoring.rules.base import DetectionRule, ScamInputs

MIN_TRADES = 10
MAX_WIN_RATIO = 0.9


class OnlyShowsWinnersRule(DetectionRule):
    name = "only_shows_winners"

    def evaluate(self, inputs: ScamInputs) -> RedFlag | None:
        total = inputs.total_trades
        if total < MIN_TRADES:
            return None

        win_ratio = inputs.win_trades / total
        if win_ratio <= MAX_WIN_RATIO:
            return None

        return RedFlag(
            flag=self.name,
            description=(
                f"Win rate is suspiciously high ({round(win_ratio * 100)}% across "
                f"{total} rated trades). Legitimate groups show losses too."
            ),
            severity="high",
        )
