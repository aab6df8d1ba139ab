from signal_league.scoring.models import RedFlag
from signal_league.scoring.rules.base import DetectionRule, ScamInputs

MIN_MENTIONS = 5
MAX_NEGATIVE_RATIO = 0.6


class NegativeSentimentRule(DetectionRule):
    name = "negative_sentiment"

    def evaluate(self, inputs: ScamInputs) -> RedFlag | None:
        total = inputs.recent_mentions
        if total < MIN_MENTIONS:
            return None

        ratio = inputs.negative_mentions / total
        if ratio <= MAX_NEGATIVE_RATIO:
            return None

        return RedFlag(
            flag=self.name,
            description=(
                f"{round(ratio * 100)}% of {total} recent Twitter mentions are negative. "
                "The community has concerns about this group."
            ),
            severity="high",
        )
