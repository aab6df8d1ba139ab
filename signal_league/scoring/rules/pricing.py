from signal_league.scoring.models import RedFlag
from signal_league.scoring.rules.base import DetectionRule, ScamInputs
from signal_league.scoring.transparency import parse_price

MAX_FAIR_PRICE = 200.0


class HighPriceRule(DetectionRule):
    name = "high_price"

    def evaluate(self, inputs: ScamInputs) -> RedFlag | None:
        if inputs.pricing_model != "paid":
            return None

        price = parse_price(inputs.price)
        if price is None or price <= MAX_FAIR_PRICE:
            return None

        return RedFlag(
            flag=self.name,
            description=(
                f"Subscription price (${price:g}) is unusually high. Most legitimate "
                f"groups charge under ${MAX_FAIR_PRICE:.0f}/month."
            ),
            severity="medium",
        )
