"""Scam-risk detection: independent rules over one snapshot of group data.

Each pass fully replaces the group's auto-detected flags, so the stored flag
set and ``scam_risk`` always reflect exactly the latest pass.
"""

import logging
from datetime import datetime, timedelta
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.scoring.batch import run_for_approved_groups
from signal_league.scoring.models import RedFlag, ScamResult, Severity, max_severity
from signal_league.scoring.rules.account_age import AccountTooNewRule
from signal_league.scoring.rules.base import DetectionRule, ScamInputs
from signal_league.scoring.rules.pricing import HighPriceRule
from signal_league.scoring.rules.reports import MultipleScamReportsRule
from signal_league.scoring.rules.sentiment import NegativeSentimentRule
from signal_league.scoring.rules.winners import OnlyShowsWinnersRule
from signal_league.storage.models import ScamFlag
from signal_league.storage.repository import (
    count_scam_reports,
    get_group,
    get_mention_stats,
    get_trade_stats,
    replace_auto_flags,
)

logger = logging.getLogger(__name__)

SENTIMENT_WINDOW = timedelta(days=30)

DEFAULT_RULES: tuple[DetectionRule, ...] = (
    OnlyShowsWinnersRule(),
    AccountTooNewRule(),
    MultipleScamReportsRule(),
    HighPriceRule(),
    NegativeSentimentRule(),
)


def evaluate_rules(
    inputs: ScamInputs, rules: tuple[DetectionRule, ...] = DEFAULT_RULES
) -> list[RedFlag]:
    flags = []
    for rule in rules:
        flag = rule.evaluate(inputs)
        if flag is not None:
            flags.append(flag)
    return flags


def overall_risk(flags: list[RedFlag]) -> Severity:
    risk: Severity = "low"
    for f in flags:
        risk = max_severity(risk, f.severity)
    return risk


async def gather_inputs(
    session: AsyncSession, group_id: str, now: datetime
) -> ScamInputs:
    group = await get_group(session, group_id)
    trades = await get_trade_stats(session, group_id)
    reports = await count_scam_reports(session, group_id)
    mentions = await get_mention_stats(session, group_id, now - SENTIMENT_WINDOW)

    inputs = ScamInputs(
        now=now,
        total_trades=trades.total,
        win_trades=trades.wins,
        scam_reports=reports,
        recent_mentions=mentions.total,
        negative_mentions=mentions.negative,
    )
    if group is not None:
        inputs.pricing_model = group.pricing_model
        inputs.price = group.price
        inputs.founded_at = group.founded_at
    return inputs


async def detect_scam_flags(
    session: AsyncSession,
    group_id: str,
    now: datetime | None = None,
    rules: tuple[DetectionRule, ...] = DEFAULT_RULES,
) -> ScamResult:
    now = now or datetime.utcnow()
    inputs = await gather_inputs(session, group_id, now)

    flags = evaluate_rules(inputs, rules)
    risk = overall_risk(flags)

    rows = [
        ScamFlag(
            group_id=group_id,
            flag=f.flag,
            description=f.description,
            severity=f.severity,
            auto_detected=True,
            created_at=now,
        )
        for f in flags
    ]
    await replace_auto_flags(session, group_id, rows, risk)

    if flags:
        logger.info(
            "Group %s scam risk=%s flags=%s",
            group_id,
            risk,
            ",".join(f.flag for f in flags),
        )
    return ScamResult(group_id=group_id, risk=risk, flags=flags)


async def recalculate_all_scam_flags(
    session_factory=None, failed: list[str] | None = None
) -> list[ScamResult]:
    now = datetime.utcnow()
    return await run_for_approved_groups(
        partial(detect_scam_flags, now=now), "Scam detection", session_factory, failed
    )
