import argparse
import asyncio
import logging

import uvicorn

from signal_league.config import settings
from signal_league.delivery.web.app import create_app
from signal_league.scoring.ranking import recalculate_all_tiers
from signal_league.scoring.recalculate import recalculate_all
from signal_league.scoring.scam_detection import recalculate_all_scam_flags
from signal_league.scoring.transparency import recalculate_all_transparency_scores
from signal_league.storage.database import init_db
from signal_league.utils.logging import setup_logging

logger = logging.getLogger(__name__)

SINGLE_PASSES = {
    "tiers": recalculate_all_tiers,
    "transparency": recalculate_all_transparency_scores,
    "scam": recalculate_all_scam_flags,
}


async def run_recalculation(only: str | None = None) -> int:
    """One batch run; returns the number of groups that failed."""
    await init_db()

    if only is not None:
        failed: list[str] = []
        results = await SINGLE_PASSES[only](failed=failed)
        for r in results:
            logger.info("%s: %s", r.group_id, r.model_dump(exclude={"group_id"}))
        if failed:
            logger.warning("Failed groups: %s", ", ".join(failed))
        return len(failed)

    report = await recalculate_all()
    for tier in report.tiers:
        logger.info("%s: %s (%.2f)", tier.group_id, tier.tier, tier.score)
    if report.failed:
        logger.warning("Failed groups: %s", ", ".join(report.failed))
    return len(report.failed)


async def serve() -> None:
    if not settings.cron_secret:
        logger.warning("CRON_SECRET not set, cron endpoints will reject every call")

    config = uvicorn.Config(
        create_app(),
        host=settings.web_host,
        port=settings.web_port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    await server.serve()


def cli(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="signal-league")
    sub = parser.add_subparsers(dest="command", required=True)

    recalc = sub.add_parser("recalculate", help="Recompute tiers, transparency and scam risk")
    recalc.add_argument(
        "--only",
        choices=sorted(SINGLE_PASSES),
        help="Run a single scoring pass instead of the full recalculation",
    )
    sub.add_parser("serve", help="Run the cron trigger web app")

    args = parser.parse_args(argv)
    setup_logging()

    if args.command == "recalculate":
        failed = asyncio.run(run_recalculation(only=args.only))
        raise SystemExit(1 if failed else 0)

    asyncio.run(serve())


if __name__ == "__main__":
    cli()
