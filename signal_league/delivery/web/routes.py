"""Cron endpoints: an external scheduler POSTs here to trigger recalculation."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse

from signal_league.config import settings
from signal_league.scoring.ranking import recalculate_all_tiers
from signal_league.scoring.recalculate import recalculate_all

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron")


def require_cron_secret(authorization: str | None = Header(default=None)) -> None:
    if not settings.cron_secret or authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.post("/recalculate-tiers", dependencies=[Depends(require_cron_secret)])
async def recalculate_tiers():
    failed: list[str] = []
    try:
        results = await recalculate_all_tiers(failed=failed)
    except Exception:
        logger.exception("Tier recalculation failed")
        return JSONResponse({"error": "Recalculation failed"}, status_code=500)

    return {
        "success": True,
        "updated": len(results),
        "failed": failed,
        "results": [r.model_dump() for r in results],
    }


@router.post("/recalculate", dependencies=[Depends(require_cron_secret)])
async def recalculate():
    try:
        report = await recalculate_all()
    except Exception:
        logger.exception("Recalculation failed")
        return JSONResponse({"error": "Recalculation failed"}, status_code=500)

    return {
        "success": True,
        "updated": report.processed,
        "failed": report.failed,
        "tiers": [r.model_dump() for r in report.tiers],
        "transparency": [
            {"group_id": r.group_id, "score": r.score} for r in report.transparency
        ],
        "scam": [
            {"group_id": r.group_id, "risk": r.risk, "flags": [f.flag for f in r.flags]}
            for r in report.scam
        ],
    }
