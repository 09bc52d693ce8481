from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.app.services import get_orchestrator
from what_should_i_do.pipeline.orchestrator import AnalysisOrchestrator

router = APIRouter()


@router.get("/keys/status")
def keys_status(orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)) -> dict:
    # Only positions and flags; key values never leave the process.
    statuses = orchestrator.key_statuses()
    return {
        "ok": True,
        "analyzer": orchestrator.analyzer.name if orchestrator.analyzer else None,
        "configured": len(statuses),
        "active": sum(1 for s in statuses if not (s["is_exhausted"] or s["is_rate_limited"])),
        "keys": [
            {
                "key": s["key_index"] + 1,
                "is_exhausted": s["is_exhausted"],
                "is_rate_limited": s["is_rate_limited"],
                "error": s["error"],
            }
            for s in statuses
        ],
    }


@router.post("/keys/reset")
def keys_reset(orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)) -> dict:
    orchestrator.reset_keys()
    return {"ok": True}
