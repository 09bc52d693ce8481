from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from backend.app.services import get_orchestrator
from what_should_i_do.pipeline.orchestrator import AnalysisOrchestrator

router = APIRouter()

MAX_BATCH_ITEMS = 20


class AnalyzeRequest(BaseModel):
    text: str
    fast: bool = False


class BatchRequest(BaseModel):
    texts: List[str] = Field(default_factory=list)


@router.post("/analyze")
async def analyze_endpoint(
    body: AnalyzeRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> dict:
    # The remote call blocks; keep the event loop free.
    run = orchestrator.analyze_fast if body.fast else orchestrator.analyze
    result = await run_in_threadpool(run, body.text)
    return {"ok": True, "source": result.source, "result": result.to_dict()}


@router.post("/analyze/batch")
async def analyze_batch_endpoint(
    body: BatchRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> dict:
    if not body.texts:
        raise HTTPException(status_code=400, detail="Provide at least one text.")
    if len(body.texts) > MAX_BATCH_ITEMS:
        raise HTTPException(status_code=400, detail=f"At most {MAX_BATCH_ITEMS} texts per batch.")

    results = await run_in_threadpool(orchestrator.analyze_batch, body.texts)
    return {"ok": True, "results": [r.to_dict() for r in results]}


@router.post("/analyze/upload")
async def analyze_upload(
    file: UploadFile = File(...),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> dict:
    # PDF/DOCX/OCR extraction happens upstream; only extracted text is accepted here.
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type != "text/plain":
        raise HTTPException(status_code=415, detail="Please upload extracted plain text (text/plain).")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty upload.")

    text = content.decode("utf-8", errors="replace")
    result = await run_in_threadpool(orchestrator.analyze, text)
    return {"ok": True, "filename": file.filename, "source": result.source, "result": result.to_dict()}
