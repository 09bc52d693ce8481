# src/what_should_i_do/app/run.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from what_should_i_do.analyzers.factory import build_analyzer
from what_should_i_do.config.profiles import get_profile
from what_should_i_do.config.settings import Settings, load_settings
from what_should_i_do.errors import AnalysisError, get_error_message
from what_should_i_do.pipeline.orchestrator import AnalysisOrchestrator
from what_should_i_do.translation.client import TranslationClient

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    analyzed: int
    remote: int
    local: int
    errors: int


def build_orchestrator(settings: Optional[Settings] = None, *, profile: Optional[str] = None) -> AnalysisOrchestrator:
    cfg = settings or load_settings()
    return AnalysisOrchestrator(
        build_analyzer(cfg),
        profile=get_profile(profile or cfg.rule_profile, summary_strategy=cfg.summary_strategy),
        remote_timeout=cfg.remote_timeout,
    )


def build_translator(settings: Optional[Settings] = None) -> TranslationClient:
    cfg = settings or load_settings()
    return TranslationClient(url=cfg.translate_url)


def read_text_file(path: Path) -> str:
    # Extracted text from uploads may carry stray bytes; never fail on decoding.
    return path.read_text(encoding="utf-8", errors="replace")


def analyze_files(
    paths: Sequence[Path],
    *,
    orchestrator: AnalysisOrchestrator,
    fast: bool = False,
    progress_cb: Optional[Callable[[str, Dict[str, Any]], None]] = None,
) -> Dict[str, Any]:
    """
    Analyze plain-text files one by one and return a machine-readable report.

    Args:
        paths: Text files (already extracted from PDF/DOCX/OCR upstream).
        orchestrator: Configured pipeline to run each file through.
        fast: If True, skip the smart analyzer entirely.
        progress_cb: Optional callback receiving (step, payload) events.

    Returns:
        dict with "summary" counts and per-file "results" (JSON-serializable).
    """
    def report(step: str, *, detail: str | None = None, **extra: Any) -> None:
        if not progress_cb:
            return
        payload: Dict[str, Any] = {"detail": detail}
        payload.update(extra)
        progress_cb(step, payload)

    results: List[Dict[str, Any]] = []
    remote = local = errors = 0
    total = len(paths)

    for index, path in enumerate(paths, start=1):
        report("analyzing", detail=f"Analyzing {index}/{total}", path=str(path))
        try:
            text = read_text_file(path)
            result = orchestrator.analyze_fast(text) if fast else orchestrator.analyze(text)
        except (AnalysisError, OSError) as exc:
            errors += 1
            error = exc.to_dict() if isinstance(exc, AnalysisError) else {
                "code": "READ_FAILED",
                "message": get_error_message(exc),
                "retryable": False,
            }
            logger.warning("Could not analyze %s: %s", path, error["message"])
            report("error", detail=error["message"], path=str(path), error=error)
            results.append({"path": str(path), "error": error})
            continue

        if result.source == "remote":
            remote += 1
        else:
            local += 1
        results.append({"path": str(path), "source": result.source, "result": result.to_dict()})

    summary = RunSummary(analyzed=remote + local, remote=remote, local=local, errors=errors)
    report("done", detail="Run completed", metrics=asdict(summary))
    return {"summary": asdict(summary), "results": results}
