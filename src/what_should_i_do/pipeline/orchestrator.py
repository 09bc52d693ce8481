from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from what_should_i_do.analyzers.base import RemoteAnalyzer
from what_should_i_do.config.profiles import STANDARD, AnalysisProfile
from what_should_i_do.errors import ErrorCode, create_error, get_error_message, is_exhaustion
from what_should_i_do.extractors.highlight import highlight_phrases
from what_should_i_do.extractors.summary import build_summarizer
from what_should_i_do.models import NO_ACTION, NO_DEADLINE, NO_SUMMARY, AnalysisResult, with_sentinels
from what_should_i_do.parsing.normalizer import normalize_text, pad_short_text
from what_should_i_do.parsing.segmenter import segment
from what_should_i_do.pipeline.policy import RoutingPolicy, choose_path
from what_should_i_do.pipeline.validation import coerce_remote_result
from what_should_i_do.rules.classification import default_rules, extract

logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 10


class AnalysisOrchestrator:
    """
    Runs one text through normalize -> decide path -> remote or local
    analysis -> validate -> highlight.

    The remote analyzer is optional. Any remote failure falls back to the
    rule-based analysis, except credential exhaustion, which is raised to
    the caller. Once a request has fallen back it never retries remote.
    """

    def __init__(
        self,
        analyzer: Optional[RemoteAnalyzer] = None,
        *,
        profile: AnalysisProfile = STANDARD,
        policy: Optional[RoutingPolicy] = None,
        remote_timeout: float = 12.0,
        min_input_length: int = MIN_INPUT_LENGTH,
        max_remote_chars: int = 12000,
        max_workers: int = 1,
        remote_workers: int = 4,
    ):
        self.analyzer = analyzer
        self.profile = profile
        self.policy = policy or RoutingPolicy()
        self.remote_timeout = remote_timeout
        self.min_input_length = min_input_length
        self.max_remote_chars = max_remote_chars
        self.max_workers = max(1, max_workers)
        self.rules = default_rules(profile.rules)
        self.summarizer = build_summarizer(profile.summary, profile.rules)
        self.remote_workers = max(1, remote_workers)
        self._remote_pool: Optional[ThreadPoolExecutor] = None
        self._pool_lock = threading.Lock()

    # --- Entry points ---

    def analyze(self, text: str) -> AnalysisResult:
        normalized = self._normalize_checked(text)
        path, reason = choose_path(
            normalized,
            self.policy,
            self.profile.rules,
            remote_available=self.analyzer is not None,
        )
        logger.info("Analyzing %d chars on the %s path (%s)", len(normalized), path, reason)

        if path == "remote":
            result = self._analyze_remote(normalized)
            if result is not None:
                return result
        return self._analyze_local(normalized)

    def analyze_fast(self, text: str) -> AnalysisResult:
        """Rule-based only; still enforces the minimum input length."""
        return self._analyze_local(self._normalize_checked(text))

    def analyze_local(self, text: str) -> AnalysisResult:
        """Rule-based analysis of any string. Never raises."""
        return self._analyze_local(normalize_text(text or "", self.profile.normalizer, pad=False))

    def analyze_batch(self, texts: Sequence[str]) -> List[AnalysisResult]:
        """Analyze each text independently; results keep input order."""
        if self.max_workers > 1 and len(texts) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="wsid-batch") as pool:
                return list(pool.map(self._analyze_item, range(len(texts)), texts))
        return [self._analyze_item(index, text) for index, text in enumerate(texts)]

    def shutdown(self) -> None:
        with self._pool_lock:
            pool, self._remote_pool = self._remote_pool, None
        if pool is not None:
            # Abandoned remote calls finish on their own; queued ones never start.
            pool.shutdown(wait=False, cancel_futures=True)

    # --- Credential status passthrough ---

    def key_statuses(self) -> List[Dict[str, Any]]:
        getter = getattr(self.analyzer, "get_key_statuses", None)
        return getter() if getter else []

    def reset_keys(self) -> None:
        resetter = getattr(self.analyzer, "reset_key_statuses", None)
        if resetter:
            resetter()
            logger.info("Credential status table reset")

    # --- Internals ---

    def _analyze_item(self, index: int, text: str) -> AnalysisResult:
        try:
            return self.analyze(text)
        except Exception as exc:
            logger.warning(
                "Batch item %d failed (%s); using local analysis",
                index,
                getattr(getattr(exc, "code", None), "value", type(exc).__name__),
            )
            return self.analyze_local(text)

    def _normalize_checked(self, text: str) -> str:
        normalized = normalize_text(text or "", self.profile.normalizer, pad=False)
        if len(normalized) < self.min_input_length:
            raise create_error(
                f"Please provide at least {self.min_input_length} characters of text to analyze.",
                ErrorCode.INPUT_TOO_SHORT,
            )
        return normalized

    def _analyze_remote(self, normalized: str) -> Optional[AnalysisResult]:
        """Return a validated remote result, or None to fall back."""
        analyzer = self.analyzer
        if analyzer is None:
            return None
        future = self._remote_executor().submit(analyzer.analyze, normalized[: self.max_remote_chars])
        try:
            payload = future.result(timeout=self.remote_timeout)
        except FutureTimeout:
            # Still queued means nobody is waiting for it any more.
            future.cancel()
            logger.warning(
                "%s analyzer timed out after %.1fs; falling back to local analysis",
                analyzer.name,
                self.remote_timeout,
            )
            return None
        except Exception as exc:
            if is_exhaustion(exc):
                raise
            logger.warning(
                "%s analyzer failed (%s); falling back to local analysis",
                analyzer.name,
                get_error_message(exc),
            )
            return None

        result = coerce_remote_result(payload, normalized, self.profile)
        return self._finish(result)

    def _remote_executor(self) -> ThreadPoolExecutor:
        with self._pool_lock:
            if self._remote_pool is None:
                self._remote_pool = ThreadPoolExecutor(
                    max_workers=self.remote_workers, thread_name_prefix="wsid-remote"
                )
            return self._remote_pool

    def _analyze_local(self, normalized: str) -> AnalysisResult:
        padded = pad_short_text(normalized, self.profile.normalizer)
        sentences = segment(padded, self.profile.rules)
        found = extract(sentences, padded, self.profile.rules, self.rules)
        summary = self.summarizer.summarize(sentences) or NO_SUMMARY

        return self._finish(
            AnalysisResult(
                actions=with_sentinels(found.actions, NO_ACTION),
                deadlines=with_sentinels(found.deadlines, NO_DEADLINE),
                urgency=found.urgency,
                confusing_parts=found.confusing_parts,
                next_step=found.next_step,
                summary=summary,
                source="local",
            )
        )

    def _finish(self, result: AnalysisResult) -> AnalysisResult:
        return replace(result, summary=highlight_phrases(result.summary, self.profile.highlight_phrases))
