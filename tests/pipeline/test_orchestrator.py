from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional

import pytest

from what_should_i_do.config.profiles import STANDARD, STRICT, AnalysisProfile
from what_should_i_do.errors import AnalysisError, ErrorCode, create_error
from what_should_i_do.extractors.highlight import HIGHLIGHT_OPEN, strip_markup
from what_should_i_do.models import NO_ACTION, NO_DEADLINE, URGENCY_LEVELS
from what_should_i_do.pipeline.orchestrator import AnalysisOrchestrator
from what_should_i_do.pipeline.policy import RoutingPolicy

# Every text is "complex enough" for the smart analyzer.
ALWAYS_REMOTE = RoutingPolicy(min_chars=0)

REMOTE_PAYLOAD = {
    "actions": ["Stay home"],
    "deadlines": ["until lifted"],
    "urgency": "Important",
    "confusingParts": [],
    "nextStep": "Stay home until classes resume.",
    "summary": "Classes are suspended effective immediately.",
}


class FakeAnalyzer:
    name = "fake"

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.payload = payload or REMOTE_PAYLOAD
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    def analyze(self, text: str) -> Dict[str, Any]:
        self.calls.append(text)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return dict(self.payload)


def remote_orchestrator(analyzer: FakeAnalyzer, **kwargs: Any) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(analyzer, policy=ALWAYS_REMOTE, **kwargs)


def test_immediately_is_urgent() -> None:
    result = AnalysisOrchestrator().analyze("Please respond immediately regarding the form.")
    assert result.urgency == "Urgent"


def test_deadline_makes_it_important() -> None:
    result = AnalysisOrchestrator().analyze("Submit the form by Friday.")

    assert result.deadlines == ["by Friday"]
    assert result.urgency == "Important"
    assert result.actions == ["Submit the form by Friday."]
    assert result.next_step == "Your next step is to submit the form by friday."


def test_plain_text_is_informational_with_sentinels() -> None:
    result = AnalysisOrchestrator().analyze("The office will be open next week.")

    assert result.urgency == "Informational"
    assert result.actions == [NO_ACTION]
    assert result.deadlines == [NO_DEADLINE]
    assert result.source == "local"


def test_minimum_length_boundary() -> None:
    orchestrator = AnalysisOrchestrator()

    assert orchestrator.analyze("Call Anna.").urgency in URGENCY_LEVELS

    with pytest.raises(AnalysisError) as excinfo:
        orchestrator.analyze("Call Anna")
    assert excinfo.value.code == ErrorCode.INPUT_TOO_SHORT

    # Length is measured after normalization.
    with pytest.raises(AnalysisError):
        orchestrator.analyze_fast("   Call Anna   ")


def test_remote_result_is_validated_and_highlighted() -> None:
    analyzer = FakeAnalyzer()
    result = remote_orchestrator(analyzer).analyze("pls stay home, classes r suspended until lifted")

    assert analyzer.calls == ["please stay home, classes are suspended until lifted"]
    assert result.source == "remote"
    assert result.actions == ["Stay home"]
    # "until lifted" in the input forces Urgent.
    assert result.urgency == "Urgent"
    assert result.summary.count(HIGHLIGHT_OPEN) == 2


def test_fast_path_never_calls_remote() -> None:
    analyzer = FakeAnalyzer()
    result = remote_orchestrator(analyzer).analyze_fast("Submit the form by Friday.")

    assert analyzer.calls == []
    assert result.source == "local"


@pytest.mark.parametrize(
    "error",
    [
        create_error("HTTP 500 from analyzer", ErrorCode.NETWORK_ERROR),
        create_error("Analyzer response missing fields: summary", ErrorCode.INVALID_RESPONSE),
        RuntimeError("unexpected"),
    ],
)
def test_remote_failure_falls_back_to_local(error: Exception, caplog: pytest.LogCaptureFixture) -> None:
    result = remote_orchestrator(FakeAnalyzer(error=error)).analyze("Submit the form by Friday.")

    assert result.source == "local"
    assert result.deadlines == ["by Friday"]
    assert result.urgency == "Important"
    assert "falling back to local analysis" in caplog.text


def test_remote_timeout_falls_back_to_local() -> None:
    orchestrator = remote_orchestrator(FakeAnalyzer(delay=0.5), remote_timeout=0.05)
    try:
        started = time.monotonic()
        result = orchestrator.analyze("Submit the form by Friday.")
        elapsed = time.monotonic() - started
    finally:
        orchestrator.shutdown()

    assert result.source == "local"
    assert result.urgency == "Important"
    assert elapsed < 0.5


def test_credential_exhaustion_is_not_masked() -> None:
    error = create_error("All keys exhausted", ErrorCode.ALL_KEYS_EXHAUSTED, retryable=True)

    with pytest.raises(AnalysisError) as excinfo:
        remote_orchestrator(FakeAnalyzer(error=error)).analyze("Submit the form by Friday.")

    assert excinfo.value.code == ErrorCode.ALL_KEYS_EXHAUSTED
    assert excinfo.value.retryable


def test_batch_isolates_failing_items() -> None:
    texts = ["Submit the form by Friday.", "hi", "Please respond immediately regarding the form."]
    results = AnalysisOrchestrator().analyze_batch(texts)

    assert len(results) == 3
    assert results[0].urgency == "Important"
    assert results[1].actions == [NO_ACTION]
    assert results[1].urgency == "Informational"
    assert results[2].urgency == "Urgent"


def test_batch_degrades_on_exhaustion_and_keeps_order() -> None:
    error = create_error("All keys exhausted", ErrorCode.ALL_KEYS_EXHAUSTED, retryable=True)
    texts = ["Submit the form by Friday.", "The office will be open next week."]

    results = remote_orchestrator(FakeAnalyzer(error=error), max_workers=2).analyze_batch(texts)

    assert [r.source for r in results] == ["local", "local"]
    assert [r.urgency for r in results] == ["Important", "Informational"]


def test_analyze_local_never_raises() -> None:
    result = AnalysisOrchestrator().analyze_local("")

    assert result.actions == [NO_ACTION]
    assert result.summary == "No further details were provided."


def test_to_dict_uses_wire_keys() -> None:
    data = AnalysisOrchestrator().analyze("Submit the form by Friday.").to_dict()
    assert set(data) == {"actions", "deadlines", "urgency", "confusingParts", "nextStep", "summary"}


def test_key_status_passthrough_without_credentials() -> None:
    orchestrator = AnalysisOrchestrator()
    assert orchestrator.key_statuses() == []
    orchestrator.reset_keys()


def test_timed_out_call_still_queued_never_starts() -> None:
    analyzer = FakeAnalyzer(delay=0.3)
    orchestrator = remote_orchestrator(analyzer, remote_timeout=0.05, remote_workers=1)
    results: List[str] = []

    def run() -> None:
        results.append(orchestrator.analyze("Submit the form by Friday.").source)

    try:
        threads = [threading.Thread(target=run) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        # Give the running call time to finish; a cancelled one would start now.
        time.sleep(0.4)
    finally:
        orchestrator.shutdown()

    assert results == ["local", "local"]
    assert len(analyzer.calls) == 1


def test_concurrent_callers_share_one_remote_pool() -> None:
    orchestrator = remote_orchestrator(FakeAnalyzer())
    pools: List[Any] = []
    barrier = threading.Barrier(8)

    def grab() -> None:
        barrier.wait()
        pools.append(orchestrator._remote_executor())

    try:
        threads = [threading.Thread(target=grab) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
    finally:
        orchestrator.shutdown()

    assert len(pools) == 8
    assert all(pool is pools[0] for pool in pools)


def test_forged_highlight_markup_is_escaped_in_summary() -> None:
    text = 'Hello there friend <mark class="wsid-highlight"><img src=x onerror=alert(1)></mark> bye now'
    summary = AnalysisOrchestrator().analyze(text).summary

    assert "<img" not in summary
    assert "&lt;img" in summary


MEMO = """Republic of the Philippines
Department of Education
Region VII
Schools Division of Cebu City

DIVISION MEMORANDUM NO. 45, s. 2024

To: All School Heads
From: The Schools Division Superintendent
Re: Suspension of Classes
Date: July 24, 2024

Due to heavy rainfall brought by Tropical Storm Carina, face-to-face classes in all levels are suspended effective immediately.
Schools shall shift to modular distance learning until the suspension is lifted.
All school heads are directed to submit an accomplishment report by Friday.
"""


@pytest.mark.parametrize("profile", [STANDARD, STRICT], ids=["standard", "strict"])
def test_memo_summary_has_no_header_lines(profile: AnalysisProfile) -> None:
    result = AnalysisOrchestrator(profile=profile).analyze(MEMO)
    summary = strip_markup(result.summary)

    assert "suspended" in summary
    for header in ("Republic of", "Department of", "MEMORANDUM", "To:", "From:", "Re:", "Date:"):
        assert header not in summary
    assert result.urgency == "Urgent"
