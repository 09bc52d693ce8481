"""
Ollama-powered analyzer for a locally hosted model.

- STRICT JSON output (Ollama's ``format: "json"``)
- Retries on empty / unparsable output
- Surfaces transport failures as AnalysisError so the orchestrator can fall back
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from what_should_i_do.analyzers.base import SYSTEM_PROMPT, build_user_message, parse_payload
from what_should_i_do.errors import AnalysisError, ErrorCode, create_error

logger = logging.getLogger(__name__)


class OllamaAnalyzer:
    name = "ollama"

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        request_timeout: float = 60.0,
        max_retries: int = 1,
        retry_backoff_sec: float = 0.4,
        max_input_chars: int = 6000,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.max_retries = max_retries
        self.retry_backoff_sec = retry_backoff_sec
        self.max_input_chars = max_input_chars

    def analyze(self, text: str) -> Dict[str, Any]:
        # Keep prompt small to reduce truncation / improve determinism
        prompt = build_user_message(text[: self.max_input_chars])

        last_err: Optional[AnalysisError] = None
        for attempt in range(self.max_retries + 1):
            try:
                result = self._call_ollama(prompt)
                return parse_payload(result.get("response"))
            except AnalysisError as exc:
                # Transport failures are not retried here; the orchestrator falls back.
                if exc.code in (ErrorCode.NETWORK_ERROR, ErrorCode.TIMEOUT):
                    raise
                last_err = exc
                logger.debug("Ollama attempt %d returned unusable output: %s", attempt + 1, exc.message)
                if attempt < self.max_retries:
                    time.sleep(self.retry_backoff_sec * (attempt + 1))

        raise last_err or create_error("Ollama produced no usable output", ErrorCode.INVALID_RESPONSE)

    def _call_ollama(self, prompt: str) -> Dict[str, Any]:
        """Low-level call to Ollama /api/generate"""
        payload = {
            "model": self.model,
            "system": SYSTEM_PROMPT,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            # Disable thinking mode for thinking models (e.g., Qwen3)
            "think": False,
            "options": {
                "temperature": 0,
                "num_predict": 900,
            },
        }

        try:
            response = requests.post(
                f"{self.base_url}/api/generate",
                json=payload,
                timeout=self.request_timeout,
            )
            response.raise_for_status()
        except requests.Timeout as exc:
            raise create_error(f"Ollama request timed out: {exc}", ErrorCode.TIMEOUT) from exc
        except requests.RequestException as exc:
            raise create_error(f"Ollama request failed: {exc}", ErrorCode.NETWORK_ERROR) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise create_error("Ollama returned a non-JSON envelope", ErrorCode.INVALID_RESPONSE) from exc
        if not isinstance(data, dict):
            raise create_error("Ollama returned an unexpected envelope", ErrorCode.INVALID_RESPONSE)
        return data
