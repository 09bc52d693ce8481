from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, OpenAIError

from what_should_i_do.analyzers.base import SYSTEM_PROMPT, build_user_message, parse_payload
from what_should_i_do.config.settings import DEFAULT_OPENROUTER_MODEL, DEFAULT_OPENROUTER_URL
from what_should_i_do.errors import AnalysisError, ErrorCode, create_error, get_error_message
from what_should_i_do.storage.key_status import KeyStatusTable

logger = logging.getLogger(__name__)

APP_TITLE = "What Should I Do - Text Analysis"

_EXHAUSTION_MARKERS = ("credit", "quota", "insufficient")
_RETRYABLE_CODES = {"insufficient_credits", "rate_limit_exceeded"}


class OpenRouterAnalyzer:
    """
    Chat-completion analyzer on OpenRouter (OpenAI-compatible API).

    Keys are tried in order, skipping those already marked exhausted or
    rate-limited. A credit/quota/rate-limit failure marks the key and moves
    on to the next; any other failure stops the rotation.
    """

    name = "openrouter"

    def __init__(
        self,
        api_keys: Sequence[str],
        *,
        model: str = DEFAULT_OPENROUTER_MODEL,
        base_url: str = DEFAULT_OPENROUTER_URL,
        app_url: str = "http://localhost:3000",
        request_timeout: float = 30.0,
        key_status: Optional[KeyStatusTable] = None,
        client_factory: Optional[Callable[[str], Any]] = None,
    ):
        self.api_keys: List[str] = [k for k in api_keys if k]
        self.model = model
        self.base_url = base_url
        self.app_url = app_url
        self.request_timeout = request_timeout
        self.key_status = key_status or KeyStatusTable(len(self.api_keys))
        self._client_factory = client_factory or self._default_client
        self._clients: Dict[int, Any] = {}

    def _default_client(self, api_key: str) -> OpenAI:
        # Retries are handled by key rotation, not by the SDK.
        return OpenAI(
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.request_timeout,
            max_retries=0,
        )

    def _client(self, key_index: int) -> Any:
        if key_index not in self._clients:
            self._clients[key_index] = self._client_factory(self.api_keys[key_index])
        return self._clients[key_index]

    def analyze(self, text: str) -> Dict[str, Any]:
        if not self.api_keys:
            raise create_error("No OpenRouter API keys configured", ErrorCode.API_KEY_EXHAUSTED)

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_message(text)},
        ]

        last_error: Optional[Exception] = None
        for key_index in range(len(self.api_keys)):
            if not self.key_status.is_usable(key_index):
                continue
            try:
                content = self._complete(messages, key_index)
                return parse_payload(content)
            except (OpenAIError, AnalysisError) as exc:
                last_error = exc
                if not self.is_credential_error(exc):
                    break

        if self.key_status.active_count() == 0:
            raise create_error(
                "All OpenRouter API keys are exhausted or rate limited. Please try again later.",
                ErrorCode.ALL_KEYS_EXHAUSTED,
                retryable=True,
            )
        if isinstance(last_error, AnalysisError):
            raise last_error
        raise create_error(
            get_error_message(last_error) or "Failed to analyze text with OpenRouter",
            _error_code(last_error),
        ) from last_error

    def _complete(self, messages: List[Dict[str, str]], key_index: int) -> str:
        try:
            resp = self._client(key_index).chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.1,
                max_tokens=900,
                response_format={"type": "json_object"},
                extra_headers={"HTTP-Referer": self.app_url, "X-Title": APP_TITLE},
            )
        except APIStatusError as exc:
            self._record_failure(key_index, exc)
            raise

        choices = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise create_error("Empty response from OpenRouter", ErrorCode.INVALID_RESPONSE)
        return content

    def _record_failure(self, key_index: int, exc: APIStatusError) -> None:
        message = get_error_message(exc)
        lower = message.lower()
        exhausted = exc.status_code == 402 or any(m in lower for m in _EXHAUSTION_MARKERS)
        rate_limited = exc.status_code == 429 or "rate limit" in lower
        code = getattr(exc, "code", None)
        if code == "insufficient_credits":
            exhausted = True
        elif code == "rate_limit_exceeded":
            rate_limited = True
        if exhausted or rate_limited:
            self.key_status.mark_failed(key_index, message, exhausted=exhausted, rate_limited=rate_limited)
        else:
            logger.warning("OpenRouter API key %d failed: %s", key_index + 1, message)

    @staticmethod
    def is_credential_error(exc: Exception) -> bool:
        """Failures worth trying the next key for."""
        if isinstance(exc, APIStatusError):
            if exc.status_code in (402, 429):
                return True
            if getattr(exc, "code", None) in _RETRYABLE_CODES:
                return True
        lower = get_error_message(exc).lower()
        return any(m in lower for m in (*_EXHAUSTION_MARKERS, "rate limit", "exhausted"))

    def get_key_statuses(self) -> List[Dict[str, Any]]:
        return self.key_status.snapshot()

    def reset_key_statuses(self) -> None:
        self.key_status.reset()


def _error_code(exc: Optional[Exception]) -> ErrorCode:
    if isinstance(exc, APITimeoutError):
        return ErrorCode.TIMEOUT
    if isinstance(exc, APIConnectionError):
        return ErrorCode.NETWORK_ERROR
    if isinstance(exc, APIStatusError):
        return ErrorCode.RATE_LIMITED if exc.status_code == 429 else ErrorCode.NETWORK_ERROR
    return ErrorCode.UNKNOWN_ERROR
