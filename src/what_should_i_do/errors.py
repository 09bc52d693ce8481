from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorCode(str, Enum):
    INPUT_TOO_SHORT = "INPUT_TOO_SHORT"
    API_KEY_EXHAUSTED = "API_KEY_EXHAUSTED"
    ALL_KEYS_EXHAUSTED = "ALL_KEYS_EXHAUSTED"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    INVALID_JSON = "INVALID_JSON"
    TRANSLATION_FAILED = "TRANSLATION_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AnalysisError(Exception):
    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN_ERROR, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"AnalysisError(code={self.code.value!r}, retryable={self.retryable}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "retryable": self.retryable}


def create_error(
    message: str,
    code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
    retryable: bool = False,
) -> AnalysisError:
    return AnalysisError(message, code, retryable)


def get_error_message(error: BaseException | None) -> str:
    if isinstance(error, AnalysisError):
        return error.message
    if error is not None and str(error):
        return str(error)
    return "An unexpected error occurred"


def is_retryable_error(error: BaseException | None) -> bool:
    if isinstance(error, AnalysisError):
        return error.retryable
    if error is None:
        return False
    message = str(error).lower()
    return "rate limit" in message or "network" in message or "timeout" in message


def is_exhaustion(error: BaseException | None) -> bool:
    """True for the one remote failure that must reach the caller."""
    return isinstance(error, AnalysisError) and error.code == ErrorCode.ALL_KEYS_EXHAUSTED
