from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from threading import Lock
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class APIKeyStatus:
    key_index: int
    error: Optional[str] = None
    is_exhausted: bool = False
    is_rate_limited: bool = False

    @property
    def usable(self) -> bool:
        return not (self.is_exhausted or self.is_rate_limited)


class KeyStatusTable:
    """
    Exhaustion/rate-limit bookkeeping for an ordered list of credentials.

    Advisory only: concurrent requests may race to mark the same key, and
    the last write wins. Each read-modify-write of an entry holds the lock.
    """

    def __init__(self, key_count: int) -> None:
        self._lock = Lock()
        self._key_count = key_count
        self._statuses: List[APIKeyStatus] = [APIKeyStatus(key_index=i) for i in range(key_count)]

    def __len__(self) -> int:
        return self._key_count

    def get(self, key_index: int) -> APIKeyStatus:
        with self._lock:
            return self._statuses[key_index]

    def is_usable(self, key_index: int) -> bool:
        return self.get(key_index).usable

    def mark_failed(
        self,
        key_index: int,
        error: str,
        *,
        exhausted: bool = False,
        rate_limited: bool = False,
    ) -> APIKeyStatus:
        with self._lock:
            current = self._statuses[key_index]
            updated = replace(
                current,
                error=error,
                is_exhausted=current.is_exhausted or exhausted,
                is_rate_limited=current.is_rate_limited or rate_limited,
            )
            self._statuses[key_index] = updated
        if exhausted or rate_limited:
            # Keys are referenced by position only; values never reach the log.
            logger.warning(
                "API key %d marked %s: %s",
                key_index + 1,
                "exhausted" if exhausted else "rate limited",
                error,
            )
        return updated

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for status in self._statuses if status.usable)

    def reset(self) -> None:
        with self._lock:
            self._statuses = [APIKeyStatus(key_index=i) for i in range(self._key_count)]

    def snapshot(self) -> List[Dict[str, Any]]:
        # Return copies to avoid mutation by callers.
        with self._lock:
            return [asdict(status) for status in self._statuses]
