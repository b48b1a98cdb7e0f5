from __future__ import annotations

import logging
import threading
from typing import Any

logger = logging.getLogger(__name__)


class GenerationCounter:
    """Monotonic per-key request tokens.

    Each fetch-and-aggregate cycle takes a new token; only the holder of the
    latest token for a key may publish its result.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: dict[str, int] = {}

    def begin(self, key: str) -> int:
        with self._lock:
            token = self._current.get(key, 0) + 1
            self._current[key] = token
            return token

    def current(self, key: str) -> int:
        with self._lock:
            return self._current.get(key, 0)

    def is_current(self, key: str, token: int) -> bool:
        return self.current(key) == token


class ReportStore:
    def __init__(self, generations: GenerationCounter | None = None):
        self.generations = generations or GenerationCounter()
        self._lock = threading.Lock()
        self._results: dict[str, Any] = {}

    def begin(self, key: str) -> int:
        return self.generations.begin(key)

    def publish(self, key: str, token: int, value: Any) -> bool:
        with self._lock:
            if not self.generations.is_current(key, token):
                current = self.generations.current(key)
                logger.info(
                    "Discarding stale %s result (token %d, current %d).",
                    key,
                    token,
                    current,
                    extra={"report": key, "token": token, "current_token": current},
                )
                return False
            self._results[key] = value
            return True

    def latest(self, key: str) -> Any:
        with self._lock:
            return self._results.get(key)

    def clear(self) -> None:
        with self._lock:
            self._results.clear()


__all__ = ["GenerationCounter", "ReportStore"]
