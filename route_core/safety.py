from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass
class SafetyConfig:
    max_expansions: int | None = None
    max_seconds: float | None = None


class SearchGuard:
    """Stops a search that runs past its expansion or wall-clock ceiling."""

    def __init__(self, config: SafetyConfig | None = None) -> None:
        self.config = config or SafetyConfig()
        if self.config.max_expansions is not None and self.config.max_expansions <= 0:
            raise ValueError(f"max_expansions must be positive: {self.config.max_expansions}")
        if self.config.max_seconds is not None and self.config.max_seconds <= 0:
            raise ValueError(f"max_seconds must be positive: {self.config.max_seconds}")
        self.started_at = time.monotonic()
        self.stop_reason: str | None = None

    def evaluate(self, expansions: int) -> bool:
        """Return True while the search may expand another node."""
        if self.config.max_expansions is not None and expansions >= self.config.max_expansions:
            self.stop_reason = "max_expansions"
            return False

        if self.config.max_seconds is not None:
            elapsed = time.monotonic() - self.started_at
            if elapsed >= self.config.max_seconds:
                self.stop_reason = "max_seconds"
                return False

        return True
