# src/towergen/errors.py
# Exception hierarchy. Only GenerationFailed and InvariantViolation ever
# reach a caller; MapGenerationFailed is the internal "discard this attempt".

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional


class Rejection(Enum):
    DEAD_END = "dead_end"
    PATH_TOO_LONG = "path_too_long"
    BAD_ADJACENCY = "bad_adjacency"
    ENDPOINTS_TOO_CLOSE = "endpoints_too_close"
    SPLIT_ENDPOINTS = "split_endpoints"
    SPLIT_STALLED = "split_stalled"
    NO_SPLIT = "no_split"


class TowerGenError(Exception):
    pass


class ConfigError(TowerGenError, ValueError):
    pass


class MapGenerationFailed(TowerGenError):
    """A single attempt was rejected; the orchestrator starts over."""

    def __init__(self, reason: Rejection, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)


class GenerationFailed(TowerGenError):
    def __init__(self, attempts: int, rejections: Optional[Mapping[str, int]] = None) -> None:
        self.attempts = attempts
        self.rejections = dict(rejections or {})
        summary = ", ".join(f"{k}={v}" for k, v in sorted(self.rejections.items()))
        super().__init__(f"no acceptable map after {attempts} attempts ({summary or 'no rejections'})")


class InvariantViolation(TowerGenError):
    """An accepted map broke an invariant: a logic defect, not bad luck."""
