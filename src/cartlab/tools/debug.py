"""Opt-in timing instrumentation, switched on with ``CARTLAB_DEBUG=1``.

Timed blocks log their duration at DEBUG level and accumulate per-label
totals so a session can report where time went when it ends.
"""

from __future__ import annotations

import logging
import os
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator

DEBUG_CARTLAB = os.getenv("CARTLAB_DEBUG", "").lower() in {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


@dataclass
class BlockTiming:
    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def add(self, elapsed_ms: float) -> None:
        self.count += 1
        self.total_ms += elapsed_ms
        self.max_ms = max(self.max_ms, elapsed_ms)

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


_timings: Dict[str, BlockTiming] = defaultdict(BlockTiming)


def debug_enabled() -> bool:
    return DEBUG_CARTLAB


@contextmanager
def time_block(label: str, *, emitter: Callable[[str], None] | None = None) -> Iterator[None]:
    """
    Time the enclosed block when debugging is enabled.

    ``emitter`` receives the formatted message instead of the module logger.
    """
    if not DEBUG_CARTLAB:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        _timings[label].add(elapsed_ms)
        (emitter or logger.debug)(f"[DEBUG] {label} took {elapsed_ms:.3f} ms")


def timing_summary() -> Dict[str, BlockTiming]:
    """Copy of the accumulated per-label timings."""
    return {label: BlockTiming(t.count, t.total_ms, t.max_ms) for label, t in _timings.items()}


def log_timing_summary() -> None:
    for label, timing in sorted(timing_summary().items()):
        logger.info(
            "%s: %d calls, mean %.3f ms, max %.3f ms",
            label,
            timing.count,
            timing.mean_ms,
            timing.max_ms,
        )


def reset_timings() -> None:
    _timings.clear()
