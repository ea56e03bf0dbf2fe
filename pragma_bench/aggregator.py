"""
Best-result aggregation across pragma configurations.

For every strategy the aggregator keeps the minimum duration observed and the
pragma sets that achieved it. Updates are atomic under a lock so a parallel
driver can share one instance.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from pragma_bench.pragmas import PragmaSet


class TiePolicy(str, enum.Enum):
    """
    What happens when a run matches the current best duration exactly.

    FIRST_SEEN keeps the configuration that reached the minimum first.
    ACCUMULATE appends every distinct configuration tied at the minimum.
    """

    FIRST_SEEN = "first_seen"
    ACCUMULATE = "accumulate"


@dataclass(frozen=True)
class BestResult:
    strategy: str
    duration_seconds: float
    pragma_sets: Tuple[PragmaSet, ...]

    @property
    def duration_ms(self) -> float:
        return self.duration_seconds * 1000.0


class BestResults:
    """
    Thread-safe map of strategy name -> BestResult.

    Parameters
    ----------
    tie_policy : TiePolicy | str
        Handling of equal durations; defaults to first-seen-wins.
    """

    def __init__(self, tie_policy: TiePolicy | str = TiePolicy.FIRST_SEEN) -> None:
        self.tie_policy = TiePolicy(tie_policy)
        self._lock = threading.Lock()
        self._best: Dict[str, BestResult] = {}

    def record(self, strategy: str, pragmas: Sequence[str], duration_seconds: float) -> bool:
        """
        Offer a measurement; return True when the stored best changed.

        The pragma set is copied into an immutable tuple, so later mutation of
        the caller's sequence cannot alter stored winners.
        """
        pragma_set: PragmaSet = tuple(pragmas)
        with self._lock:
            current = self._best.get(strategy)
            if current is None or duration_seconds < current.duration_seconds:
                self._best[strategy] = BestResult(strategy, duration_seconds, (pragma_set,))
                return True
            if (
                duration_seconds == current.duration_seconds
                and self.tie_policy is TiePolicy.ACCUMULATE
                and pragma_set not in current.pragma_sets
            ):
                self._best[strategy] = BestResult(
                    strategy, duration_seconds, current.pragma_sets + (pragma_set,)
                )
                return True
            return False

    def get(self, strategy: str) -> Optional[BestResult]:
        with self._lock:
            return self._best.get(strategy)

    def snapshot(self) -> List[BestResult]:
        """All best results, sorted by strategy name."""
        with self._lock:
            return [self._best[name] for name in sorted(self._best)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._best)

    def __contains__(self, strategy: object) -> bool:
        with self._lock:
            return strategy in self._best


__all__ = ["BestResult", "BestResults", "TiePolicy"]
