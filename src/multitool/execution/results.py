"""Execution-scoped results table."""

import threading
from typing import Dict, Iterable, Iterator, List, Optional

from multitool.plan.models import StepResult


class ResultsTable:
    """Maps result keys (step ids, or ``<id>_iter<n>``) to step outcomes.

    One table is created per plan execution and dropped when it returns.
    All access goes through a lock so concurrent branches can record safely.
    """

    def __init__(self):
        self._results: Dict[str, StepResult] = {}
        self._lock = threading.Lock()

    def record(self, key: str, result: StepResult) -> None:
        with self._lock:
            self._results[key] = result

    def get(self, key: str) -> Optional[StepResult]:
        with self._lock:
            return self._results.get(key)

    def succeeded(self, key: str) -> bool:
        result = self.get(key)
        return result is not None and result.success

    def in_order(self, keys: Iterable[str]) -> List[StepResult]:
        """Recorded results for ``keys``, in the order given, skipping absent keys."""
        with self._lock:
            return [self._results[key] for key in keys if key in self._results]

    def snapshot(self) -> Dict[str, StepResult]:
        with self._lock:
            return dict(self._results)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._results

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())
