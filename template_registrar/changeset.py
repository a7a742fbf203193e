"""Recover the template files added by the most recent change.

The resolver walks an ordered list of strategies. Each one returns a tagged
:class:`StrategyResult`; the driver stops at the first ``FOUND`` result and
advances on ``EMPTY`` or ``TOOLING_ERROR``. History problems never escape
:meth:`ChangeSetResolver.resolve`, which returns an empty list instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from template_registrar.errors import HistoryUnavailable
from template_registrar.parser import is_template_candidate

_LOGGER = logging.getLogger(__name__)


class _HistoryProtocol(Protocol):
    def added_between(self, base: str, tip: str) -> List[str]: ...

    def added_in(self, commit: str) -> List[str]: ...

    def commit_count(self, ref: str = "HEAD") -> int: ...


class StrategyStatus(str, Enum):
    FOUND = "found"
    EMPTY = "empty"
    TOOLING_ERROR = "tooling_error"


@dataclass(frozen=True)
class StrategyResult:
    """Answer produced by a single change-set strategy."""

    status: StrategyStatus
    paths: Tuple[str, ...] = ()
    cause: Optional[str] = None

    @classmethod
    def found(cls, paths: Sequence[str]) -> "StrategyResult":
        return cls(status=StrategyStatus.FOUND, paths=tuple(paths))

    @classmethod
    def empty(cls) -> "StrategyResult":
        return cls(status=StrategyStatus.EMPTY)

    @classmethod
    def tooling_error(cls, cause: str) -> "StrategyResult":
        return cls(status=StrategyStatus.TOOLING_ERROR, cause=cause)


@dataclass(frozen=True)
class Strategy:
    """Named strategy in the resolution chain.

    ``only_after_failure`` strategies run only when no earlier strategy
    managed to query history successfully.
    """

    name: str
    ref: str
    run: Callable[[], StrategyResult]
    only_after_failure: bool = False


class ChangeSetResolver:
    """Produce the template paths added by the tip of history."""

    def __init__(
        self,
        history: _HistoryProtocol,
        *,
        tip: str = "HEAD",
        external_ref: Optional[str] = None,
        candidate_filter: Callable[[str], bool] = is_template_candidate,
    ) -> None:
        self._history = history
        self._tip = tip
        self._external_ref = external_ref
        self._candidate_filter = candidate_filter
        self._resolved_ref: Optional[str] = None

    @property
    def resolved_ref(self) -> Optional[str]:
        """Commit whose added files were returned by the last resolve."""
        return self._resolved_ref

    def resolve(self) -> List[str]:
        self._resolved_ref = None
        answered = False
        for strategy in self.strategies():
            if strategy.only_after_failure and answered:
                _LOGGER.debug(
                    "Skipping %s; history was queried successfully",
                    strategy.name,
                )
                continue

            result = strategy.run()
            if result.status is StrategyStatus.FOUND:
                _LOGGER.info(
                    "Strategy %s found %d added template file(s)",
                    strategy.name,
                    len(result.paths),
                )
                self._resolved_ref = strategy.ref
                return list(result.paths)

            if result.status is StrategyStatus.EMPTY:
                answered = True
                _LOGGER.info(
                    "Strategy %s found no added template files",
                    strategy.name,
                )
            else:
                _LOGGER.warning(
                    "Strategy %s failed: %s", strategy.name, result.cause
                )

        _LOGGER.info("No added template files detected")
        return []

    def strategies(self) -> List[Strategy]:
        """Build the ordered chain for the current repository state."""
        chain: List[Strategy] = []

        depth = self._history_depth()
        if depth is not None and depth > 1:
            chain.append(
                Strategy("parent-diff", self._tip, self._parent_diff)
            )
        else:
            _LOGGER.info(
                "History depth %s; skipping parent diff",
                "unknown" if depth is None else depth,
            )

        chain.append(
            Strategy("snapshot-diff", self._tip, self._snapshot_diff)
        )

        if self._external_ref:
            chain.append(
                Strategy(
                    "external-reference",
                    self._external_ref,
                    self._external_reference_diff,
                    only_after_failure=True,
                )
            )
        return chain

    def _history_depth(self) -> Optional[int]:
        try:
            return self._history.commit_count(self._tip)
        except HistoryUnavailable as error:
            _LOGGER.warning("Unable to determine history depth: %s", error)
            return None

    def _parent_diff(self) -> StrategyResult:
        return self._attempt(
            lambda: self._history.added_between(f"{self._tip}~1", self._tip)
        )

    def _snapshot_diff(self) -> StrategyResult:
        return self._attempt(lambda: self._history.added_in(self._tip))

    def _external_reference_diff(self) -> StrategyResult:
        assert self._external_ref is not None
        ref = self._external_ref
        return self._attempt(lambda: self._history.added_in(ref))

    def _attempt(self, query: Callable[[], List[str]]) -> StrategyResult:
        try:
            paths = query()
        except HistoryUnavailable as error:
            return StrategyResult.tooling_error(str(error))

        candidates = [path for path in paths if self._candidate_filter(path)]
        if candidates:
            return StrategyResult.found(candidates)
        return StrategyResult.empty()
