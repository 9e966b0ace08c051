"""
Pluggable classifiers for memory pools and collection causes.

Pool naming and cause strings are collector conventions, so the monitor asks
a classifier instead of matching hardcoded strings. The defaults follow the
HotSpot naming scheme ("PS Old Gen", "G1 Old Gen", "Tenured Gen") and the
"No GC" cause reported for concurrent-phase bookkeeping.
"""

from typing import Iterable, Protocol, runtime_checkable

from ..models.config import DEFAULT_CONCURRENT_PHASE_CAUSES, DEFAULT_OLD_GEN_SUFFIXES

NO_GC_CAUSE = DEFAULT_CONCURRENT_PHASE_CAUSES[0]


@runtime_checkable
class PoolClassifier(Protocol):
    """Decides whether a memory pool is the old generation."""

    def is_old_gen(self, pool_name: str) -> bool:
        ...


@runtime_checkable
class CauseClassifier(Protocol):
    """Decides whether a collection cause denotes a non-pausing phase."""

    def is_concurrent_phase(self, cause: str) -> bool:
        ...


class SuffixPoolClassifier:
    """Matches pools whose name ends with one of the given suffixes."""

    def __init__(self, suffixes: Iterable[str] = DEFAULT_OLD_GEN_SUFFIXES):
        self.suffixes = tuple(suffixes)

    def is_old_gen(self, pool_name: str) -> bool:
        return pool_name.endswith(self.suffixes)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(suffixes={self.suffixes!r})"


class SentinelCauseClassifier:
    """Treats the given cause strings as concurrent-phase bookkeeping."""

    def __init__(self, sentinels: Iterable[str] = (NO_GC_CAUSE,)):
        self.sentinels = frozenset(sentinels)

    def is_concurrent_phase(self, cause: str) -> bool:
        return cause in self.sentinels

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(sentinels={sorted(self.sentinels)!r})"
