"""SP coding optimizer.

Works out every set of modules that can be excluded from a semester average
without going over the credit cap, and the average the remaining modules give.
The enumeration is exhaustive, so the cost grows as O(2^N) in the number of
modules of a semester.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from spcoder.config.settings import settings
from spcoder.core.modules import ModuleRecord, validate_record

logger = logging.getLogger(__name__)

RemovalSet = Tuple[str, ...]


class OptimizerError(ValueError):
    pass


class DegenerateRemovalError(OptimizerError):
    pass


@dataclass(frozen=True)
class SemesterResult:
    remove: RemovalSet
    grade: float

    @property
    def is_baseline(self) -> bool:
        return len(self.remove) == 0

    def to_dict(self) -> Dict:
        return {"remove": list(self.remove), "grade": self.grade}


def _ensure_unique(codes: Sequence[str]) -> None:
    seen: set[str] = set()
    for code in codes:
        if code in seen:
            raise OptimizerError(f"Duplicate module code: {code}")
        seen.add(code)


def _choose(values: Sequence[str], size: int, start: int, chosen: List[str], out: List[List[str]]) -> None:
    if size == 0:
        out.append(list(chosen))
        return
    for i in range(start, len(values)):
        chosen.append(values[i])
        _choose(values, size - 1, i + 1, chosen, out)
        chosen.pop()


def enumerate_subsets(codes: Sequence[str]) -> List[RemovalSet]:
    """
    Returns the power set of codes as sorted tuples, the empty subset first,
    then by size and lexicographically.
    """
    codes = list(codes)
    _ensure_unique(codes)

    combinations: List[List[str]] = []
    for size in range(1, len(codes) + 1):
        _choose(codes, size, 0, [], combinations)

    subsets: set[RemovalSet] = {()}
    for combo in combinations:
        subsets.add(tuple(sorted(combo)))

    return sorted(subsets, key=lambda s: (len(s), s))


def _choose_within(
    values: Sequence[str],
    credits: Sequence[float],
    cap: float,
    start: int,
    total: float,
    chosen: List[str],
    out: List[List[str]],
) -> None:
    for i in range(start, len(values)):
        # credits are positive, so any superset of an over-cap set is over cap too
        if total + credits[i] > cap:
            continue
        chosen.append(values[i])
        out.append(list(chosen))
        _choose_within(values, credits, cap, i + 1, total + credits[i], chosen, out)
        chosen.pop()


def enumerate_feasible(
    codes: Sequence[str],
    credits_by_code: Mapping[str, float],
    cap: float,
) -> List[RemovalSet]:
    """
    Same result as filter_feasible(enumerate_subsets(codes), ...), but branches
    that already exceed the cap are never built.
    """
    if cap < 0:
        raise OptimizerError("Credit cap must not be negative")
    codes = list(codes)
    _ensure_unique(codes)
    credits = [removal_credits((code,), credits_by_code) for code in codes]

    combinations: List[List[str]] = []
    _choose_within(codes, credits, cap, 0, 0.0, [], combinations)

    subsets: set[RemovalSet] = {()}
    for combo in combinations:
        subsets.add(tuple(sorted(combo)))

    ordered = sorted(subsets, key=lambda s: (len(s), s))
    return filter_feasible(ordered, credits_by_code, cap)


def removal_credits(removal: Iterable[str], credits_by_code: Mapping[str, float]) -> float:
    try:
        return sum(credits_by_code[code] for code in removal)
    except KeyError as exc:
        raise OptimizerError(f"Unknown module code in removal set: {exc.args[0]}") from exc


def filter_feasible(
    subsets: Iterable[RemovalSet],
    credits_by_code: Mapping[str, float],
    cap: float,
) -> List[RemovalSet]:
    if cap < 0:
        raise OptimizerError("Credit cap must not be negative")
    return [s for s in subsets if removal_credits(s, credits_by_code) <= cap]


def aggregate_grade(removal: Iterable[str], modules: Mapping[str, ModuleRecord]) -> float:
    removed = set(removal)
    unknown = removed.difference(modules)
    if unknown:
        raise OptimizerError(f"Unknown module code in removal set: {', '.join(sorted(unknown))}")

    remaining = [m for code, m in modules.items() if code not in removed]
    total_credits = sum(m.credits for m in remaining)
    if total_credits <= 0:
        raise DegenerateRemovalError("Removal set leaves no credits to average")

    weighted = 0.0
    for m in remaining:
        weighted += m.grade * (m.credits / total_credits)
    return weighted


def calculate_semester(modules: Sequence[ModuleRecord], cap: Optional[float] = None) -> List[SemesterResult]:
    """
    One SemesterResult per feasible removal set, the baseline (nothing removed)
    first. Removal sets that would exclude every module are left out.
    """
    if cap is None:
        cap = settings.credit_cap

    for record in modules:
        validate_record(record)
    codes = [m.code for m in modules]
    _ensure_unique(codes)

    if not modules:
        return []

    if len(modules) > settings.max_semester_modules:
        raise OptimizerError(
            f"At most {settings.max_semester_modules} modules per semester can be calculated, got {len(modules)}"
        )
    if len(modules) > settings.module_warning_threshold:
        logger.warning(
            "Enumerating up to %d removal sets for %d modules; this grows exponentially",
            2 ** len(modules),
            len(modules),
        )

    by_code = {m.code: m for m in modules}
    credits_by_code = {m.code: m.credits for m in modules}

    results: List[SemesterResult] = []
    for removal in enumerate_feasible(codes, credits_by_code, cap):
        if len(removal) == len(codes):
            continue
        results.append(SemesterResult(remove=removal, grade=aggregate_grade(removal, by_code)))
    return results
