from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from spcoder.core.optimizer import OptimizerError, SemesterResult

BETTER = "better"
WORSE = "worse"
SAME = "same"


@dataclass(frozen=True)
class ResultRow:
    remove: tuple[str, ...]
    grade: float
    rounded: float
    status: str

    @property
    def label(self) -> str:
        return ", ".join(self.remove) if self.remove else "nothing"

    def to_dict(self) -> Dict:
        return {
            "remove": list(self.remove),
            "grade": self.grade,
            "rounded": self.rounded,
            "status": self.status,
        }


def round_grade(grade: float, *, round_to: int = 2) -> float:
    return round(grade, round_to)


def baseline(results: Iterable[SemesterResult]) -> SemesterResult:
    found = [r for r in results if r.is_baseline]
    if not found:
        raise OptimizerError("Results have no baseline (empty removal set)")
    if len(found) > 1:
        raise OptimizerError("Results have more than one baseline")
    return found[0]


def _rank_key(result: SemesterResult) -> tuple:
    return (-result.grade, len(result.remove), result.remove)


def rank_results(results: Iterable[SemesterResult]) -> List[SemesterResult]:
    return sorted(results, key=_rank_key)


def compare_to_baseline(rounded: float, base_rounded: float) -> str:
    if rounded > base_rounded:
        return BETTER
    if rounded < base_rounded:
        return WORSE
    return SAME


def to_result_rows(results: Iterable[SemesterResult]) -> List[ResultRow]:
    results = list(results)
    if not results:
        return []

    base_rounded = round_grade(baseline(results).grade)
    rows: List[ResultRow] = []
    for r in rank_results(results):
        rounded = round_grade(r.grade)
        rows.append(
            ResultRow(
                remove=r.remove,
                grade=r.grade,
                rounded=rounded,
                status=compare_to_baseline(rounded, base_rounded),
            )
        )
    return rows
