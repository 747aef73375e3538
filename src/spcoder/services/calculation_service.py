from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from spcoder.config.settings import settings
from spcoder.core.modules import SEMESTERS, ModuleEntry, ModuleValidationError, group_by_semester, parse_entries
from spcoder.core.optimizer import SemesterResult, calculate_semester
from spcoder.core.ranking import ResultRow, baseline, round_grade, to_result_rows

logger = logging.getLogger(__name__)

SEMESTER_TITLES: Dict[str, str] = {
    "sem1": "Semester One",
    "sem2": "Semester Two",
}


@dataclass
class SemesterReport:
    semester: str
    title: str
    baseline: Optional[float] = None
    best: Optional[ResultRow] = None
    rows: List[ResultRow] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "semester": self.semester,
            "title": self.title,
            "baseline": self.baseline,
            "best": self.best.to_dict() if self.best else None,
            "results": [row.to_dict() for row in self.rows],
        }


@dataclass
class CalculationReport:
    credit_cap: float
    semesters: List[SemesterReport] = field(default_factory=list)

    def semester(self, key: str) -> SemesterReport:
        for report in self.semesters:
            if report.semester == key:
                return report
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "credit_cap": self.credit_cap,
            "semesters": [s.to_dict() for s in self.semesters],
        }


class CalculationService:
    def __init__(self, credit_cap: float, max_modules: int) -> None:
        self.credit_cap = credit_cap
        self.max_modules = max_modules

    @classmethod
    def from_settings(cls) -> "CalculationService":
        return cls(settings.credit_cap, settings.max_modules)

    def calculate_rows(self, rows: Iterable[Mapping[str, Any]]) -> CalculationReport:
        return self.calculate(parse_entries(rows))

    def calculate(self, entries: Iterable[ModuleEntry]) -> CalculationReport:
        entries = list(entries)
        if len(entries) > self.max_modules:
            logger.info("Rejected calculation with %d modules", len(entries))
            raise ModuleValidationError(f"At most {self.max_modules} modules can be calculated at once")

        grouped = group_by_semester(entries)
        report = CalculationReport(credit_cap=self.credit_cap)
        for sem in SEMESTERS:
            results = calculate_semester(grouped[sem], self.credit_cap)
            report.semesters.append(self._to_semester_report(sem, results))
        return report

    @staticmethod
    def _to_semester_report(semester: str, results: List[SemesterResult]) -> SemesterReport:
        report = SemesterReport(semester=semester, title=SEMESTER_TITLES[semester])
        if not results:
            return report

        rows = to_result_rows(results)
        report.baseline = round_grade(baseline(results).grade)
        report.rows = rows
        report.best = rows[0]
        return report
