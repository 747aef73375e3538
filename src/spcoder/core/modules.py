from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

SEMESTERS: tuple[str, ...] = ("sem1", "sem2")

_SEMESTER_ALIASES: Dict[str, str] = {
    "sem1": "sem1",
    "sem2": "sem2",
    "1": "sem1",
    "2": "sem2",
}


class ModuleValidationError(ValueError):
    pass


@dataclass(frozen=True)
class ModuleRecord:
    code: str
    credits: float
    grade: float


@dataclass(frozen=True)
class ModuleEntry:
    module_code: str
    grade: float
    credits: float
    semester: str

    def to_record(self) -> ModuleRecord:
        return ModuleRecord(code=self.module_code, credits=self.credits, grade=self.grade)


def validate_record(record: ModuleRecord) -> None:
    if not record.code or not record.code.strip():
        raise ModuleValidationError("Module code must be specified")
    if not math.isfinite(record.credits) or record.credits <= 0:
        raise ModuleValidationError(f"Credits for {record.code} must be greater than 0")
    if not math.isfinite(record.grade):
        raise ModuleValidationError(f"Grade for {record.code} must be a number")


def normalize_semester(value: Any) -> str:
    key = str(value).strip().lower()
    try:
        return _SEMESTER_ALIASES[key]
    except KeyError as exc:
        raise ModuleValidationError(f"Unsupported semester: {value}") from exc


def _to_number(value: Any, label: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ModuleValidationError(f"{label} must be a number") from exc


def parse_entry(row: Mapping[str, Any]) -> ModuleEntry:
    """
    row: a raw form row, e.g.
    {"moduleCode": "COMP1001", "grade": "72", "credits": "15", "semester": "sem1"}
    """
    code = str(row.get("moduleCode", row.get("module_code", "")) or "").strip()
    grade = _to_number(row.get("grade"), "Grade")
    credits = _to_number(row.get("credits"), "Credits")

    if len(code) == 0:
        raise ModuleValidationError("Module code must be specified")
    if credits == 0:
        raise ModuleValidationError("Credits must be specified")

    entry = ModuleEntry(
        module_code=code,
        grade=grade,
        credits=credits,
        semester=normalize_semester(row.get("semester", "sem1")),
    )
    validate_record(entry.to_record())
    return entry


def parse_entries(rows: Iterable[Mapping[str, Any]]) -> List[ModuleEntry]:
    return [parse_entry(row) for row in rows]


def group_by_semester(entries: Iterable[ModuleEntry]) -> Dict[str, List[ModuleRecord]]:
    grouped: Dict[str, List[ModuleRecord]] = {sem: [] for sem in SEMESTERS}
    seen: Dict[str, set[str]] = {sem: set() for sem in SEMESTERS}

    for entry in entries:
        semester = normalize_semester(entry.semester)
        if entry.module_code in seen[semester]:
            raise ModuleValidationError(
                f"Module {entry.module_code} is listed more than once in {semester}"
            )
        seen[semester].add(entry.module_code)
        grouped[semester].append(entry.to_record())

    return grouped
