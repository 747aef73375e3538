from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, List, Optional

from spcoder.services.catalog_service import CatalogEntry


@dataclass
class ModuleRow:
    id: int
    module_code: str = ""
    credits: str = ""
    grade: str = ""
    semester: str = "sem1"

    def to_raw(self) -> Dict[str, Any]:
        return {
            "moduleCode": self.module_code,
            "credits": self.credits,
            "grade": self.grade,
            "semester": self.semester,
        }


@dataclass
class FormState:
    rows: List[ModuleRow] = field(default_factory=list)
    warning: Optional[str] = None
    _ids: count = field(default_factory=lambda: count(1), repr=False)

    def add_row(self) -> ModuleRow:
        row = ModuleRow(id=next(self._ids))
        self.rows.append(row)
        return row

    def get_row(self, row_id: int) -> ModuleRow:
        for row in self.rows:
            if row.id == row_id:
                return row
        raise KeyError(row_id)

    def remove_row(self, row_id: int) -> None:
        self.rows = [row for row in self.rows if row.id != row_id]

    def apply_catalog_entry(self, row_id: int, entry: CatalogEntry) -> ModuleRow:
        row = self.get_row(row_id)
        row.module_code = entry.code
        row.credits = f"{entry.credits:g}"
        if entry.semester == "1":
            row.semester = "sem1"
        elif entry.semester == "2":
            row.semester = "sem2"
        return row

    def to_raw_rows(self) -> List[Dict[str, Any]]:
        return [row.to_raw() for row in self.rows]

    def warn(self, message: str) -> None:
        self.warning = message

    def unwarn(self) -> None:
        self.warning = None
