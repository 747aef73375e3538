from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from requests import RequestException

from spcoder.config.settings import settings

logger = logging.getLogger(__name__)


class CatalogServiceError(Exception):
    pass


@dataclass(frozen=True)
class CatalogEntry:
    index: int
    code: str
    title: str
    credits: float
    semester: Optional[str] = None

    def matches(self, query: str) -> bool:
        needle = query.lower()
        return needle in self.code.lower() or needle in self.title.lower()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CatalogService:
    def __init__(self, path: str = "", url: str = "") -> None:
        if not path and not url:
            raise CatalogServiceError("Missing SPCODER_CATALOG_PATH or SPCODER_CATALOG_URL in environment")
        self.path = path
        self.url = url
        self._entries: Optional[List[CatalogEntry]] = None
        self._last_query: Optional[str] = None
        self._last_results: List[CatalogEntry] = []

    @classmethod
    def from_settings(cls) -> "CatalogService":
        return cls(path=settings.catalog_path, url=settings.catalog_url)

    @property
    def entries(self) -> List[CatalogEntry]:
        if self._entries is None:
            self.load()
        return list(self._entries or [])

    def load(self) -> List[CatalogEntry]:
        raw = self._fetch() if self.url else self._read()
        if not isinstance(raw, list):
            raise CatalogServiceError("Module catalog must be a JSON list")

        self._entries = [self._to_entry(item, i) for i, item in enumerate(raw)]
        self._last_query = None
        self._last_results = []
        logger.info("Loaded %d catalog modules", len(self._entries))
        return list(self._entries)

    def search(self, query: str = "") -> List[CatalogEntry]:
        query = (query or "").strip()
        if query == self._last_query and self._entries is not None:
            return list(self._last_results)

        options = self.entries
        if query != "":
            options = [e for e in options if e.matches(query)]

        self._last_query = query
        self._last_results = options
        return list(options)

    def get(self, index: int) -> CatalogEntry:
        for entry in self.entries:
            if entry.index == index:
                return entry
        raise CatalogServiceError(f"No catalog module with index {index}")

    def _read(self) -> Any:
        path = Path(self.path)
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError as exc:
            raise CatalogServiceError(f"Module catalog not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise CatalogServiceError(f"Module catalog is not valid JSON: {exc}") from exc

    def _fetch(self) -> Any:
        try:
            res = requests.get(self.url, timeout=15)
            res.raise_for_status()
        except RequestException as exc:
            raise CatalogServiceError(f"Failed to fetch module catalog: {exc}") from exc
        try:
            return res.json()
        except ValueError as exc:
            raise CatalogServiceError("Module catalog is not valid JSON") from exc

    @staticmethod
    def _to_entry(item: Any, index: int) -> CatalogEntry:
        if not isinstance(item, dict):
            raise CatalogServiceError(f"Catalog record {index} is not an object")
        try:
            credits = float(item.get("credits", 0) or 0)
        except (TypeError, ValueError) as exc:
            raise CatalogServiceError(f"Catalog record {index} has invalid credits") from exc
        semester = item.get("semester")
        return CatalogEntry(
            index=index,
            code=str(item.get("code", "")).strip(),
            title=str(item.get("title", "")).strip(),
            credits=credits,
            semester=str(semester) if semester not in (None, "") else None,
        )
