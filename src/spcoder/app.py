import logging
from functools import lru_cache
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from spcoder.config.settings import settings
from spcoder.core.modules import ModuleEntry, ModuleValidationError
from spcoder.core.optimizer import OptimizerError
from spcoder.services.calculation_service import CalculationService
from spcoder.services.catalog_service import CatalogService, CatalogServiceError

logger = logging.getLogger(__name__)

app = FastAPI(title="SP Code Calculator API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ModulePayload(BaseModel):
    module_code: str = Field(min_length=1)
    grade: float
    credits: float = Field(gt=0)
    semester: Literal["sem1", "sem2"] = "sem1"


class CalculatePayload(BaseModel):
    modules: List[ModulePayload]
    credit_cap: Optional[float] = Field(default=None, ge=0)


@lru_cache(maxsize=1)
def get_catalog() -> CatalogService:
    return CatalogService.from_settings()


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/catalog")
def search_catalog(q: str = "") -> List[Dict]:
    try:
        return [entry.to_dict() for entry in get_catalog().search(q)]
    except CatalogServiceError as exc:
        logger.error("Catalog lookup failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@app.post("/calculate")
def calculate(payload: CalculatePayload) -> Dict:
    service = CalculationService.from_settings()
    if payload.credit_cap is not None:
        service.credit_cap = payload.credit_cap
    entries = [
        ModuleEntry(
            module_code=m.module_code.strip(),
            grade=m.grade,
            credits=m.credits,
            semester=m.semester,
        )
        for m in payload.modules
    ]
    try:
        return service.calculate(entries).to_dict()
    except (ModuleValidationError, OptimizerError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
