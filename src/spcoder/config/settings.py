from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    credit_cap: float = float(os.getenv("SPCODER_CREDIT_CAP", "30"))
    module_warning_threshold: int = int(os.getenv("SPCODER_MODULE_WARNING_THRESHOLD", "12"))
    max_modules: int = int(os.getenv("SPCODER_MAX_MODULES", "40"))
    max_semester_modules: int = int(os.getenv("SPCODER_MAX_SEMESTER_MODULES", "20"))

    catalog_path: str = os.getenv("SPCODER_CATALOG_PATH", "data/modules.json")
    catalog_url: str = os.getenv("SPCODER_CATALOG_URL", "")

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )


settings = Settings()
