import os
from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(override=True)

_BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog"


def _env(name: str, default: str) -> str:
    return os.getenv(f"CROPDOC_{name}", os.getenv(name, default))


class Settings:
    def __init__(self) -> None:
        self.DATA_ROOT = _env("DATA_ROOT", "./data")
        self.CATALOG_DIR = _env("CATALOG_DIR", str(_BUNDLED_CATALOG))

        # Mode flag: offline = local processing, online = cloud processing
        self.OFFLINE_MODE = _env("OFFLINE_MODE", "true").lower() == "true"
        self.FAST_DELAY_MS = int(_env("FAST_DELAY_MS", "1500"))
        self.CLOUD_DELAY_MS = int(_env("CLOUD_DELAY_MS", "2500"))
        self.DIAGNOSE_FAILURE_RATE = float(_env("DIAGNOSE_FAILURE_RATE", "0.0"))

        # Treatment comparison
        self.COMPARE_LIMIT = int(_env("COMPARE_LIMIT", "3"))

        # Capture uploads
        self.MAX_IMAGE_MB = int(_env("MAX_IMAGE_MB", "5"))
        self.ALLOWED_MIME = (
            _env("ALLOWED_MIME", "image/jpeg,image/png,image/webp")
            .strip()
            .split(",")
        )

        self.LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

        # API server (python -m cropdoctor)
        self.HOST = _env("HOST", "127.0.0.1")
        self.PORT = int(_env("PORT", "8000"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
