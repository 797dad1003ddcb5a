# cropadvisor/config.py
import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


def _split(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "Crop Suitability Advisor")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Recommendations
    default_top_n: int = int(os.getenv("DEFAULT_TOP_N", "5"))
    max_top_n: int = int(os.getenv("MAX_TOP_N", "20"))

    cors_origins: List[str] = _split(os.getenv("CORS_ORIGINS", "*"))

settings = Settings()
