# backend/edgarcards/core/settings.py
import os
from pathlib import Path
from pydantic import BaseModel
from dotenv import load_dotenv

# Resolve backend directory and load .env explicitly
BACKEND_DIR = Path(__file__).resolve().parents[2]  # .../backend
load_dotenv(BACKEND_DIR / ".env")  # do NOT set override=True; shell exports still win

# SEC rejects anonymous traffic; the fallback still names a contact address
DEFAULT_USER_AGENT = "EDGARCards/1.0 (support@example.com)"


class Settings(BaseModel):
    env: str = os.getenv("APP_ENV", "dev")
    sec_user_agent: str = os.getenv("SEC_USER_AGENT", "") or DEFAULT_USER_AGENT
    http_timeout_s: float = float(os.getenv("HTTP_TIMEOUT_S", "10"))

    # retry budget for every upstream call
    fetch_attempts: int = int(os.getenv("FETCH_ATTEMPTS", "4"))
    fetch_initial_delay_s: float = float(os.getenv("FETCH_INITIAL_DELAY_S", "0.2"))

    # reference index cache
    index_ttl_s: float = float(os.getenv("INDEX_TTL_S", "3600"))
    index_cache_key: str = os.getenv("INDEX_CACHE_KEY", "sec:tickerIndex:v1")
    kv_url: str = os.getenv("UPSTASH_REDIS_REST_URL", "")
    kv_token: str = os.getenv("UPSTASH_REDIS_REST_TOKEN", "")

    # filings
    filings_limit: int = int(os.getenv("FILINGS_LIMIT", "12"))
    doc_concurrency: int = int(os.getenv("DOC_CONCURRENCY", "4"))


settings = Settings()
