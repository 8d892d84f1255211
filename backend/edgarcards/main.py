# backend/edgarcards/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from edgarcards.core.settings import settings
from edgarcards.api.routes_symbols import router as symbols_router
from edgarcards.api.routes_filings import router as filings_router

app = FastAPI(title="EDGARCards API", version="1.0.0")

# CORS for local dev frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(symbols_router, prefix="/symbols", tags=["symbols"])
app.include_router(filings_router, prefix="/filings", tags=["filings"])

@app.get("/healthz")
def healthz():
    return {"ok": True}

@app.get("/health")
def health():
    logger.info("Health check ok")
    return {"status": "ok", "env": settings.env}

@app.get("/config/check")
def config_check():
    return {
        "sec_user_agent_set": bool(settings.sec_user_agent),
        "kv_cache_configured": bool(settings.kv_url and settings.kv_token),
    }
