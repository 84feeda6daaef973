from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models.data_models import TopKConfig
from services.engine import AnalysisEngine

# ──────────────────────────────────────────────────────────────────────────────
# Config
# ──────────────────────────────────────────────────────────────────────────────

API_PREFIX = os.getenv("API_PREFIX", "/api")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
TOP_K_CONFIG = TopKConfig.from_env()  # TOP_K_ASN, TOP_K_QUERY_PARAMS, TOP_K_ORIGIN_IPS, MIN_REQUESTS_THRESHOLD

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

engine = AnalysisEngine(TOP_K_CONFIG)

# ──────────────────────────────────────────────────────────────────────────────
# App
# ──────────────────────────────────────────────────────────────────────────────

app = FastAPI(title="CDN Log Analyzer (Batch → Endpoint Metrics)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as {"error": true, "message": ...}"""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = f"Route not found: {request.url.path}"
    return JSONResponse(status_code=exc.status_code, content={"error": True, "message": message})


# ──────────────────────────────────────────────────────────────────────────────
# Analyze
# ──────────────────────────────────────────────────────────────────────────────

@app.post(f"{API_PREFIX}/analyze")
async def analyze(request: Request) -> List[Dict[str, Any]]:
    """
    Accepts:
      {"logs": [...CDN log records...],
       "metadata": {"fileCount": int, "totalEntries": int, "timestamp": str}}
    Returns one metric object per distinct URL.
    """
    body = await request.body()
    result = engine.analyze(body)
    if not result.ok:
        raise HTTPException(status_code=500, detail=f"Analysis failed: {result.error_message}")
    return result.to_json()


# ──────────────────────────────────────────────────────────────────────────────
# Connectivity + Health
# ──────────────────────────────────────────────────────────────────────────────

@app.get(f"{API_PREFIX}/test")
def test_connection() -> Dict[str, Any]:
    logger.info("Test endpoint called")
    return {
        "message": "Hello from analyzer!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": True,
    }


@app.get(f"{API_PREFIX}/health")
def health() -> Dict[str, Any]:
    return {"status": "ok", "config": TOP_K_CONFIG.to_dict()}
