from __future__ import annotations

import os
import logging
from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import router as v1_router
from ..rules.fee_tables import FEE_TABLES, SCHEDULE_VERSION
from ..settings import settings

# ---------------- Logging ----------------
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("stbvv-api")

API_VERSION = "1.0.0"

# ---------- App ----------
app = FastAPI(
    title="StBVV Fee Calculator",
    version=API_VERSION,
    description="Statutory fee calculation for German tax-advisory services (StBVV)",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.include_router(v1_router)

# ----- CORS -----
_allow = os.getenv("ALLOW_ORIGINS") or os.getenv("ALLOWED_ORIGINS", "*")
allow_origins: List[str] = [o.strip() for o in _allow.split(",") if o.strip()] if _allow else ["*"]
allow_all = (len(allow_origins) == 1 and allow_origins[0] == "*")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    # Browsers disallow credentials with "*".
    allow_credentials=not allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----- Startup -----
@app.on_event("startup")
def _startup():
    logger.info(
        "StBVV %s (effective %s) loaded: tables %s",
        SCHEDULE_VERSION.version,
        SCHEDULE_VERSION.effective.isoformat(),
        ",".join(FEE_TABLES),
    )
    logger.info("Calculation settings → %s", settings.describe())


@app.get("/health", tags=["System"])
def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": API_VERSION,
        "schedule_version": SCHEDULE_VERSION.version,
        "schedule_effective": SCHEDULE_VERSION.effective.isoformat(),
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
