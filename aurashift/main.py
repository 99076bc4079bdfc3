import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from aurashift.db.base import get_db
from aurashift.core.config import settings
from aurashift.core.logging import configure_logging
from aurashift.routers import activities as activities_router
from aurashift.routers import dashboard as dashboard_router
from aurashift.routers import chart as chart_router
from aurashift.routers import onboarding as onboarding_router
from aurashift.core.errors import (
    AuraShiftException,
    aurashift_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.APP_ENV, settings.LOG_LEVEL)
logger = logging.getLogger("aurashift")

app = FastAPI(
    title="AuraShift API",
    description=(
        "**Smoking-cessation progress tracker**\n\n"
        "Logs activities, keeps the aura score and savings counters in sync "
        "with the full activity history, and serves dashboard and chart data.\n\n"
        "All responses follow the `{success, data, error}` envelope; errors "
        "also carry a machine-readable `code`."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(AuraShiftException, aurashift_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(activities_router.router)
app.include_router(dashboard_router.router)
app.include_router(chart_router.router)
app.include_router(onboarding_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"success": true, "status": "ok", "db": "ok"}` when both the API
    and the database are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"success": False, "status": "error", "db": db_status},
        )
    return {"success": True, "status": "ok", "db": "ok", "env": settings.APP_ENV}
