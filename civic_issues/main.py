import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text, inspect
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import CORS_ORIGINS, get_upload_dir
from .database import Base, engine, get_db
from .errors import CivicIssuesError
from .logging_config import configure_logging
from .models import models  # noqa: F401  registers the ORM tables on Base
from .routers import admin, auth, issues, uploads
from .storage import UPLOAD_URL_PREFIX

configure_logging()
logger = logging.getLogger(__name__)


# -------------------------------------------------------
# FastAPI App Setup
# -------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Before app startup
    Base.metadata.create_all(bind=engine)
    os.makedirs(get_upload_dir(), exist_ok=True)
    logger.info("Database tables ready")
    yield


app = FastAPI(title="Civic Issue Reporting Service", version=__version__, lifespan=lifespan)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------
# Error Bodies
# -------------------------------------------------------
@app.exception_handler(CivicIssuesError)
async def civic_issues_error_handler(request: Request, exc: CivicIssuesError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# -------------------------------------------------------
# Root Endpoint
# -------------------------------------------------------
@app.get("/")
def root():
    return {"message": "Civic Issue Reporting Service is running."}


# -------------------------------------------------------
#  Health Check Endpoints
# -------------------------------------------------------
@app.get("/health/live", tags=["Health"])
def liveness_check():
    """Liveness probe — confirms app process is alive."""
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
def readiness_check(db: Session = Depends(get_db)):
    """Readiness probe — verifies DB connectivity."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database not ready: {e}",
        )


# -------------------------------------------------------
# API Routers
# -------------------------------------------------------
app.include_router(auth.router)
app.include_router(issues.router)
app.include_router(admin.router)
app.include_router(uploads.router)

app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=get_upload_dir(), check_dir=False), name="uploads")


# -------------------------------------------------------
# Database Connectivity Diagnostic
# -------------------------------------------------------
@app.get("/db-check")
def db_check(db: Session = Depends(get_db)):
    """Manually verify DB connectivity and list tables."""
    try:
        # Use SQLAlchemy inspector to be compatible with both SQLite (tests) and Postgres (prod)
        inspector = inspect(db.get_bind())
        tables = inspector.get_table_names()
        return {"status": "connected", "tables": tables}
    except Exception as e:
        logger.warning("Database check failed: %s", e)
        return {"status": "error", "details": str(e)}
