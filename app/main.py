# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Zip Uploader API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 3000
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ZipUploaderException,
    request_validation_exception_handler,
    zip_uploader_exception_handler,
)
from app.routers import accounts, done, extracted, health, reports, upload
from lib.supabase_client import SupabaseClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: build the one Supabase client every request handler shares
    - Shutdown: log and exit (the client holds no resources to release)
    """
    logger.info(f"Starting Zip Uploader API in {settings.ENVIRONMENT} mode")
    logger.info(
        f"Buckets: received={settings.SUPABASE_BUCKET} "
        f"extracted={settings.EXTRACTED_BUCKET} completed={settings.COMPLETED_BUCKET}"
    )

    app.state.supabase = SupabaseClient.from_settings(settings)

    yield

    logger.info("Shutting down Zip Uploader API")


# Create FastAPI application
app = FastAPI(
    title="Zip Uploader API",
    description="""
## Zip upload, extraction and folder lifecycle

Uploaded zip archives are extracted into Supabase Storage. Each top-level
folder of an archive then moves through two buckets:

| Stage | Bucket | Next step |
|-------|--------|-----------|
| **Extracted** | `Extracted_Files` | `POST /extracted/{folder}/done` |
| **Completed** | `Completed` | `DELETE /done/{folder}/delete` |

Every action is written to the operation log, and PDF reports can be
printed for each bucket and the user accounts.

### Quick Start

```bash
# 1. Upload and extract an archive
curl -X POST http://localhost:3000/upload-zip -F "file=@batch-01.zip"

# 2. Inspect an extracted folder
curl http://localhost:3000/extracted/batch-01/list

# 3. Mark it done
curl -X POST http://localhost:3000/extracted/batch-01/done
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Upload", "description": "Upload and extract zip archives"},
        {"name": "Extracted", "description": "Extracted folders and the done transition"},
        {"name": "Completed", "description": "Completed folders"},
        {"name": "Reports", "description": "PDF reports"},
        {"name": "Logs", "description": "Operation log"},
        {"name": "Accounts", "description": "User accounts"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ZipUploaderException)
async def handle_zip_uploader_exception(request: Request, exc: ZipUploaderException):
    """Handle custom Zip Uploader exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return await zip_uploader_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    """Handle malformed path, query or form values."""
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": str(exc) or "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(upload.router, tags=["Upload"])
app.include_router(extracted.router, prefix="/extracted", tags=["Extracted"])
app.include_router(done.router, prefix="/done", tags=["Completed"])
app.include_router(reports.print_router, prefix="/print", tags=["Reports"])
app.include_router(reports.logs_router, prefix="/logpage", tags=["Logs"])
app.include_router(accounts.router, prefix="/account", tags=["Accounts"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Zip Uploader API",
        "version": "1.0.0",
        "upload": "POST /upload-zip",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
