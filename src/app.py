"""Main FastAPI application module.

This module initializes the FastAPI application, registers all route handlers
and renders every error as a JSON body with an "error" field.
"""

import logging
from datetime import datetime

import pytz
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
    DEFAULT_JWT_SECRET_KEY,
    JWT_SECRET_KEY,
    UPLOADS_DIR,
    UPLOADS_URL_PREFIX,
)
from api.routes import admin, auth, stories
from core.database import SessionLocal, init_db
from utils.admin_manager import AdminManager

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Story Submission API",
    description="Collects personal stories, routes them through admin review "
    "and publishes the approved ones.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(stories.router)
app.include_router(auth.router)
app.include_router(admin.router)

# Uploaded attachments are served back under their generated names
UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s: %s", request.method, request.url.path, exc,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
def startup_tasks() -> None:
    """Create tables and provision the first administrator if configured."""
    init_db()
    if JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
        logger.warning("JWT_SECRET_KEY is not set; using the development default")

    db = SessionLocal()
    try:
        AdminManager(db).ensure_initial_admin(ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_EMAIL)
    finally:
        db.close()


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok" and the server time.
    """
    return {"status": "ok", "time": datetime.now(pytz.utc).isoformat()}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    logger.info("Starting story submission server at %s", server_url)
    logger.info("API docs: %s/docs", server_url)
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
