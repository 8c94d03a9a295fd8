"""Configuration module for the story submission service.

This module provides centralized configuration management, including directory
paths, API server settings, authentication, upload limits and mail delivery.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data")))

# Uploaded story attachments, served back under UPLOADS_URL_PREFIX
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", str(DATA_DIR / "uploads")))
UPLOADS_URL_PREFIX = "/uploads"

# Email templates directory
TEMPLATE_DIR = Path(__file__).parent / "templates"

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/stories.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "3000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

SITE_NAME: str = os.getenv("SITE_NAME", "Morehouse Stories")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Authentication Configuration ---

DEFAULT_JWT_SECRET_KEY = "dev-secret-key-change-in-production"
JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY)
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24))
)

# First-run administrator. Nothing is provisioned when these are unset.
ADMIN_USERNAME: Optional[str] = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD: Optional[str] = os.getenv("ADMIN_PASSWORD")
ADMIN_EMAIL: Optional[str] = os.getenv("ADMIN_EMAIL")

# --- Story Configuration ---

STORY_STATUSES: List[str] = ["pending", "approved", "rejected"]

APPROVED_STORIES_LIMIT: int = int(os.getenv("APPROVED_STORIES_LIMIT", "50"))
ADMIN_STORIES_LIMIT: int = int(os.getenv("ADMIN_STORIES_LIMIT", "100"))

# --- Upload Configuration ---

MAX_FILES_PER_STORY: int = int(os.getenv("MAX_FILES_PER_STORY", "5"))
MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))

# Accepted media types and the extension used when storing them
ALLOWED_MIME_TYPES: Dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "video/webm": ".webm",
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "text/plain": ".txt",
    "application/rtf": ".rtf",
}

# --- Mail Configuration ---

# When SMTP_HOST is unset, notifications are logged instead of sent.
SMTP_HOST: Optional[str] = os.getenv("SMTP_HOST")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME: Optional[str] = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD: Optional[str] = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
SMTP_TIMEOUT: float = float(os.getenv("SMTP_TIMEOUT", "10"))
MAIL_FROM: str = os.getenv("MAIL_FROM", "stories@localhost")

# Moderation mailbox notified about new submissions (optional)
ADMIN_NOTIFY_EMAIL: Optional[str] = os.getenv("ADMIN_NOTIFY_EMAIL")


def get_upload_url(filename: str) -> str:
    """Get the public URL path of a stored attachment."""
    return f"{UPLOADS_URL_PREFIX}/{filename}"
