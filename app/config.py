import os
import logging
import logging.config
from pathlib import Path
from typing import Optional

# Base Paths
APP_DIR = Path(__file__).resolve().parent

# Resources
STATIC_DIR = APP_DIR / "static"

# Logging Setup
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def resolve_log_file(configured: Optional[str] = None) -> Path:
    """Explicit path if configured, else logs/app.log under the working directory."""
    if configured:
        return Path(configured)
    return Path.cwd() / "logs" / "app.log"


LOG_FILE_PATH = str(resolve_log_file(os.getenv("LOG_FILE_PATH")))

LOG_DIR = Path(LOG_FILE_PATH).parent
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": LOG_FORMAT,
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": LOG_LEVEL,
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": LOG_LEVEL,
            "formatter": "standard",
            "filename": LOG_FILE_PATH,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "encoding": "utf8",
        },
    },
    "loggers": {
        "clipx": {
            "handlers": ["console", "file"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        # Let uvicorn log to console using its own handlers
        "uvicorn.error": {"level": "INFO"},
        "uvicorn.access": {"level": "INFO"},
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}

logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger("clipx")


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Clipping server (external collaborator)
CLIP_SERVER_URL = os.getenv("CLIP_SERVER_URL", "http://109.199.102.132:9000").rstrip("/")

# The clipping server hands back "host:path" locators without a scheme.
DOWNLOAD_URL_SCHEME = os.getenv("DOWNLOAD_URL_SCHEME", "http://")

# Security / domains
ALLOWED_HOSTS = _split_csv(os.getenv("ALLOWED_HOSTS", "*"))

CORS_ORIGINS = _split_csv(
    os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8000,http://127.0.0.1:8000",
    )
)

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"
DEBUG = not IS_PRODUCTION
