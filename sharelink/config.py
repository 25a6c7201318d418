"""Application configuration."""

import os
import secrets
from pathlib import Path

ENV = os.environ.get("ENV", "development").lower()

DATA_DIR = Path(os.environ.get("DATA_DIR", str(Path(__file__).parent.parent / "data")))
DATA_DIR.mkdir(parents=True, exist_ok=True)

FILES_DIR = Path(os.environ.get("FILES_DIR", str(DATA_DIR / "files")))

# Metadata store
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DATA_DIR}/sharelink.db")
DB_TIMEOUT = float(os.environ.get("DB_TIMEOUT", "10"))

# Upload limits
MAX_FILE_SIZE = int(os.environ.get("MAX_FILE_SIZE", str(250 * 1024 * 1024)))
MAX_FILENAME_LENGTH = 255
UPLOAD_LIMIT_PER_DAY = int(os.environ.get("UPLOAD_LIMIT_PER_DAY", "10"))
PASSWORD_HASH_ROUNDS = 10

# Object storage
STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "local").strip().lower()
S3_ENDPOINT = os.environ.get("S3_ENDPOINT", "").strip() or None
S3_BUCKET = os.environ.get("S3_BUCKET", "").strip()
S3_ACCESS_KEY = os.environ.get("S3_ACCESS_KEY", "").strip()
S3_SECRET_KEY = os.environ.get("S3_SECRET_KEY", "").strip()
S3_REGION = os.environ.get("S3_REGION", "auto").strip()
STORAGE_CONNECT_TIMEOUT = float(os.environ.get("STORAGE_CONNECT_TIMEOUT", "5"))
STORAGE_READ_TIMEOUT = float(os.environ.get("STORAGE_READ_TIMEOUT", "60"))
SIGNED_URL_TTL_SECONDS = int(os.environ.get("SIGNED_URL_TTL_SECONDS", "3600"))

# Local backend signs its own URLs. Without a fixed secret, URLs stop
# verifying after a restart and differ between replicas.
SIGNING_SECRET = os.environ.get("SIGNING_SECRET", "").strip() or secrets.token_hex(32)
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")

# Where the share page lives (the UI); falls back to the request origin
SHARE_BASE_URL = os.environ.get("SHARE_BASE_URL", "").strip().rstrip("/")

# Admin authentication
SHARELINK_ADMIN_USER = os.environ.get("SHARELINK_ADMIN_USER", "").strip()
SHARELINK_ADMIN_PASS = os.environ.get("SHARELINK_ADMIN_PASS", "").strip()
ADMIN_ENABLED = bool(SHARELINK_ADMIN_USER and SHARELINK_ADMIN_PASS)

# Background reaper, 0 disables it
CLEANUP_INTERVAL_SECONDS = int(os.environ.get("CLEANUP_INTERVAL_SECONDS", "0"))

CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_DIR = os.environ.get("LOG_DIR", "").strip()
