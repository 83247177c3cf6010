"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'stockroom.sqlite'}")
# Seconds a SQLite writer waits on a locked database before giving up
SQLITE_BUSY_TIMEOUT_SECONDS = float(os.getenv("SQLITE_BUSY_TIMEOUT_SECONDS", "30"))

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = Path(os.getenv("LOG_FILE", str(LOG_DIR / "app.jsonl")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"

# Ensure log directory exists
LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

# Tracing (OpenTelemetry)
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTEL_EXPORTER_ENDPOINT = os.getenv("OTEL_EXPORTER_ENDPOINT", "http://localhost:4318/v1/traces")
OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "stockroom")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# SKU counter
SKU_DEFAULT_PREFIX = os.getenv("SKU_DEFAULT_PREFIX", "SKU").upper()
SKU_PAD_WIDTH = 5

# Serial number ledger
BULK_SERIAL_MAX = int(os.getenv("BULK_SERIAL_MAX", "100"))

# Aging alerts: exact day counts that fire a warning, and de-dup window
AGING_ALERT_DAYS = tuple(
    int(d) for d in os.getenv("AGING_ALERT_DAYS", "38,44").split(",") if d.strip()
)
AGING_ALERT_COOLDOWN_HOURS = int(os.getenv("AGING_ALERT_COOLDOWN_HOURS", "24"))

# HTTP API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
IDENTITY_HEADER = os.getenv("IDENTITY_HEADER", "X-User-Id")

# Bootstrap admin created by `init-db --seed`
BOOTSTRAP_ADMIN_EMAIL = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "admin@example.com")
BOOTSTRAP_ADMIN_NAME = os.getenv("BOOTSTRAP_ADMIN_NAME", "Administrator")
