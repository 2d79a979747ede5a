import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

SECRET_KEY: str = os.getenv("SECRET_KEY", "dashboard-studio-dev-secret-change-in-prod")
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

# Database: stored in backend/data/
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))
MIGRATIONS_DIR: str = os.path.join(BACKEND_DIR, "migrations")

DATABASE_PATH: str = os.getenv(
    "DATABASE_PATH",
    os.path.join(BACKEND_DIR, "data", "dashboards.db"),
)
DB_BUSY_TIMEOUT_MS: int = int(os.getenv("DB_BUSY_TIMEOUT_MS", "5000"))

# Logging
DEBUG: bool = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(BACKEND_DIR, "logs"))

# Publishing: attempts before a ConcurrencyConflictError reaches the caller
PUBLISH_MAX_ATTEMPTS: int = int(os.getenv("PUBLISH_MAX_ATTEMPTS", "3"))

# Seeded on first start
DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin")

# Breakpoints the editor knows about. Others are accepted and checked on their own.
KNOWN_LAYOUT_TYPES: tuple = tuple(
    t.strip() for t in os.getenv("KNOWN_LAYOUT_TYPES", "sm,md,lg,grid").split(",") if t.strip()
)
DEFAULT_LAYOUT_TYPE: str = "grid"
