import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    items = [item.strip() for item in value.split(",")]
    return [item for item in items if item] or list(default)

APP_ENV = os.getenv("APP_ENV", "development")
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./psuflow.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:3303"])

# Booking rules
MAX_PER_SLOT = int(os.getenv("MAX_PER_SLOT", "2"))
SLOT_LENGTH_MINUTES = int(os.getenv("SLOT_LENGTH_MINUTES", "15"))
SLOT_CATALOG = _get_list(
    os.getenv("SLOT_CATALOG"),
    ["12:00 PM", "12:15 PM", "12:30 PM", "12:45 PM"],
)
ACADEMIC_CATEGORIES = _get_list(
    os.getenv("ACADEMIC_CATEGORIES"),
    ["advising", "senior-project", "course-advising", "thesis", "project", "academic"],
)
MAX_NOTE_LENGTH = int(os.getenv("MAX_NOTE_LENGTH", "4000"))
STAFF_INBOX_LIMIT = int(os.getenv("STAFF_INBOX_LIMIT", "20"))

# Attachments
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join("uploads", "appointments"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
ALLOWED_UPLOAD_TYPES = {
    "application/pdf": ".pdf",
    "image/png": ".png",
}

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if MAX_PER_SLOT < 1:
        raise RuntimeError("MAX_PER_SLOT must be at least 1.")
