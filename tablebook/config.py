
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///local.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_RESERVATIONS_PER_DAY = int(os.getenv("MAX_RESERVATIONS_PER_DAY", "50"))
    # Per-date locking around the cap/availability checks; off keeps plain check-then-insert.
    SERIALIZE_ADMISSION = _flag("SERIALIZE_ADMISSION")
    RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "12"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
