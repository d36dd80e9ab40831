import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def _default_sqlite_uri() -> str:
    instance_path = BASE_DIR / "instance"
    instance_path.mkdir(exist_ok=True)
    return f"sqlite:///{instance_path / 'chaptersmith.db'}"


def _env_flag(name: str, default: bool = False) -> bool:
    raw_value = os.environ.get(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw_value = os.environ.get(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


class Config:
    """Base configuration shared across environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", _default_sqlite_uri())
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Advisory chapter length window; STRICT_WORD_COUNT turns it into a hard gate.
    CHAPTER_MIN_WORDS = _env_int("CHAPTER_MIN_WORDS", 1400)
    CHAPTER_MAX_WORDS = _env_int("CHAPTER_MAX_WORDS", 1800)
    STRICT_WORD_COUNT = _env_flag("STRICT_WORD_COUNT")

    DEFAULT_MANUSCRIPT_FILENAME = os.environ.get("DEFAULT_MANUSCRIPT_FILENAME", "manuscript.md")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    STRICT_WORD_COUNT = False
