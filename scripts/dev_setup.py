"""Prepare a local ChapterSmith checkout: write .env settings and create the schema.

Existing keys in the .env file are left untouched unless a flag overrides them,
and the previous file is kept next to it with a ``.bak`` suffix.
"""
from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import dotenv_values, set_key
from sqlalchemy import inspect

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from chaptersmith import create_app, db  # noqa: E402
from chaptersmith.config import Config  # noqa: E402

DEFAULT_ENV_PATH = REPO_ROOT / ".env"
SECRET_KEYS = {"SECRET_KEY"}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Configure .env for local ChapterSmith development.")
    parser.add_argument("--flask-app", default="wsgi.py", help="FLASK_APP entry point (default: wsgi.py).")
    parser.add_argument("--secret-key", help="SECRET_KEY value; the current one is kept when omitted.")
    parser.add_argument("--database-url", help="DATABASE_URL, e.g. sqlite:///instance/chaptersmith.db.")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--min-words", type=int, help="CHAPTER_MIN_WORDS for the advisory length window.")
    parser.add_argument("--max-words", type=int, help="CHAPTER_MAX_WORDS for the advisory length window.")
    parser.add_argument(
        "--strict-word-count",
        action="store_true",
        help="Reject chapter saves outside the word-count window instead of only warning.",
    )
    parser.add_argument("--env-path", type=Path, default=DEFAULT_ENV_PATH)
    parser.add_argument("--skip-db", action="store_true", help="Only write the .env file.")
    return parser.parse_args(argv)


def collect_updates(args: argparse.Namespace) -> Dict[str, str]:
    """Map command-line flags onto the environment keys ``Config`` reads."""

    candidates = {
        "FLASK_APP": args.flask_app,
        "SECRET_KEY": args.secret_key,
        "DATABASE_URL": args.database_url,
        "LOG_LEVEL": args.log_level,
        "CHAPTER_MIN_WORDS": args.min_words,
        "CHAPTER_MAX_WORDS": args.max_words,
        "STRICT_WORD_COUNT": "true" if args.strict_word_count else None,
    }
    updates = {key: str(value) for key, value in candidates.items() if value is not None}

    min_words = updates.get("CHAPTER_MIN_WORDS")
    max_words = updates.get("CHAPTER_MAX_WORDS")
    if min_words and max_words and int(min_words) > int(max_words):
        raise SystemExit("--min-words cannot be larger than --max-words.")
    return updates


def apply_env_updates(env_path: Path, updates: Dict[str, str]) -> Dict[str, Optional[str]]:
    if env_path.exists():
        backup_path = env_path.with_name(env_path.name + ".bak")
        shutil.copy(env_path, backup_path)
        print(f"Previous settings saved to {backup_path.name}.")
    else:
        env_path.parent.mkdir(parents=True, exist_ok=True)
        env_path.touch()

    for key, value in updates.items():
        set_key(str(env_path), key, value, quote_mode="never")
    return dict(dotenv_values(env_path))


def initialize_database(env_values: Dict[str, Optional[str]]) -> Tuple[str, List[str]]:
    """Create the schema against the database the .env file points at."""

    class SetupConfig(Config):
        SQLALCHEMY_DATABASE_URI = env_values.get("DATABASE_URL") or Config.SQLALCHEMY_DATABASE_URI

    app = create_app(SetupConfig)
    with app.app_context():
        db.create_all()
        tables = sorted(inspect(db.engine).get_table_names())
    return SetupConfig.SQLALCHEMY_DATABASE_URI, tables


def _display(key: str, value: Optional[str]) -> str:
    if key in SECRET_KEYS and value:
        return value[:2] + "*" * max(len(value) - 2, 0)
    return value or ""


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    env_values = apply_env_updates(args.env_path, collect_updates(args))
    print(f"Wrote {len(env_values)} setting(s) to {args.env_path}.")

    if args.skip_db:
        print("Database initialization skipped.")
    else:
        database_uri, tables = initialize_database(env_values)
        print(f"Database ready at {database_uri} (tables: {', '.join(tables)}).")

    for key in sorted(env_values):
        print(f"  {key}={_display(key, env_values[key])}")


if __name__ == "__main__":
    main()
