import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from scripts import dev_setup


def test_collect_updates_only_includes_given_flags():
    args = dev_setup.parse_args(["--log-level", "DEBUG", "--strict-word-count", "--min-words", "1200"])

    assert dev_setup.collect_updates(args) == {
        "FLASK_APP": "wsgi.py",
        "LOG_LEVEL": "DEBUG",
        "CHAPTER_MIN_WORDS": "1200",
        "STRICT_WORD_COUNT": "true",
    }


def test_collect_updates_rejects_inverted_window():
    args = dev_setup.parse_args(["--min-words", "2000", "--max-words", "1500"])

    with pytest.raises(SystemExit):
        dev_setup.collect_updates(args)


def test_apply_env_updates_keeps_existing_keys(tmp_path):
    env_path = tmp_path / ".env"
    env_path.write_text("# local settings\nSECRET_KEY=keep-me\nDATABASE_URL=sqlite:///old.db\n")

    values = dev_setup.apply_env_updates(env_path, {"DATABASE_URL": "sqlite:///new.db", "LOG_LEVEL": "DEBUG"})

    assert values == {
        "SECRET_KEY": "keep-me",
        "DATABASE_URL": "sqlite:///new.db",
        "LOG_LEVEL": "DEBUG",
    }
    assert "DATABASE_URL=sqlite:///old.db" in (tmp_path / ".env.bak").read_text()


def test_apply_env_updates_creates_missing_file(tmp_path):
    env_path = tmp_path / "nested" / ".env"

    values = dev_setup.apply_env_updates(env_path, {"FLASK_APP": "wsgi.py"})

    assert values == {"FLASK_APP": "wsgi.py"}
    assert not (tmp_path / "nested" / ".env.bak").exists()


def test_initialize_database_uses_env_url(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'setup.db'}"

    uri, tables = dev_setup.initialize_database({"DATABASE_URL": database_url})

    assert uri == database_url
    assert {"projects", "chapters"} <= set(tables)
    assert (tmp_path / "setup.db").exists()


def test_secret_values_are_masked():
    assert dev_setup._display("SECRET_KEY", "supersecret") == "su*********"
    assert dev_setup._display("LOG_LEVEL", "INFO") == "INFO"
