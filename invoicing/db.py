from __future__ import annotations

# invoicing/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

# Path order: INVOICING_DB_PATH, then config.yaml (test_db_path while pytest
# runs, db_path otherwise), then invoicing.db next to the package.
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_DEFAULT_DB = os.path.join(_PROJECT_ROOT, "invoicing.db")
_CONFIG_YAML = os.path.join(_PROJECT_ROOT, "config.yaml")


def _config_db_path(key: str) -> str | None:
    if not os.path.exists(_CONFIG_YAML):
        return None
    try:
        with open(_CONFIG_YAML, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return None
    v = cfg.get(key) if isinstance(cfg, dict) else None
    return v.strip() if isinstance(v, str) and v.strip() else None


def get_db_path() -> str:
    path = os.environ.get("INVOICING_DB_PATH")
    if not path and os.environ.get("PYTEST_CURRENT_TEST") is not None:
        path = _config_db_path("test_db_path")
    path = path or _config_db_path("db_path") or _DEFAULT_DB
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    return path


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """Autocommit connection with foreign keys on (invoices -> customers) and sqlite3.Row rows."""
    conn = sqlite3.connect(get_db_path(), check_same_thread=False, isolation_level=None)
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()
