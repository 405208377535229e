import json, time, datetime as dt
import logging
import sqlite3
from typing import Any, Optional
from .db import get_conn

logger = logging.getLogger(__name__)

DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  before_json TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_entity ON operation_log(entity_type, entity_id);
"""

_COLUMNS = ("ts", "action", "entity_type", "entity_id", "before_json", "after_json",
            "payload_json", "result", "err_msg", "latency_ms")


def ensure_log_schema():
    with get_conn() as conn:
        conn.executescript(DDL)


def _json(obj: Any) -> Optional[str]:
    return None if obj is None else json.dumps(obj, ensure_ascii=False, default=str)


class LogContext:
    """One audited form action: who it touched, what changed, how it ended."""

    def __init__(self, action: str):
        self.action = action
        self.start = time.perf_counter()
        self.before = None
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid: str):
        self.entity_type = etype
        self.entity_id = eid

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def write(self, result: str = "OK", err: Optional[str] = None):
        latency_ms = int((time.perf_counter() - self.start) * 1000)
        logger.info("%s %s %s/%s %dms", self.action, result, self.entity_type, self.entity_id, latency_ms)
        row = (
            dt.datetime.now(dt.timezone.utc).isoformat(), self.action, self.entity_type, self.entity_id,
            _json(self.before), _json(self.after), _json(self.payload), result, err, latency_ms,
        )
        try:
            with get_conn() as conn:
                conn.execute(
                    f"INSERT INTO operation_log({','.join(_COLUMNS)}) VALUES({','.join('?' * len(_COLUMNS))})",
                    row,
                )
        except sqlite3.Error:
            # audit write failures stay out of the caller's result
            logger.exception("operation_log write failed for %s", self.action)


_FILTERS = {
    "query": "(payload_json LIKE :query OR before_json LIKE :query OR after_json LIKE :query OR err_msg LIKE :query)",
    "action": "action = :action",
    "entity_id": "entity_id = :entity_id",
    "ts_from": "ts >= :ts_from",
    "ts_to": "ts <= :ts_to",
}


def search_logs(page: int, size: int, **filters: Optional[str]):
    """Newest-first page of operation_log; `filters` keys are those of _FILTERS."""
    params = {k: v for k, v in filters.items() if v}
    if "query" in params:
        params["query"] = f"%{params['query']}%"
    wh = " AND ".join(_FILTERS[k] for k in params)
    wh = f" WHERE {wh}" if wh else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
