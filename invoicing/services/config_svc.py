# invoicing/services/config_svc.py
from ..db import get_conn
from ..logs import LogContext
from .page_cache import page_cache

DEFAULTS = {
    "items_per_page": "6",
    "currency": "USD",
    # 1 = serve the invoice listing from the page cache, 0 = always query
    "listing_cache": "1",
}


def ensure_config_schema():
    with get_conn() as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS config (key TEXT PRIMARY KEY, value TEXT)")
        conn.commit()


def ensure_default_config():
    """Insert missing defaults without overwriting existing values."""
    with get_conn() as conn:
        for k, v in DEFAULTS.items():
            conn.execute(
                "INSERT INTO config(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO NOTHING",
                (k, v),
            )
        conn.commit()


def _to_int(x, default: int) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def get_config() -> dict:
    with get_conn() as conn:
        rows = conn.execute("SELECT key, value FROM config").fetchall()
    cfg = {r["key"]: r["value"] for r in rows}

    items_per_page = _to_int(cfg.get("items_per_page"), int(DEFAULTS["items_per_page"]))
    return {
        "items_per_page": items_per_page if items_per_page > 0 else int(DEFAULTS["items_per_page"]),
        "currency": (cfg.get("currency") or DEFAULTS["currency"]).upper(),
        "listing_cache": _to_int(cfg.get("listing_cache"), 1) != 0,
    }


def update_config(upd: dict, log: LogContext) -> list[str]:
    unknown = [k for k in upd if k not in DEFAULTS]
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(sorted(unknown))}")
    updated = []
    with get_conn() as conn:
        before = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
        for k, v in upd.items():
            conn.execute(
                "INSERT INTO config(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (k, str(v))
            )
            updated.append(k)
        conn.commit()
        after = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
    log.set_before(before); log.set_after(after)
    # page size / currency / cache switch all change what the listing renders
    page_cache.enabled = get_config()["listing_cache"]
    page_cache.clear()
    return updated
