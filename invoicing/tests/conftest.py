import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "invoicing_test.db"
    # Point the app at this temp DB
    os.environ["INVOICING_DB_PATH"] = str(path)
    from invoicing.logs import ensure_log_schema
    from invoicing.services.config_svc import ensure_config_schema, ensure_default_config
    from invoicing.services.invoice_svc import ensure_invoice_schema
    ensure_log_schema()
    ensure_config_schema()
    ensure_default_config()
    ensure_invoice_schema()
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    # Import app after DB ready so startup hooks can use it
    from invoicing.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("INVOICING_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    # invoices before customers (foreign key)
    tables = ["invoices", "customers", "config", "operation_log"]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    from invoicing.services.config_svc import ensure_default_config
    from invoicing.services.page_cache import page_cache
    ensure_default_config()
    page_cache.enabled = True
    page_cache.clear()
    yield


@pytest.fixture()
def customer_id(tmp_db_path):
    from invoicing.db import get_conn
    from invoicing.repository import customer_repo
    with get_conn() as conn:
        customer_repo.upsert_customer(conn, CUSTOMER_ID, "Delba de Oliveira", "delba@oliveira.com", None)
        conn.commit()
    return CUSTOMER_ID
