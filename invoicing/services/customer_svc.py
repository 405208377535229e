from __future__ import annotations

import uuid

import pandas as pd

from ..db import get_conn
from ..logs import LogContext
from ..domain.invoice_form import INVOICE_STATUSES
from ..domain.money import to_minor_units
from ..repository import customer_repo, invoice_repo
from .page_cache import revalidate_path
from .invoice_svc import LISTING_PATH


def list_customers() -> list[dict]:
    with get_conn() as conn:
        return [dict(r) for r in customer_repo.list_all(conn)]


def _cell(r, key: str, default: str = "") -> str:
    v = r.get(key, default)
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return default
    return str(v).strip()


def seed_load(customers_csv: str, invoices_csv: str | None, log: LogContext) -> dict:
    """Load customers (and optionally invoices) from CSV seeds.

    customers.csv: id, name, email, image_url
    invoices.csv:  customer_id, amount (dollars), status, date (YYYY-MM-DD), id (optional)
    Customers are upserted by id; invoices are inserted, rows whose status is
    not pending/paid or whose customer is unknown are skipped.
    """
    cust_df = pd.read_csv(customers_csv, dtype=str)
    inv_df = pd.read_csv(invoices_csv, dtype={"customer_id": str, "status": str, "date": str, "id": str}) if invoices_csv else None

    n_customers = 0
    n_invoices = 0
    skipped = 0

    with get_conn() as conn:
        for _, r in cust_df.iterrows():
            cid = _cell(r, "id")
            if not cid:
                skipped += 1
                continue
            customer_repo.upsert_customer(conn, cid, _cell(r, "name"), _cell(r, "email"), _cell(r, "image_url") or None)
            n_customers += 1

        if inv_df is not None:
            for _, r in inv_df.iterrows():
                cid = _cell(r, "customer_id")
                status = _cell(r, "status").lower()
                amount = r.get("amount")
                if pd.isna(amount) or status not in INVOICE_STATUSES or customer_repo.get_one(conn, cid) is None:
                    skipped += 1
                    continue
                invoice_repo.insert_invoice(
                    conn,
                    _cell(r, "id") or str(uuid.uuid4()),
                    cid,
                    to_minor_units(amount),
                    status,
                    _cell(r, "date"),
                )
                n_invoices += 1
        conn.commit()

    revalidate_path(LISTING_PATH)
    res = {"customers": n_customers, "invoices": n_invoices, "skipped": skipped}
    log.set_after(res)
    return res
