"""
Invoice form actions (create / update / delete) and the read helpers behind
the dashboard views.

The actions never raise for bad input or database failures: they return an
ActionState the caller renders back into the form. On success they drop the
cached listing and, for create/update, tell the caller where to navigate.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
import sqlite3
import uuid
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Optional

from ..db import get_conn
from ..logs import LogContext
from ..domain.invoice_form import validate_invoice_form
from ..domain.money import to_minor_units, from_minor_units, format_currency
from ..repository import invoice_repo, customer_repo
from .config_svc import get_config
from .page_cache import page_cache, revalidate_path

logger = logging.getLogger(__name__)

LISTING_PATH = "/dashboard/invoices"


def ensure_invoice_schema():
    """customers first: invoices.customer_id references it."""
    with get_conn() as conn:
        customer_repo.ensure_schema(conn)
        invoice_repo.ensure_schema(conn)
        conn.commit()


@dataclass
class ActionState:
    errors: Optional[Dict[str, List[str]]] = None
    message: Optional[str] = None
    redirect_to: Optional[str] = None
    failed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None and k != "failed"}


def _form_payload(form: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: form.get(k) for k in ("customerId", "customer_id", "amount", "status") if form.get(k) is not None}


def create_invoice(form: Mapping[str, Any], log: LogContext) -> ActionState:
    log.set_payload(_form_payload(form))
    data, errors = validate_invoice_form(form)
    if data is None:
        logger.info("%s rejected: %s", log.action, ",".join(sorted(errors)))
        return ActionState(errors=errors, message="Missing Fields. Failed to Create Invoice.", failed=True)

    invoice_id = str(uuid.uuid4())
    amount_cents = to_minor_units(data.amount)
    date = dt.date.today().isoformat()

    try:
        with get_conn() as conn:
            invoice_repo.insert_invoice(conn, invoice_id, data.customer_id, amount_cents, data.status, date)
            conn.commit()
    except (sqlite3.Error, OverflowError) as e:
        logger.exception("create invoice failed")
        log.write("ERROR", str(e))
        return ActionState(message="Database Error: Failed to Create Invoice.", failed=True)

    log.set_entity("invoice", invoice_id)
    log.set_after({"customer_id": data.customer_id, "amount": amount_cents, "status": data.status, "date": date})
    log.write("OK")

    revalidate_path(LISTING_PATH)
    return ActionState(redirect_to=LISTING_PATH)


def update_invoice(invoice_id: str, form: Mapping[str, Any], log: LogContext) -> ActionState:
    log.set_entity("invoice", invoice_id)
    log.set_payload(_form_payload(form))
    data, errors = validate_invoice_form(form)
    if data is None:
        logger.info("%s rejected: %s", log.action, ",".join(sorted(errors)))
        return ActionState(errors=errors, message="Missing Fields. Failed to Update Invoice.", failed=True)

    amount_cents = to_minor_units(data.amount)

    try:
        with get_conn() as conn:
            before = invoice_repo.get_invoice(conn, invoice_id)
            changed = invoice_repo.update_invoice(conn, invoice_id, data.customer_id, amount_cents, data.status)
            conn.commit()
        if changed == 0:
            raise LookupError(f"invoice {invoice_id} not found")
    except (sqlite3.Error, OverflowError, LookupError) as e:
        logger.warning("update invoice %s failed: %s", invoice_id, e)
        log.write("ERROR", str(e))
        return ActionState(message="Database Error: Failed to Update Invoice.", failed=True)

    log.set_before(dict(before) if before else None)
    log.set_after({"customer_id": data.customer_id, "amount": amount_cents, "status": data.status})
    log.write("OK")

    revalidate_path(LISTING_PATH)
    return ActionState(redirect_to=LISTING_PATH)


def delete_invoice(invoice_id: str, log: LogContext) -> ActionState:
    log.set_entity("invoice", invoice_id)
    try:
        with get_conn() as conn:
            before = invoice_repo.get_invoice(conn, invoice_id)
            deleted = invoice_repo.delete_invoice(conn, invoice_id)
            conn.commit()
        if deleted == 0:
            raise LookupError(f"invoice {invoice_id} not found")
    except (sqlite3.Error, OverflowError, LookupError) as e:
        logger.warning("delete invoice %s failed: %s", invoice_id, e)
        log.write("ERROR", str(e))
        return ActionState(message="Database Error: Failed to Delete Invoice.", failed=True)

    log.set_before(dict(before) if before else None)
    log.write("OK")
    revalidate_path(LISTING_PATH)
    return ActionState(message="Deleted Invoice.")


def get_invoice_for_edit(invoice_id: str) -> Optional[dict]:
    """Invoice row shaped for the edit form: amount back in dollars."""
    with get_conn() as conn:
        row = invoice_repo.get_invoice(conn, invoice_id)
    if row is None:
        return None
    it = dict(row)
    it["amount"] = from_minor_units(it["amount"])
    return it


def _render_listing(query: str, page: int) -> dict:
    cfg = get_config()
    size = cfg["items_per_page"]
    with get_conn() as conn:
        total = invoice_repo.count_filtered(conn, query)
        rows = invoice_repo.list_filtered_page(conn, query, page, size)
    items = []
    for r in rows:
        it = dict(r)
        it["amount_cents"] = it["amount"]
        it["amount"] = format_currency(it["amount_cents"], cfg["currency"])
        items.append(it)
    return {
        "query": query,
        "page": page,
        "total": total,
        "total_pages": math.ceil(total / size) if total else 0,
        "items": items,
    }


def list_invoices(query: str = "", page: int = 1) -> dict:
    """Filtered, paginated invoice listing served through the page cache."""
    query = (query or "").strip()
    page = max(1, int(page))
    return page_cache.get_or_render(LISTING_PATH, f"q={query}&page={page}", lambda: _render_listing(query, page))
