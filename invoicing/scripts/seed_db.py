"""
Create the schema and load customers (and optionally invoices) from seed CSVs.

Customers are upserted by id; invoices are appended, so running the invoice
seed twice without --reset-invoices duplicates rows that carry no id column.

Usage:
  python -m invoicing.scripts.seed_db \
      --customers seeds/customers.csv \
      --invoices seeds/invoices.csv
"""
from __future__ import annotations

import argparse
from invoicing.db import get_conn
from invoicing.logs import LogContext, ensure_log_schema
from invoicing.services.config_svc import ensure_config_schema, ensure_default_config
from invoicing.services.customer_svc import seed_load
from invoicing.services.invoice_svc import ensure_invoice_schema


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--customers", required=True)
    ap.add_argument("--invoices")
    ap.add_argument("--reset-invoices", action="store_true", help="DELETE all invoices before loading")
    args = ap.parse_args()

    ensure_log_schema()
    ensure_config_schema()
    ensure_default_config()
    ensure_invoice_schema()

    if args.reset_invoices:
        with get_conn() as conn:
            conn.execute("DELETE FROM invoices")
            conn.commit()

    log = LogContext("SEED_DB")
    log.set_payload(vars(args))
    res = seed_load(args.customers, args.invoices, log)
    log.write("OK")
    print({"message": "ok", **res})


if __name__ == "__main__":
    main()
