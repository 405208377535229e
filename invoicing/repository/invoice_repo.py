from __future__ import annotations

from sqlite3 import Connection


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS invoices (
            id TEXT PRIMARY KEY,
            customer_id TEXT NOT NULL REFERENCES customers(id),
            amount INTEGER NOT NULL,
            status TEXT NOT NULL CHECK (status IN ('pending', 'paid')),
            date TEXT NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_invoices_date ON invoices(date)")


def insert_invoice(conn: Connection, invoice_id: str, customer_id: str, amount_cents: int, status: str, date: str) -> str:
    conn.execute(
        "INSERT INTO invoices(id, customer_id, amount, status, date) VALUES(?,?,?,?,?)",
        (invoice_id, customer_id, amount_cents, status, date),
    )
    return invoice_id


def update_invoice(conn: Connection, invoice_id: str, customer_id: str, amount_cents: int, status: str) -> int:
    cur = conn.execute(
        "UPDATE invoices SET customer_id=?, amount=?, status=? WHERE id=?",
        (customer_id, amount_cents, status, invoice_id),
    )
    return cur.rowcount


def delete_invoice(conn: Connection, invoice_id: str) -> int:
    cur = conn.execute("DELETE FROM invoices WHERE id=?", (invoice_id,))
    return cur.rowcount


def get_invoice(conn: Connection, invoice_id: str):
    return conn.execute(
        "SELECT id, customer_id, amount, status, date FROM invoices WHERE id=?",
        (invoice_id,),
    ).fetchone()


_FILTER_SQL = (
    "FROM invoices i JOIN customers c ON c.id = i.customer_id "
    "WHERE c.name LIKE :q OR c.email LIKE :q OR CAST(i.amount AS TEXT) LIKE :q "
    "OR i.date LIKE :q OR i.status LIKE :q"
)


def count_filtered(conn: Connection, query: str) -> int:
    row = conn.execute(f"SELECT COUNT(1) AS c {_FILTER_SQL}", {"q": f"%{query}%"}).fetchone()
    return int(row["c"])


def list_filtered_page(conn: Connection, query: str, page: int, size: int):
    return conn.execute(
        "SELECT i.id, i.amount, i.date, i.status, c.name, c.email, c.image_url "
        f"{_FILTER_SQL} ORDER BY i.date DESC, i.rowid DESC LIMIT :limit OFFSET :offset",
        {"q": f"%{query}%", "limit": size, "offset": (page - 1) * size},
    ).fetchall()
