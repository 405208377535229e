from sqlite3 import Connection
from typing import Optional


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS customers (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            image_url TEXT
        )
        """
    )


def upsert_customer(conn: Connection, customer_id: str, name: str, email: str, image_url: Optional[str] = None):
    conn.execute(
        "INSERT INTO customers(id, name, email, image_url) VALUES(?,?,?,?) "
        "ON CONFLICT(id) DO UPDATE SET name=excluded.name, email=excluded.email, image_url=excluded.image_url",
        (customer_id, name, email, image_url),
    )


def get_one(conn: Connection, customer_id: str):
    return conn.execute(
        "SELECT id, name, email, image_url FROM customers WHERE id=?", (customer_id,)
    ).fetchone()


def list_all(conn: Connection):
    return conn.execute("SELECT id, name FROM customers ORDER BY name ASC").fetchall()
