"""
SQLite setup - creates tables, runs queries, seeds sample customers.
"""

import datetime
import logging
import random
import sqlite3
from typing import Sequence

from .config import DB_PATH, SEED_CUSTOMER_COUNT, SEED_MAX_RESERVATIONS

logger = logging.getLogger(__name__)


def init_db(db_path: str = DB_PATH) -> sqlite3.Connection:
    """Connect to DB and create tables if needed."""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS customers(
            id INTEGER PRIMARY KEY,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            phone TEXT,
            notes TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS reservations(
            id INTEGER PRIMARY KEY,
            customer_id INTEGER NOT NULL,
            num_guests INTEGER NOT NULL,
            start_at TEXT NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            FOREIGN KEY (customer_id) REFERENCES customers(id)
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS reservations_customer_id_idx ON reservations(customer_id)"
    )

    conn.commit()
    logger.debug(f"Opened database at {db_path}")
    return conn


def query(conn: sqlite3.Connection, sql: str, params: Sequence = ()) -> list[sqlite3.Row]:
    """Run a read and return every row."""
    cursor = conn.cursor()
    cursor.execute(sql, params)
    return cursor.fetchall()


def execute(conn: sqlite3.Connection, sql: str, params: Sequence = ()) -> sqlite3.Cursor:
    """Run a write and commit it. The cursor is returned for lastrowid."""
    cursor = conn.cursor()
    cursor.execute(sql, params)
    conn.commit()
    return cursor


def seed_customers_if_empty(conn: sqlite3.Connection, count: int = SEED_CUSTOMER_COUNT) -> int:
    """Add sample customers and reservations if the customers table is empty.

    Returns the number of customers inserted.
    """
    cursor = conn.cursor()
    cursor.execute("SELECT COUNT(*) FROM customers")
    if cursor.fetchone()[0] > 0:
        return 0

    first_names = [
        "Ana", "Ben", "Chloe", "Dev", "Elena", "Farid", "Grace", "Hiro",
        "Isla", "Jonah", "Kavya", "Liam", "Maya", "Nico", "Olivia", "Priya"
    ]
    last_names = [
        "Diaz", "Okafor", "Nguyen", "Schmidt", "Rossi", "Patel", "Kim",
        "Murphy", "Silva", "Cohen", "Haddad", "Larsen", "Tanaka", "Brooks"
    ]
    notes_list = [
        "Prefers window seat", "Allergic to nuts", "Regular on Fridays",
        "Celebrates anniversary in June", "Vegetarian", None, None
    ]
    reservation_notes = [
        "Birthday", "High chair needed", "Quiet table please", "", ""
    ]

    customers = []
    for _ in range(count):
        customers.append((
            random.choice(first_names),
            random.choice(last_names),
            f"{random.randint(200, 999)}-555-{random.randint(1000, 9999)}",
            random.choice(notes_list)
        ))

    cursor.executemany("""
        INSERT INTO customers (first_name, last_name, phone, notes)
        VALUES (?, ?, ?, ?)
    """, customers)

    cursor.execute("SELECT id FROM customers")
    customer_ids = [row["id"] for row in cursor.fetchall()]

    today = datetime.datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    reservations = []
    for customer_id in customer_ids:
        for _ in range(random.randint(0, SEED_MAX_RESERVATIONS)):
            start_at = today + datetime.timedelta(
                days=random.randint(-60, 60),
                hours=random.randint(11, 21),
                minutes=random.choice([0, 15, 30, 45])
            )
            reservations.append((
                customer_id,
                random.randint(1, 8),
                start_at.isoformat(),
                random.choice(reservation_notes)
            ))

    cursor.executemany("""
        INSERT INTO reservations (customer_id, num_guests, start_at, notes)
        VALUES (?, ?, ?, ?)
    """, reservations)
    conn.commit()

    logger.info(f"Seeded {len(customer_ids)} customers and {len(reservations)} reservations")
    return len(customer_ids)
