from lunchbook_app.db import execute, init_db, query, seed_customers_if_empty


def test_init_db_creates_tables(conn):
    rows = query(conn, "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
    assert [row["name"] for row in rows] == ["customers", "reservations"]


def test_init_db_is_repeatable(tmp_path):
    path = str(tmp_path / "lunchbook.db")
    init_db(path).close()
    conn = init_db(path)
    assert query(conn, "SELECT COUNT(*) AS n FROM customers")[0]["n"] == 0
    conn.close()


def test_execute_returns_lastrowid(conn):
    cursor = execute(
        conn,
        "INSERT INTO customers (first_name, last_name) VALUES (?, ?)",
        ("Ben", "Okafor")
    )
    rows = query(conn, "SELECT id FROM customers")
    assert rows[0]["id"] == cursor.lastrowid


def test_seed_fills_empty_database(conn):
    assert seed_customers_if_empty(conn, count=5) == 5
    assert query(conn, "SELECT COUNT(*) AS n FROM customers")[0]["n"] == 5
    guests = query(conn, "SELECT num_guests FROM reservations")
    assert all(row["num_guests"] >= 1 for row in guests)


def test_seed_skips_populated_database(conn):
    seed_customers_if_empty(conn, count=3)
    assert seed_customers_if_empty(conn, count=3) == 0
    assert query(conn, "SELECT COUNT(*) AS n FROM customers")[0]["n"] == 3
