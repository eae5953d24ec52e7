"""
App settings - DB path, report sizes, seed volume.
"""

DB_PATH = "lunchbook.db"

DEFAULT_TOP_LIMIT = 10
SEED_CUSTOMER_COUNT = 30
SEED_MAX_RESERVATIONS = 4
