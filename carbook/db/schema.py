"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.
"""
from carbook.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    email             TEXT    NOT NULL UNIQUE,
    hashed_password   TEXT    NOT NULL,
    role              TEXT    NOT NULL DEFAULT 'user'
                              CHECK(role IN ('user', 'admin')),
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_VEHICLES_TABLE = """
CREATE TABLE IF NOT EXISTS vehicles (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id             INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    custom_number       INTEGER NOT NULL,
    vin                 TEXT    NOT NULL UNIQUE,
    brand               TEXT,
    model               TEXT,
    version             TEXT,
    engine              TEXT,
    first_registration  TEXT,
    created_at          TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at          TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_VEHICLES_OWNER_INDEX = """
CREATE INDEX IF NOT EXISTS ix_vehicles_user_id ON vehicles(user_id, custom_number);
"""

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_VEHICLES_TABLE,
    CREATE_VEHICLES_OWNER_INDEX,
]


def create_tables() -> None:
    """Create all tables (IF NOT EXISTS, safe on every restart)."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        for ddl in ALL_TABLES:
            cursor.execute(ddl)
        conn.commit()
    finally:
        conn.close()
