"""
Database seeder – creates a default admin account on first startup.

⚠️  FOR DEVELOPMENT ONLY. Enabled with SEED_ADMIN=true.

Default credentials:
    email    : admin@carbook.local
    password : Admin1234!
"""
import logging

from carbook.core.security import hash_password
from carbook.db.database import get_connection
from carbook.models.user import UserRole

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@carbook.local"
ADMIN_PASSWORD = "Admin1234!"


def seed_admin() -> None:
    """
    Insert the default admin user if it does not already exist.
    Safe to call on every startup – it is a no-op when the user is present.
    """
    conn = get_connection()
    try:
        existing = conn.execute(
            "SELECT id FROM users WHERE email = ?", (ADMIN_EMAIL,)
        ).fetchone()

        if existing:
            logger.info("Seeder: admin user '%s' already exists – skipping.", ADMIN_EMAIL)
            return

        conn.execute(
            "INSERT INTO users (email, hashed_password, role) VALUES (?, ?, ?)",
            (ADMIN_EMAIL, hash_password(ADMIN_PASSWORD), UserRole.ADMIN.value),
        )
        conn.commit()
        logger.info("Seeder: created default admin user '%s'.", ADMIN_EMAIL)
    finally:
        conn.close()
