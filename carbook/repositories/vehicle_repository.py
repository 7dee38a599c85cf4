"""
Repository layer for Vehicle persistence.
All SQL for the `vehicles` table lives here.
"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional
import logging

from carbook.models.vehicle import Vehicle
from carbook.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)


class VehicleRepository:
    """Data access layer for vehicle records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing VehicleRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        logger.trace("Fetching vehicle id=%s", vehicle_id)
        row = self._conn.execute(
            "SELECT * FROM vehicles WHERE id = ?", (vehicle_id,)
        ).fetchone()
        return Vehicle.from_row(row) if row else None

    @log_db_timing
    def get_by_vin(self, vin: str) -> Optional[Vehicle]:
        row = self._conn.execute(
            "SELECT * FROM vehicles WHERE vin = ?", (vin,)
        ).fetchone()
        return Vehicle.from_row(row) if row else None

    @log_db_timing
    def list_for_user(self, user_id: int) -> list[Vehicle]:
        """Return the owner's vehicles ordered by custom_number."""
        logger.trace("Listing vehicles for user id=%s", user_id)
        rows = self._conn.execute(
            "SELECT * FROM vehicles WHERE user_id = ? ORDER BY custom_number",
            (user_id,),
        ).fetchall()
        return [Vehicle.from_row(r) for r in rows]

    @log_db_timing
    def count_for_user(self, user_id: int) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) AS total FROM vehicles WHERE user_id = ?", (user_id,)
        ).fetchone()
        return int(row["total"])

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(self, user_id: int, custom_number: int, **fields) -> Vehicle:
        """Insert a vehicle row and return it."""
        logger.info("Creating vehicle for user id=%s", user_id)
        columns = ["user_id", "custom_number", *fields]
        placeholders = ", ".join("?" for _ in columns)
        cursor = self._conn.execute(
            f"INSERT INTO vehicles ({', '.join(columns)}) VALUES ({placeholders})",
            [user_id, custom_number, *fields.values()],
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, vehicle_id: int, **fields) -> Optional[Vehicle]:
        if not fields:
            return self.get_by_id(vehicle_id)

        logger.info("Updating vehicle id=%s", vehicle_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        self._conn.execute(
            f"UPDATE vehicles SET {set_clause} WHERE id = ?",
            list(fields.values()) + [vehicle_id],
        )
        return self.get_by_id(vehicle_id)

    @log_db_timing
    def delete(self, vehicle_id: int) -> bool:
        logger.info("Deleting vehicle id=%s", vehicle_id)
        cursor = self._conn.execute("DELETE FROM vehicles WHERE id = ?", (vehicle_id,))
        return cursor.rowcount > 0

    @log_db_timing
    def renumber_for_user(self, user_id: int) -> None:
        """Rewrite custom_number as 1..n in the current order for the owner."""
        rows = self._conn.execute(
            "SELECT id FROM vehicles WHERE user_id = ? ORDER BY custom_number, id",
            (user_id,),
        ).fetchall()
        for position, row in enumerate(rows, start=1):
            self._conn.execute(
                "UPDATE vehicles SET custom_number = ? WHERE id = ?",
                (position, row["id"]),
            )
        logger.info("Renumbered %s vehicles for user id=%s", len(rows), user_id)
