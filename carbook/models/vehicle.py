"""
Domain model representing a Vehicle row owned by a user.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class Vehicle:
    id: int
    user_id: int
    custom_number: int
    vin: str
    created_at: datetime
    updated_at: datetime
    brand: Optional[str] = None
    model: Optional[str] = None
    version: Optional[str] = None
    engine: Optional[str] = None
    first_registration: Optional[date] = None

    @classmethod
    def from_row(cls, row) -> "Vehicle":
        """Build a Vehicle from a sqlite3.Row object."""
        first_registration_raw = row["first_registration"]
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            custom_number=row["custom_number"],
            vin=row["vin"],
            brand=row["brand"],
            model=row["model"],
            version=row["version"],
            engine=row["engine"],
            first_registration=(
                date.fromisoformat(first_registration_raw[:10])
                if first_registration_raw
                else None
            ),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
