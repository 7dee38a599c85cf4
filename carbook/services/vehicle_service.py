"""
Vehicle service: per-account CRUD.

Vehicles carry a per-owner ``custom_number`` (1..n). New vehicles are
appended; deleting one renumbers the owner's remaining vehicles densely.
"""
import sqlite3
import logging

from fastapi import HTTPException, status

from carbook.models.user import Identity
from carbook.models.vehicle import Vehicle
from carbook.repositories.vehicle_repository import VehicleRepository
from carbook.schemas.vehicle import VehicleCreate, VehicleUpdate

logger = logging.getLogger(__name__)


class VehicleService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing VehicleService")
        self._repo = VehicleRepository(conn)

    def list_vehicles(self, owner: Identity) -> list[Vehicle]:
        logger.info("Listing vehicles for user id=%s", owner.id)
        return self._repo.list_for_user(owner.id)

    def get_vehicle(self, vehicle_id: int, requested_by: Identity) -> Vehicle:
        """Return the vehicle if the caller owns it or is an admin."""
        vehicle = self._repo.get_by_id(vehicle_id)
        if vehicle is None:
            logger.warning("Vehicle id=%s not found", vehicle_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Vehicle not found",
            )
        if not requested_by.can_access(vehicle.user_id):
            logger.warning(
                "User id=%s denied access to vehicle id=%s",
                requested_by.id,
                vehicle_id,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized access",
            )
        return vehicle

    def create_vehicle(self, data: VehicleCreate, owner: Identity) -> Vehicle:
        self._ensure_vin_free(data.vin)
        custom_number = self._repo.count_for_user(owner.id) + 1
        try:
            vehicle = self._repo.create(
                owner.id, custom_number, **self._to_columns(data.model_dump())
            )
        except sqlite3.IntegrityError:
            raise self._vin_taken()
        logger.info("Vehicle id=%s added for user id=%s", vehicle.id, owner.id)
        return vehicle

    def update_vehicle(
        self, vehicle_id: int, data: VehicleUpdate, requested_by: Identity
    ) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id, requested_by)
        fields = self._to_columns(data.model_dump(exclude_unset=True))
        if fields.get("vin") and fields["vin"] != vehicle.vin:
            self._ensure_vin_free(fields["vin"])
        try:
            updated = self._repo.update(vehicle_id, **fields)
        except sqlite3.IntegrityError:
            raise self._vin_taken()
        logger.info("Vehicle id=%s updated", vehicle_id)
        return updated  # type: ignore[return-value]

    def delete_vehicle(self, vehicle_id: int, requested_by: Identity) -> None:
        vehicle = self.get_vehicle(vehicle_id, requested_by)
        self._repo.delete(vehicle_id)
        self._repo.renumber_for_user(vehicle.user_id)
        logger.info("Vehicle id=%s deleted", vehicle_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_vin_free(self, vin: str) -> None:
        if self._repo.get_by_vin(vin) is not None:
            logger.warning("Duplicate VIN %s", vin)
            raise self._vin_taken()

    @staticmethod
    def _to_columns(fields: dict) -> dict:
        first_registration = fields.get("first_registration")
        if first_registration is not None:
            fields["first_registration"] = first_registration.isoformat()
        return fields

    @staticmethod
    def _vin_taken() -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vehicle with this VIN already exists",
        )
