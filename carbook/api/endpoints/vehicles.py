"""
Vehicle endpoints (all require a bearer access token):
  POST   /vehicles        – Add a vehicle to the caller's account
  GET    /vehicles        – List the caller's vehicles
  GET    /vehicles/{id}   – Get a vehicle (owner or Admin)
  PUT    /vehicles/{id}   – Update a vehicle (owner or Admin)
  DELETE /vehicles/{id}   – Delete a vehicle and renumber the rest (owner or Admin)
"""
from fastapi import APIRouter, Depends, status

from carbook.core.dependencies import db_dependency, get_current_identity
from carbook.models.user import Identity
from carbook.schemas.token import MessageResponse
from carbook.schemas.vehicle import (
    VehicleCreate,
    VehicleCreatedResponse,
    VehicleResponse,
    VehicleUpdate,
    VehicleUpdatedResponse,
)
from carbook.services.vehicle_service import VehicleService

router = APIRouter(
    prefix="/vehicles",
    tags=["Vehicles"],
    dependencies=[Depends(get_current_identity)],
)


@router.post(
    "",
    response_model=VehicleCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_vehicle(
    data: VehicleCreate,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    vehicle = VehicleService(conn).create_vehicle(data, owner=identity)
    return VehicleCreatedResponse(vehicle_id=vehicle.id)


@router.get("", response_model=list[VehicleResponse])
def list_vehicles(
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    return VehicleService(conn).list_vehicles(identity)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(
    vehicle_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    return VehicleService(conn).get_vehicle(vehicle_id, requested_by=identity)


@router.put("/{vehicle_id}", response_model=VehicleUpdatedResponse)
def update_vehicle(
    vehicle_id: int,
    data: VehicleUpdate,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    vehicle = VehicleService(conn).update_vehicle(vehicle_id, data, requested_by=identity)
    return VehicleUpdatedResponse(vehicle=VehicleResponse.model_validate(vehicle))


@router.delete("/{vehicle_id}", response_model=MessageResponse)
def delete_vehicle(
    vehicle_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    VehicleService(conn).delete_vehicle(vehicle_id, requested_by=identity)
    return MessageResponse(message="Vehicle deleted and numbering updated")
