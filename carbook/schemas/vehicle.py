"""
Pydantic schemas for Vehicle request/response validation.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VehicleCreate(BaseModel):
    vin: str = Field(..., min_length=1, max_length=17)
    brand: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    version: Optional[str] = Field(None, max_length=100)
    engine: Optional[str] = Field(None, max_length=100)
    first_registration: Optional[date] = None


class VehicleUpdate(BaseModel):
    vin: Optional[str] = Field(None, min_length=1, max_length=17)
    brand: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    version: Optional[str] = Field(None, max_length=100)
    engine: Optional[str] = Field(None, max_length=100)
    first_registration: Optional[date] = None


class VehicleResponse(BaseModel):
    id: int
    user_id: int
    custom_number: int
    vin: str
    brand: Optional[str]
    model: Optional[str]
    version: Optional[str]
    engine: Optional[str]
    first_registration: Optional[date]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VehicleCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Vehicle added successfully"
    vehicle_id: int = Field(..., alias="vehicleId")


class VehicleUpdatedResponse(BaseModel):
    message: str = "Vehicle updated successfully"
    vehicle: VehicleResponse
