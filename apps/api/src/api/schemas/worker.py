from pydantic import BaseModel, Field

from waste_core.core.models import Availability


class WorkerAssignmentRequest(BaseModel):
    report_id: str
    title: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    address: str = Field(default="", max_length=500)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class AutoAssignRequest(BaseModel):
    report_id: str


class LocationUpdateRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    address: str | None = Field(default=None, max_length=500)


class AvailabilityUpdateRequest(BaseModel):
    availability_status: Availability
