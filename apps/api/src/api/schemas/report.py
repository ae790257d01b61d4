from pydantic import BaseModel, Field

from api.schemas.upload import FilePayload
from waste_core.core.models import ReportPriority, ReportStatus, WasteType


class ReportCreateRequest(BaseModel):
    title: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    waste_type: WasteType
    priority: ReportPriority = ReportPriority.MEDIUM
    location_lat: float | None = Field(default=None, ge=-90, le=90)
    location_lng: float | None = Field(default=None, ge=-180, le=180)
    address: str | None = Field(default=None, max_length=500)
    photos: list[FilePayload] = Field(default_factory=list)


class ReportStatusUpdateRequest(BaseModel):
    status: ReportStatus


class FeedbackRequest(BaseModel):
    rating: int | None = None
    comment: str | None = Field(default=None, max_length=2000)
