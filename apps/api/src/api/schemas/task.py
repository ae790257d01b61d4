from pydantic import BaseModel, Field

from api.schemas.upload import FilePayload
from waste_core.core.models import TaskStatus


class TaskCreateRequest(BaseModel):
    report_id: str
    assigned_to: str
    notes: str | None = Field(default=None, max_length=2000)
    estimated_completion: str | None = None
    task_location_lat: float | None = Field(default=None, ge=-90, le=90)
    task_location_lng: float | None = Field(default=None, ge=-180, le=180)
    task_address: str | None = Field(default=None, max_length=500)


class TaskStatusUpdateRequest(BaseModel):
    status: TaskStatus
    notes: str | None = Field(default=None, max_length=2000)
    completion_photo_urls: list[str] = Field(default_factory=list)


class TaskCompletionRequest(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)
    photos: list[FilePayload] = Field(default_factory=list)
