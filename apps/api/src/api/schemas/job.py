from pydantic import BaseModel, Field

from api.schemas.upload import FilePayload
from waste_core.core.models import ApplicationStatus


class JobCreateRequest(BaseModel):
    title: str = Field(max_length=255)
    description: str = Field(max_length=10000)
    requirements: str | None = Field(default=None, max_length=5000)
    location: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    job_type: str = Field(default="full_time", max_length=32)
    salary_range: str | None = Field(default=None, max_length=64)


class JobApplicationRequest(BaseModel):
    cover_letter: str | None = Field(default=None, max_length=5000)
    contact_phone: str | None = Field(default=None, max_length=32)
    resume_url: str | None = Field(default=None, max_length=1000)


class ApplicationStatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    interview_date: str | None = None
    interview_notes: str | None = Field(default=None, max_length=2000)


class ResumeUploadRequest(BaseModel):
    resume: FilePayload
