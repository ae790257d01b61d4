from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

from geo_engine.models import GeoPoint

from waste_core.core.presence import DEFAULT_FRESHNESS_WINDOW, is_online


class WasteType(StrEnum):
    DRY = "dry"
    WET = "wet"
    HAZARDOUS = "hazardous"
    ELECTRONIC = "electronic"
    MEDICAL = "medical"


class ReportStatus(StrEnum):
    PENDING = "pending"
    VERIFIED = "verified"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class ReportPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(StrEnum):
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Availability(StrEnum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class ApplicationStatus(StrEnum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _str_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class Worker:
    user_id: str
    full_name: str
    email: str
    location: GeoPoint | None = None
    current_address: str | None = None
    availability: Availability = Availability.OFFLINE
    last_location_update: str | None = None
    is_online: bool = False

    @classmethod
    def from_profile(
        cls,
        record: dict[str, Any],
        now: datetime,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
    ) -> Worker:
        last_update = _optional_str(record.get("last_location_update"))
        return cls(
            user_id=str(record["user_id"]),
            full_name=str(record.get("full_name") or record.get("email") or ""),
            email=str(record.get("email") or ""),
            location=GeoPoint.from_optional(record.get("current_location_lat"), record.get("current_location_lng")),
            current_address=_optional_str(record.get("current_address")),
            availability=Availability(record.get("availability_status") or Availability.OFFLINE),
            last_location_update=last_update,
            is_online=is_online(last_update, now, freshness_window),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "current_location_lat": self.location.lat if self.location else None,
            "current_location_lng": self.location.lng if self.location else None,
            "current_address": self.current_address,
            "availability_status": self.availability.value,
            "last_location_update": self.last_location_update,
            "is_online": self.is_online,
        }


@dataclass(frozen=True)
class Municipality:
    user_id: str
    full_name: str
    email: str
    address: str | None = None
    is_online: bool = False
    last_seen: str | None = None

    @classmethod
    def from_profile(cls, record: dict[str, Any]) -> Municipality:
        return cls(
            user_id=str(record["user_id"]),
            full_name=str(record.get("full_name") or record.get("email") or ""),
            email=str(record.get("email") or ""),
            address=_optional_str(record.get("address")),
        )

    def with_presence(self, online: bool, last_seen: str | None) -> Municipality:
        return replace(self, is_online=online, last_seen=last_seen)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "address": self.address,
            "is_online": self.is_online,
            "last_seen": self.last_seen,
        }


@dataclass(frozen=True)
class Report:
    id: str
    reporter_id: str
    title: str
    waste_type: WasteType
    status: ReportStatus = ReportStatus.PENDING
    priority: ReportPriority = ReportPriority.MEDIUM
    description: str | None = None
    location: GeoPoint | None = None
    address: str | None = None
    photo_urls: tuple[str, ...] = ()
    verified_by: str | None = None
    assigned_to: str | None = None
    verified_at: str | None = None
    completed_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Report:
        return cls(
            id=str(record["id"]),
            reporter_id=str(record["reporter_id"]),
            title=str(record.get("title") or ""),
            waste_type=WasteType(record["waste_type"]),
            status=ReportStatus(record.get("status") or ReportStatus.PENDING),
            priority=ReportPriority(record.get("priority") or ReportPriority.MEDIUM),
            description=_optional_str(record.get("description")),
            location=GeoPoint.from_optional(record.get("location_lat"), record.get("location_lng")),
            address=_optional_str(record.get("address")),
            photo_urls=_str_list(record.get("photo_urls")),
            verified_by=_optional_str(record.get("verified_by")),
            assigned_to=_optional_str(record.get("assigned_to")),
            verified_at=_optional_str(record.get("verified_at")),
            completed_at=_optional_str(record.get("completed_at")),
            created_at=_optional_str(record.get("created_at")),
            updated_at=_optional_str(record.get("updated_at")),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "reporter_id": self.reporter_id,
            "title": self.title,
            "description": self.description,
            "waste_type": self.waste_type.value,
            "location_lat": self.location.lat if self.location else None,
            "location_lng": self.location.lng if self.location else None,
            "address": self.address,
            "status": self.status.value,
            "priority": self.priority.value,
            "photo_urls": list(self.photo_urls),
            "verified_by": self.verified_by,
            "assigned_to": self.assigned_to,
            "verified_at": self.verified_at,
            "completed_at": self.completed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class Task:
    id: str
    report_id: str
    assigned_to: str
    assigned_by: str
    status: TaskStatus = TaskStatus.ASSIGNED
    notes: str | None = None
    completion_photo_urls: tuple[str, ...] = ()
    estimated_completion: str | None = None
    actual_completion: str | None = None
    task_location: GeoPoint | None = None
    task_address: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Task:
        return cls(
            id=str(record["id"]),
            report_id=str(record["report_id"]),
            assigned_to=str(record["assigned_to"]),
            assigned_by=str(record["assigned_by"]),
            status=TaskStatus(record.get("status") or TaskStatus.ASSIGNED),
            notes=_optional_str(record.get("notes")),
            completion_photo_urls=_str_list(record.get("completion_photo_urls")),
            estimated_completion=_optional_str(record.get("estimated_completion")),
            actual_completion=_optional_str(record.get("actual_completion")),
            task_location=GeoPoint.from_optional(record.get("task_location_lat"), record.get("task_location_lng")),
            task_address=_optional_str(record.get("task_address")),
            created_at=_optional_str(record.get("created_at")),
            updated_at=_optional_str(record.get("updated_at")),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "report_id": self.report_id,
            "assigned_to": self.assigned_to,
            "assigned_by": self.assigned_by,
            "status": self.status.value,
            "notes": self.notes,
            "completion_photo_urls": list(self.completion_photo_urls),
            "estimated_completion": self.estimated_completion,
            "actual_completion": self.actual_completion,
            "task_location_lat": self.task_location.lat if self.task_location else None,
            "task_location_lng": self.task_location.lng if self.task_location else None,
            "task_address": self.task_address,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class JobListing:
    id: str
    title: str
    description: str
    job_type: str
    posted_by: str
    requirements: str | None = None
    location: str | None = None
    department: str | None = None
    salary_range: str | None = None
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> JobListing:
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            description=str(record.get("description") or ""),
            job_type=str(record.get("job_type") or "full_time"),
            posted_by=str(record["posted_by"]),
            requirements=_optional_str(record.get("requirements")),
            location=_optional_str(record.get("location")),
            department=_optional_str(record.get("department")),
            salary_range=_optional_str(record.get("salary_range")),
            is_active=bool(record.get("is_active", True)),
            created_at=_optional_str(record.get("created_at")),
            updated_at=_optional_str(record.get("updated_at")),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "requirements": self.requirements,
            "location": self.location,
            "department": self.department,
            "job_type": self.job_type,
            "salary_range": self.salary_range,
            "posted_by": self.posted_by,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class JobApplication:
    id: str
    job_id: str
    applicant_id: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    resume_url: str | None = None
    cover_letter: str | None = None
    contact_phone: str | None = None
    interview_date: str | None = None
    interview_notes: str | None = None
    reviewed_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    job: dict[str, Any] = field(default_factory=dict)
    applicant: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> JobApplication:
        return cls(
            id=str(record["id"]),
            job_id=str(record["job_id"]),
            applicant_id=str(record["applicant_id"]),
            status=ApplicationStatus(record.get("status") or ApplicationStatus.PENDING),
            resume_url=_optional_str(record.get("resume_url")),
            cover_letter=_optional_str(record.get("cover_letter")),
            contact_phone=_optional_str(record.get("contact_phone")),
            interview_date=_optional_str(record.get("interview_date")),
            interview_notes=_optional_str(record.get("interview_notes")),
            reviewed_by=_optional_str(record.get("reviewed_by")),
            created_at=_optional_str(record.get("created_at")),
            updated_at=_optional_str(record.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "job_id": self.job_id,
            "applicant_id": self.applicant_id,
            "status": self.status.value,
            "resume_url": self.resume_url,
            "cover_letter": self.cover_letter,
            "contact_phone": self.contact_phone,
            "interview_date": self.interview_date,
            "interview_notes": self.interview_notes,
            "reviewed_by": self.reviewed_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "job": self.job,
            "applicant": self.applicant,
        }
