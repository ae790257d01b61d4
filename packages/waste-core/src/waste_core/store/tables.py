from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, Float, Integer, MetaData, String, Table, Text

from waste_core.core.tables import (
    FEEDBACK_TABLE,
    JOB_APPLICATIONS_TABLE,
    JOB_LISTINGS_TABLE,
    NOTIFICATIONS_TABLE,
    PROFILES_TABLE,
    REPORTS_TABLE,
    TASKS_TABLE,
)

metadata = MetaData()


def _audit_columns() -> list[Column]:
    return [
        Column("created_at", String(64), nullable=False, index=True),
        Column("updated_at", String(64), nullable=False),
    ]


reports = Table(
    REPORTS_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("reporter_id", String(64), nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("waste_type", String(32), nullable=False),
    Column("location_lat", Float),
    Column("location_lng", Float),
    Column("address", String(500)),
    Column("status", String(32), nullable=False, default="pending"),
    Column("priority", String(16), nullable=False, default="medium"),
    Column("photo_urls", JSON),
    Column("verified_by", String(64)),
    Column("assigned_to", String(64)),
    Column("verified_at", String(64)),
    Column("completed_at", String(64)),
    *_audit_columns(),
)

tasks = Table(
    TASKS_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("report_id", String(64), nullable=False, index=True),
    Column("assigned_to", String(64), nullable=False, index=True),
    Column("assigned_by", String(64), nullable=False),
    Column("status", String(32), nullable=False, default="assigned"),
    Column("notes", Text),
    Column("completion_photo_urls", JSON),
    Column("estimated_completion", String(64)),
    Column("actual_completion", String(64)),
    Column("task_location_lat", Float),
    Column("task_location_lng", Float),
    Column("task_address", String(500)),
    *_audit_columns(),
)

profiles = Table(
    PROFILES_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", String(64), nullable=False, unique=True),
    Column("full_name", String(255)),
    Column("email", String(255), nullable=False),
    Column("phone", String(32)),
    Column("role", String(32), nullable=False, index=True),
    Column("address", String(500)),
    Column("current_location_lat", Float),
    Column("current_location_lng", Float),
    Column("current_address", String(500)),
    Column("availability_status", String(16), default="offline"),
    Column("last_location_update", String(64)),
    Column("last_seen", String(64)),
    *_audit_columns(),
)

notifications = Table(
    NOTIFICATIONS_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("type", String(64), nullable=False),
    Column("title", String(255), nullable=False),
    Column("message", Text, nullable=False),
    Column("data", JSON),
    Column("is_read", Boolean, default=False),
    *_audit_columns(),
)

report_feedback = Table(
    FEEDBACK_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("report_id", String(64), nullable=False, index=True),
    Column("citizen_id", String(64), nullable=False),
    Column("rating", Integer, nullable=False),
    Column("comment", Text),
    *_audit_columns(),
)

job_listings = Table(
    JOB_LISTINGS_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("requirements", Text),
    Column("location", String(255)),
    Column("department", String(255)),
    Column("job_type", String(32), nullable=False),
    Column("salary_range", String(64)),
    Column("posted_by", String(64), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    *_audit_columns(),
)

job_applications = Table(
    JOB_APPLICATIONS_TABLE,
    metadata,
    Column("id", String(64), primary_key=True),
    Column("job_id", String(64), nullable=False, index=True),
    Column("applicant_id", String(64), nullable=False, index=True),
    Column("resume_url", String(1000)),
    Column("cover_letter", Text),
    Column("contact_phone", String(32)),
    Column("status", String(32), nullable=False, default="pending"),
    Column("interview_date", String(64)),
    Column("interview_notes", Text),
    Column("reviewed_by", String(64)),
    *_audit_columns(),
)
