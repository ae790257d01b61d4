REPORTS_TABLE = "waste_reports"
TASKS_TABLE = "tasks"
PROFILES_TABLE = "profiles"
NOTIFICATIONS_TABLE = "notifications"
FEEDBACK_TABLE = "report_feedback"
JOB_LISTINGS_TABLE = "job_listings"
JOB_APPLICATIONS_TABLE = "job_applications"

PRESENCE_CHANNEL = "municipality_presence"
RESUMES_BUCKET = "resumes"
REPORT_PHOTOS_BUCKET = "report-photos"
COMPLETION_PHOTOS_BUCKET = "completion-photos"
