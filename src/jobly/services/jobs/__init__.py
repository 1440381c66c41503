from jobly.services.jobs.errors import (
    BadRequestError,
    ConflictError,
    ConstraintError,
    JobsError,
    NotFoundError,
)
from jobly.services.jobs.filters import build_filter
from jobly.services.jobs.repository import JobRepository
from jobly.services.jobs.types import CompanySnapshot, Job, JobDetail

__all__ = [
    "BadRequestError",
    "CompanySnapshot",
    "ConflictError",
    "ConstraintError",
    "Job",
    "JobDetail",
    "JobRepository",
    "JobsError",
    "NotFoundError",
    "build_filter",
]
