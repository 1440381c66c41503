from decimal import Decimal
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from jobly.auth import CurrentUser, require_admin, require_user
from jobly.config import get_settings
from jobly.db import get_engine
from jobly.logging_config import configure_logging
from jobly.services.jobs import Job, JobDetail, JobRepository, JobsError
from jobly.services.jobs.filters import has_filters

app = FastAPI(title="Jobly API", version="0.1.0")


class JobCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    company_handle: str = Field(alias="companyHandle", min_length=1, max_length=25)


class JobUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    company_handle: str | None = Field(
        default=None,
        alias="companyHandle",
        min_length=1,
        max_length=25,
    )


@app.on_event("startup")
def startup() -> None:
    configure_logging(get_settings().log_level)
    get_engine()


@app.exception_handler(JobsError)
def handle_jobs_error(_request: Request, exc: JobsError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
def handle_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def get_job_repository() -> JobRepository:
    return JobRepository(get_engine())


def _job_payload(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "title": job.title,
        "salary": job.salary,
        "equity": job.equity,
        "companyHandle": job.company_handle,
    }


def _job_detail_payload(job: JobDetail) -> dict[str, Any]:
    return {
        "id": job.id,
        "title": job.title,
        "salary": job.salary,
        "equity": job.equity,
        "company": {
            "handle": job.company.handle,
            "name": job.company.name,
            "description": job.company.description,
            "numEmployees": job.company.num_employees,
            "logoUrl": job.company.logo_url,
        },
    }


def _to_has_equity(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"hasEquity must be 'true' or 'false', got {value!r}")


def _filter_options(
    *,
    title: str | None,
    min_salary: str | None,
    has_equity: str | None,
) -> dict[str, Any]:
    # Coercion failures are left unhandled and surface as 500.
    return {
        "title": title,
        "min_salary": int(min_salary) if min_salary is not None else None,
        "has_equity": _to_has_equity(has_equity) if has_equity is not None else None,
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/jobs", status_code=201)
def create_job(
    request: JobCreateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
) -> dict[str, Any]:
    job = repository.create(request.model_dump())
    return {"job": _job_payload(job)}


@app.get("/jobs")
def list_jobs(
    _user: Annotated[CurrentUser, Depends(require_user)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
    title: str | None = Query(default=None),
    min_salary: str | None = Query(default=None, alias="minSalary"),
    has_equity: str | None = Query(default=None, alias="hasEquity"),
) -> dict[str, list[dict[str, Any]]]:
    options = _filter_options(title=title, min_salary=min_salary, has_equity=has_equity)
    if has_filters(options):
        jobs = repository.filter(options)
    else:
        jobs = repository.find_all()
    return {"jobs": [_job_payload(job) for job in jobs]}


@app.get("/jobs/{job_id}")
def get_job(
    job_id: int,
    _user: Annotated[CurrentUser, Depends(require_user)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
) -> dict[str, Any]:
    return {"job": _job_detail_payload(repository.get(job_id))}


@app.patch("/jobs/{job_id}")
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
) -> dict[str, Any]:
    job = repository.update(job_id, request.model_dump(exclude_unset=True))
    return {"job": _job_payload(job)}


@app.delete("/jobs/{job_id}")
def delete_job(
    job_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
) -> dict[str, str]:
    repository.remove(job_id)
    return {"deleted": str(job_id)}


def run() -> None:
    import uvicorn

    uvicorn.run("jobly.main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    run()
