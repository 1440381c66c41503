from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.elements import TextClause

from jobly.models import ExactDecimal
from jobly.services.jobs.errors import (
    BadRequestError,
    ConflictError,
    ConstraintError,
    JobsError,
    NotFoundError,
)
from jobly.services.jobs.filters import bind_parameters, build_filter
from jobly.services.jobs.types import CompanySnapshot, Job, JobDetail

logger = logging.getLogger(__name__)

_JOB_COLUMNS = "id, title, salary, CAST(equity AS TEXT) AS equity, company_handle"

# Python field name -> jobs column name, in SET clause order.
UPDATABLE_COLUMNS: dict[str, str] = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
    "company_handle": "company_handle",
}

_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def build_partial_update(
    patch: Mapping[str, Any],
    column_map: Mapping[str, str],
) -> tuple[str, dict[str, Any]]:
    """Build ``col = :field, ...`` for the fields present in ``patch``.

    Keys missing from ``column_map`` are ignored. Raises ``BadRequestError``
    when nothing is left to update.
    """
    assignments: list[str] = []
    params: dict[str, Any] = {}
    for field, column in column_map.items():
        if field not in patch:
            continue
        assignments.append(f"{column} = :{field}")
        params[field] = patch[field]

    if not assignments:
        raise BadRequestError("No data to update")
    return ", ".join(assignments), params


def _with_equity_type(statement: TextClause, params: Mapping[str, Any]) -> TextClause:
    if "equity" not in params:
        return statement
    return statement.bindparams(bindparam("equity", type_=ExactDecimal()))


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _classify_integrity_error(exc: IntegrityError) -> str:
    sqlstate = _sqlstate(exc)
    message = str(exc.orig)
    if sqlstate == _UNIQUE_VIOLATION or "UNIQUE constraint failed" in message:
        return "unique"
    if sqlstate == _FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in message:
        return "foreign_key"
    return "other"


def _translate_integrity_error(exc: IntegrityError, params: Mapping[str, Any]) -> JobsError:
    kind = _classify_integrity_error(exc)
    if kind == "unique":
        error: JobsError = ConflictError(f"Duplicate job: {params.get('title')}")
    elif kind == "foreign_key":
        error = ConstraintError(f"No company: {params.get('company_handle')}")
    else:
        error = ConstraintError("Job data violates a table constraint")

    logger.warning("job write rejected kind=%s error=%s", kind, error.message)
    return error


def _to_job(row: RowMapping) -> Job:
    return Job(
        id=int(row["id"]),
        title=row["title"],
        salary=row["salary"],
        equity=row["equity"],
        company_handle=row["company_handle"],
    )


def _to_job_detail(row: RowMapping) -> JobDetail:
    return JobDetail(
        id=int(row["id"]),
        title=row["title"],
        salary=row["salary"],
        equity=row["equity"],
        company=CompanySnapshot(
            handle=row["company_handle"],
            name=row["company_name"],
            description=row["company_description"],
            num_employees=row["company_num_employees"],
            logo_url=row["company_logo_url"],
        ),
    )


class JobRepository:
    """SQL access for job rows; one statement per operation."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, data: Mapping[str, Any]) -> Job:
        params = {
            "title": data["title"],
            "salary": data.get("salary"),
            "equity": data.get("equity"),
            "company_handle": data["company_handle"],
        }
        statement = _with_equity_type(
            text(
                f"""
                INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES (:title, :salary, :equity, :company_handle)
                RETURNING {_JOB_COLUMNS}
                """
            ),
            params,
        )

        try:
            with self._engine.begin() as connection:
                row = connection.execute(statement, params).mappings().one()
        except IntegrityError as exc:
            raise _translate_integrity_error(exc, params) from exc

        job = _to_job(row)
        logger.info("job created id=%s company_handle=%s", job.id, job.company_handle)
        return job

    def find_all(self) -> list[Job]:
        with self._engine.connect() as connection:
            rows = connection.execute(
                text(f"SELECT {_JOB_COLUMNS} FROM jobs ORDER BY title ASC, id ASC")
            ).mappings().all()
        return [_to_job(row) for row in rows]

    def filter(self, options: Mapping[str, Any]) -> list[Job]:
        fragment, params = build_filter(options)
        where_clause = f"WHERE {fragment}" if fragment else ""

        with self._engine.connect() as connection:
            rows = connection.execute(
                text(
                    f"""
                    SELECT {_JOB_COLUMNS}
                    FROM jobs
                    {where_clause}
                    ORDER BY title ASC, id ASC
                    """
                ),
                bind_parameters(params),
            ).mappings().all()

        if not rows:
            raise NotFoundError("No jobs match the given filters")
        return [_to_job(row) for row in rows]

    def get(self, job_id: int) -> JobDetail:
        with self._engine.connect() as connection:
            row = connection.execute(
                text(
                    """
                    SELECT j.id,
                           j.title,
                           j.salary,
                           CAST(j.equity AS TEXT) AS equity,
                           c.handle AS company_handle,
                           c.name AS company_name,
                           c.description AS company_description,
                           c.num_employees AS company_num_employees,
                           c.logo_url AS company_logo_url
                    FROM jobs j
                    JOIN companies c ON c.handle = j.company_handle
                    WHERE j.id = :job_id
                    """
                ),
                {"job_id": job_id},
            ).mappings().first()

        if row is None:
            raise NotFoundError(f"No job: {job_id}")
        return _to_job_detail(row)

    def update(self, job_id: int, patch: Mapping[str, Any]) -> Job:
        assignments, params = build_partial_update(patch, UPDATABLE_COLUMNS)

        statement = _with_equity_type(
            text(
                f"""
                UPDATE jobs
                SET {assignments}
                WHERE id = :job_id
                RETURNING {_JOB_COLUMNS}
                """
            ),
            params,
        )

        try:
            with self._engine.begin() as connection:
                row = connection.execute(statement, {**params, "job_id": job_id}).mappings().first()
        except IntegrityError as exc:
            raise _translate_integrity_error(exc, params) from exc

        if row is None:
            raise NotFoundError(f"No job: {job_id}")

        logger.info("job updated id=%s fields=%s", job_id, ",".join(params))
        return _to_job(row)

    def remove(self, job_id: int) -> None:
        with self._engine.begin() as connection:
            result = connection.execute(
                text("DELETE FROM jobs WHERE id = :job_id"),
                {"job_id": job_id},
            )

        if result.rowcount != 1:
            raise NotFoundError(f"No job: {job_id}")
        logger.info("job removed id=%s", job_id)
