from dataclasses import dataclass


@dataclass(frozen=True)
class Job:
    id: int
    title: str
    salary: int | None
    equity: str | None
    company_handle: str


@dataclass(frozen=True)
class CompanySnapshot:
    handle: str
    name: str
    description: str
    num_employees: int | None
    logo_url: str | None


@dataclass(frozen=True)
class JobDetail:
    id: int
    title: str
    salary: int | None
    equity: str | None
    company: CompanySnapshot
