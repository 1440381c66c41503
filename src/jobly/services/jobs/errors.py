class JobsError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(JobsError):
    status_code = 404


class ConflictError(JobsError):
    """A uniqueness constraint rejected the write."""


class ConstraintError(JobsError):
    """A foreign key or check constraint rejected the write."""


class BadRequestError(JobsError):
    pass
