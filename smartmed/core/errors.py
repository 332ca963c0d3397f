from enum import Enum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


class ServiceError(Exception):
    """
    Coarse, operation-named failure raised at the service boundary.

    The message never carries the underlying database error; callers branch
    on ``kind`` and the original exception stays on ``__cause__``.
    """

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.message = message
        self.kind = kind

    @classmethod
    def from_db_error(cls, message: str, exc: SQLAlchemyError) -> "ServiceError":
        if isinstance(exc, IntegrityError):
            return cls(message, ErrorKind.CONSTRAINT_VIOLATION)
        return cls(message, ErrorKind.TRANSPORT_FAILURE)


class ReadingServiceError(ServiceError):
    pass
