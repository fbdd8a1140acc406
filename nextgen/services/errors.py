from __future__ import annotations


class ServiceError(RuntimeError):
    """Request-level failure carrying the HTTP status the router should answer with."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(ServiceError):
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409
