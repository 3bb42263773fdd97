# backend/services/errors.py
"""
Typed failures raised by repositories and the checkout workflow.

Only the HTTP adapter turns them into responses; `detail` is always safe to
show to a client, the underlying cause travels as ``__cause__``.
"""


class ServiceError(Exception):
    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFound(ServiceError):
    status_code = 404
    detail = "Not found"


class InvalidState(ServiceError):
    status_code = 400
    detail = "Invalid state"


class Internal(ServiceError):
    status_code = 500
    detail = "Internal server error"
