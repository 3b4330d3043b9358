"""
Service error taxonomy.

Every failure a caller can observe is one of these. Each carries a stable
machine tag (`code`), an HTTP-equivalent status and a human readable message.
`recordable` errors are stored under the idempotency key that produced them
so a retry observes the same failure; `Internal` is never recorded, a retry
with the same key must be allowed to try again.
"""

from __future__ import annotations


class ServiceError(Exception):
    code = "internal_error"
    status_code = 500
    default_message = "Unexpected server error"
    recordable = True

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_body(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class InvalidRequest(ServiceError):
    code = "invalid_request"
    status_code = 400
    default_message = "The request is malformed or missing required fields"


class NotFound(ServiceError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class Conflict(ServiceError):
    code = "slot_unavailable"
    status_code = 409
    default_message = "This time slot is no longer available"


class PolicyViolation(ServiceError):
    code = "booking_buffer_violation"
    status_code = 422
    default_message = "The booking violates the booking window policy"


class Unsupported(ServiceError):
    code = "unsupported_event"
    status_code = 400
    default_message = "Unsupported event type"


class Internal(ServiceError):
    recordable = False
