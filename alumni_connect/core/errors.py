"""
Error taxonomy for the messaging core.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with. Routes let these propagate; the handler registered in
``main.py`` turns them into ``{"error": code, "detail": message}`` bodies.
"""


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class FetchFailed(AppError):
    """Record store unreachable, query error or timeout. Safe to retry the read."""
    code = "fetch_failed"
    status_code = 503


class ValidationError(AppError):
    """Caller-side precondition violated (blank body, self-send, ...)."""
    code = "validation_error"
    status_code = 422


class ContactNotFound(AppError):
    """Contact does not exist or is not visible to the current user."""
    code = "contact_not_found"
    status_code = 404


class PartialAggregationFailure(AppError):
    """
    Some per-contact lookups failed while others succeeded.

    Never raised: it rides along inside a successful conversation list so the
    client can show what loaded plus a warning.
    """
    code = "partial_aggregation_failure"
    status_code = 200

    def __init__(self, failed: int, total: int):
        super().__init__(f"{failed} of {total} conversations could not be loaded")
        self.failed = failed
        self.total = total

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"failed": self.failed, "total": self.total})
        return data
