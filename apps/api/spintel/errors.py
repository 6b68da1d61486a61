"""
Error taxonomy for reporting endpoints.
ValidationError -> 400, NotFoundError -> 404, StoreError -> 500. Each carries a
client-safe message only; internal detail is logged where the error is raised.
"""


class ReportError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReportError):
    """Bad or missing caller input."""

    status_code = 400


class NotFoundError(ReportError):
    status_code = 404


class StoreError(ReportError):
    """Query execution failed or the store is unavailable."""

    status_code = 500
