"""
Error taxonomy shared by the rollup service and the HTTP layer.

Each error knows the status code the boundary should answer with, so routers
never have to translate exceptions themselves.
"""

from fastapi import status


class PerformanceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(PerformanceError):
    """Identifier or window parameter missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(PerformanceError):
    """The data source has no user with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamFailure(PerformanceError):
    """The data source was unreachable or answered with something unusable."""

    status_code = status.HTTP_502_BAD_GATEWAY
