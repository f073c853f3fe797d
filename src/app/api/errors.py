"""Translation of domain errors into HTTP error responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..auth.auth_service import UnauthorizedError
from ..exceptions import ForbiddenError, NotFoundError, ValidationError
from ..ingest.ingest_errors import ProbeError, PublishError, RewriteError
from ..ingest.ingest_models import FailureReason

_ERROR_MAP: tuple[tuple[type[Exception], int, FailureReason], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, FailureReason.INVALID_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED, FailureReason.UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN, FailureReason.FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND, FailureReason.NOT_FOUND),
    (ProbeError, status.HTTP_500_INTERNAL_SERVER_ERROR, FailureReason.PROBE_FAILED),
    (RewriteError, status.HTTP_500_INTERNAL_SERVER_ERROR, FailureReason.REWRITE_FAILED),
    (PublishError, status.HTTP_500_INTERNAL_SERVER_ERROR, FailureReason.PUBLISH_FAILED),
)


def error_detail(reason: FailureReason, message: str | None = None) -> dict[str, str]:
    detail = {"status": "error", "failure_reason": reason.value}
    if message:
        detail["message"] = message
    return detail


def http_error_for(exc: Exception) -> HTTPException:
    """Return the :class:`HTTPException` a router should raise for ``exc``."""

    for error_type, status_code, reason in _ERROR_MAP:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=error_detail(reason, str(exc)))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_detail(FailureReason.INTERNAL_ERROR, "Internal server error"),
    )


__all__ = ["error_detail", "http_error_for"]
