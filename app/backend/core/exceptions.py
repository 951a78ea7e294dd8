"""Structured API errors and the REST framework exception handler."""

import logging
from typing import Any, Optional, Tuple

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ApiError(exceptions.APIException):
    """An API failure rendered as ``{"error": ..., "code": ...}``."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"
    default_code = "BAD_REQUEST"

    def __init__(self, error: Optional[str] = None, code: Optional[str] = None, status_code: Optional[int] = None):
        self.error = error or self.default_detail
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail=self.error, code=self.code)


def error_response(error: str, code: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> Response:
    """Build an error response with the standard body."""
    return Response({"error": error, "code": code}, status=status_code)


def _first_validation_error(detail: Any, field: Optional[str] = None) -> Tuple[Optional[str], str, str]:
    """Walk nested ValidationError detail and return (field, message, code) of the first error."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            name = field if key == "non_field_errors" else key
            return _first_validation_error(value, name)
    if isinstance(detail, list) and detail:
        return _first_validation_error(detail[0], field)
    code = getattr(detail, "code", None) or "invalid"
    return field, str(detail), code


def _validation_code(field: Optional[str], code: str) -> str:
    # Codes raised explicitly by serializers are already upper-case machine codes
    if code.isupper():
        return code
    if field:
        return f"{field}_{code}".upper()
    return code.upper()


def api_exception_handler(exc, context):
    """Render every exception as ``{"error", "code"}`` with the matching HTTP status."""
    if isinstance(exc, ApiError):
        return error_response(exc.error, exc.code, exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        field, message, code = _first_validation_error(exc.detail)
        error = f"{field}: {message}" if field else message
        return error_response(error, _validation_code(field, code), status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, (Http404, exceptions.NotFound)):
        return error_response("Not found", "NOT_FOUND", status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
            code = "UNAUTHORIZED"
        else:
            code = str(getattr(exc, "default_code", "permission_denied")).upper()
        data = response.data
        message = data.get("detail", str(exc)) if isinstance(data, dict) else str(exc)
        response.data = {"error": str(message), "code": code}
        return response

    view = context.get("view")
    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'API view'}: {exc}")
    return error_response("Internal server error", "INTERNAL_ERROR", status.HTTP_500_INTERNAL_SERVER_ERROR)
