import logging

from django.db import IntegrityError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ApiError(exceptions.APIException):
    """
    Domain error rendered as {"error": {"code", "message", "details"}}.
    Raise it from services; the DRF exception handler does the rest.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    default_message = "Invalid request"

    def __init__(self, message=None, details=None, code=None):
        self.message = message or self.default_message
        self.details = details
        if code:
            self.code = code
        super().__init__(detail=self.message, code=self.code)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    default_message = "Invalid request"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "Access denied"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Duplicate value for a unique field"


class UnprocessableEntity(ApiError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNPROCESSABLE_ENTITY"
    default_message = "Unprocessable entity"


def error_response(code, message, http_status, details=None):
    return Response(
        {"error": {"code": code, "message": message, "details": details}},
        status=http_status,
    )


def _detail_message(detail) -> str:
    # simplejwt puts a dict in .detail ({"detail": ..., "code": ..., "messages": [...]})
    if isinstance(detail, dict):
        return str(detail.get("detail", "Invalid credentials"))
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, ApiError):
        return error_response(exc.code, exc.message, exc.status_code, exc.details)

    if isinstance(exc, exceptions.ValidationError):
        return error_response("VALIDATION_ERROR", "Validation failed", exc.status_code, exc.detail)

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        if exc.status_code == status.HTTP_403_FORBIDDEN:
            return error_response("FORBIDDEN", Forbidden.default_message, exc.status_code)
        response = error_response("UNAUTHORIZED", _detail_message(exc.detail), exc.status_code)
        auth_header = getattr(exc, "auth_header", None)
        if auth_header:
            response["WWW-Authenticate"] = auth_header
        return response

    if isinstance(exc, exceptions.PermissionDenied):
        return error_response("FORBIDDEN", _detail_message(exc.detail), exc.status_code)

    if isinstance(exc, IntegrityError):
        return error_response("CONFLICT", Conflict.default_message, status.HTTP_409_CONFLICT)

    response = exception_handler(exc, context)
    if response is not None:
        code = getattr(exc, "default_code", "error").upper()
        message = response.data.get("detail", str(exc)) if isinstance(response.data, dict) else str(exc)
        response.data = {"error": {"code": code, "message": str(message), "details": None}}
        return response

    view = context.get("view")
    logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "view")
    return error_response("INTERNAL_SERVER_ERROR", "Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
