"""
Custom Response Formatter for Standardized API Responses

Every API response follows the format:
{
    "status": "success" | "error",
    "message": "string message or empty",
    "data": {...} | [] | null
}

Domain errors raised by the service layer (core.base.exceptions) are mapped
to HTTP codes here so views can let them propagate:

    ValidationError     -> 400
    ConflictError       -> 409 (field errors kept under "data")
    AuthorizationError  -> 403
    NotFoundError       -> 404
"""
import logging

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status as http_status
from rest_framework.renderers import JSONRenderer

from core.base.exceptions import ConflictError, error_payload

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Format all error responses consistently.

    Django ValidationError and ObjectDoesNotExist are not known to DRF's
    default handler, so they are turned into responses here first.
    """
    if isinstance(exc, ValidationError):
        status_code = (
            http_status.HTTP_409_CONFLICT if isinstance(exc, ConflictError)
            else http_status.HTTP_400_BAD_REQUEST
        )
        errors = error_payload(exc)
        body = format_error_response(errors, status_code)
        if isinstance(errors, dict):
            body['data'] = errors
        return Response(body, status=status_code)

    if isinstance(exc, ObjectDoesNotExist):
        return Response(
            format_error_response(str(exc) or 'Not found.', http_status.HTTP_404_NOT_FOUND),
            status=http_status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, PermissionDenied):
        # Generic message, the reason stays in the server log
        logger.warning(f"Permission denied: {exc}")
        return Response(
            format_error_response('You do not have permission to perform this action.',
                                  http_status.HTTP_403_FORBIDDEN),
            status=http_status.HTTP_403_FORBIDDEN,
        )

    response = exception_handler(exc, context)
    if response is not None:
        response.data = format_error_response(response.data, response.status_code)
    return response


def format_error_response(errors, status_code):
    """
    Format error responses into standard format.

    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - {"detail": "message"} -> "message"
    - ["error1", "error2"] -> "error1, error2"
    """
    message = ""

    if isinstance(errors, dict):
        error_messages = []
        for field, field_errors in errors.items():
            if field == 'detail':
                message = str(field_errors)
            elif isinstance(field_errors, list):
                error_messages.append(f"{field}: {', '.join(str(e) for e in field_errors)}")
            elif isinstance(field_errors, dict):
                error_messages.append(f"{field}: {format_nested_errors(field_errors)}")
            else:
                error_messages.append(f"{field}: {str(field_errors)}")

        if error_messages:
            message = "; ".join(error_messages)

    elif isinstance(errors, list):
        message = ", ".join(str(e) for e in errors)

    else:
        message = str(errors)

    return {
        "status": "error",
        "message": message,
        "data": None
    }


def format_nested_errors(errors_dict):
    """Format nested error dictionaries."""
    messages = []
    for key, value in errors_dict.items():
        if isinstance(value, list):
            messages.append(f"{key}: {', '.join(str(v) for v in value)}")
        elif isinstance(value, dict):
            messages.append(f"{key}: {format_nested_errors(value)}")
        else:
            messages.append(f"{key}: {str(value)}")
    return "; ".join(messages)


class StandardizedJSONRenderer(JSONRenderer):
    """
    JSON renderer that wraps responses in the standard envelope unless the
    view already did so.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None
        if response is not None and response.status_code == 204:
            return b''
        if response is not None and not self.is_already_formatted(data):
            if response.status_code >= 400:
                data = format_error_response(data, response.status_code)
            else:
                data = self.format_success_response(data)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        """True when data already carries status, message and data keys."""
        return isinstance(data, dict) and {'status', 'message', 'data'} <= set(data.keys())

    def format_success_response(self, data):
        if isinstance(data, dict) and 'detail' in data:
            return {"status": "success", "message": str(data['detail']), "data": None}
        if data is None or (isinstance(data, dict) and not data):
            return {"status": "success", "message": "", "data": None}
        return {"status": "success", "message": "", "data": data}


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Helper to create standardized success responses.

    Usage:
        return success_response(
            data=serializer.data,
            message="Employee created",
            status_code=status.HTTP_201_CREATED
        )
    """
    return Response({
        "status": "success",
        "message": message,
        "data": data
    }, status=status_code)


def error_response(message, data=None, status_code=http_status.HTTP_400_BAD_REQUEST):
    """Helper to create standardized error responses."""
    return Response({
        "status": "error",
        "message": message,
        "data": data
    }, status=status_code)
