"""
Domain exceptions shared by the service layer.

They subclass Django's own exceptions so code that already catches
ValidationError / PermissionDenied / ObjectDoesNotExist keeps working, while
mitra_project.response_formatter can still tell them apart:

    ValidationError     -> 400 malformed or incomplete input
    ConflictError       -> 409 input collides with existing records
    AuthorizationError  -> 403 actor lacks the required privilege
    NotFoundError       -> 404 referenced record does not exist
"""
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError


class ConflictError(ValidationError):
    """Identity collision, duplicate pending request, mobility gate, etc."""


class AuthorizationError(PermissionDenied):
    """Actor is not allowed to perform the operation."""


class NotFoundError(ObjectDoesNotExist):
    """Referenced record does not exist."""


def error_payload(exc):
    """
    Return the errors carried by a ValidationError as a dict (field errors)
    or a list of messages.
    """
    if hasattr(exc, 'error_dict'):
        return exc.message_dict
    return exc.messages


def error_text(exc):
    """Flatten a ValidationError into one line, used for per-row import errors."""
    if isinstance(exc, ValidationError):
        payload = error_payload(exc)
        if isinstance(payload, dict):
            return '; '.join(msg for messages in payload.values() for msg in messages)
        return '; '.join(payload)
    return str(exc)
