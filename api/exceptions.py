"""
Maps application exceptions to API responses
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    BaseApplicationException,
    BusinessLogicError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first: ConflictError is a BusinessLogicError
STATUS_BY_EXCEPTION = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (BusinessLogicError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_for(exc: BaseApplicationException) -> int:
    for exc_class, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def application_exception_handler(exc, context):
    """
    DRF exception handler.

    Application exceptions become ``{detail, code, details}`` responses,
    Django model validation errors become 400s, everything else is left to DRF.
    """
    if isinstance(exc, BaseApplicationException):
        status_code = status_for(exc)
        view = context.get('view')
        logger.warning(
            f"{exc.code}: {exc.message}",
            extra={'view': view.__class__.__name__ if view else None}
        )
        return Response(exc.as_dict(), status=status_code)

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return Response(
            {'detail': ValidationError.default_message, 'code': ValidationError.default_code, 'details': details},
            status=status.HTTP_400_BAD_REQUEST
        )

    return exception_handler(exc, context)
