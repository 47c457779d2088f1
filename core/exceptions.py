"""API exceptions shared by the apps and the DRF exception handler."""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.views import exception_handler


logger = logging.getLogger(__name__)


class EntityNotFoundException(NotFound):
    """Raised when a requested id / identifier / email does not resolve."""

    default_detail = 'Entity not found.'
    default_code = 'entity_not_found'


class RegistrationException(APIException):
    """Business-rule violation while creating an account (e.g. duplicate email)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Unable to complete registration.'
    default_code = 'registration_failed'


def api_exception_handler(exc, context):
    """Delegate to DRF's handler and log the handled API errors.

    Anything DRF does not recognise is returned as ``None`` and propagates
    as a server error.
    """
    response = exception_handler(exc, context)
    if response is not None:
        view = context.get('view')
        logger.warning(
            '%s in %s: %s',
            exc.__class__.__name__,
            view.__class__.__name__ if view is not None else 'unknown view',
            getattr(exc, 'detail', exc),
        )
    return response
