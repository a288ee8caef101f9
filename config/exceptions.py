"""
Project-wide DRF exception handler.

Every error leaving the API carries an ``error`` key so clients can rely on
a single shape. Validation failures keep their field messages under
``details``. Exceptions DRF does not know about become a logged 500.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = 'Acceso denegado. Token requerido.'


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            'Unhandled error in %s',
            view.__class__.__name__ if view else 'unknown view',
            exc_info=exc,
        )
        return Response(
            {'error': 'Error interno del servidor'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, NotAuthenticated):
        response.data = {'error': MISSING_TOKEN_MESSAGE}
    elif isinstance(exc, ValidationError):
        response.data = {
            'error': 'Datos inválidos',
            'details': response.data,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'error': str(response.data['detail'])}

    return response
