"""Client for the external equipment (team membership) service."""

import logging

import requests
from django.conf import settings

from .exceptions import TeamServiceError

logger = logging.getLogger(__name__)


def fetch_user_teams(user_id: int):
    """
    Get the teams a user belongs to.

    Calls ``GET {EQUIPO_SERVICE_URL}/user/{user_id}`` with the configured
    timeout and returns the decoded JSON body unchanged.

    Raises:
        TeamServiceError: On connection errors, timeouts, non-2xx responses
            or a body that is not JSON
    """
    url = f"{settings.EQUIPO_SERVICE_URL.rstrip('/')}/user/{user_id}"

    logger.info("[EQUIPOS] Fetching teams for user_id=%s url=%s", user_id, url)
    try:
        response = requests.get(url, timeout=settings.EQUIPO_SERVICE_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.exception("[EQUIPOS] Team lookup failed for user_id=%s", user_id)
        raise TeamServiceError(f"Error al consultar el servicio de equipos: {e}") from e
