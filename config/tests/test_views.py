import pytest
from unittest.mock import patch
from django.db import OperationalError
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient

from config.exceptions import api_exception_handler


@pytest.mark.django_db
class TestHealthCheck:

    def test_ok(self, client):
        response = client.get(reverse('health-check'))

        assert response.status_code == 200
        assert response.json() == {'status': 'ok'}

    def test_database_down(self, client):
        with patch('config.views.connection') as mock_connection:
            mock_connection.cursor.side_effect = OperationalError('gone')
            response = client.get(reverse('health-check'))

        assert response.status_code == 503


@pytest.mark.django_db
def test_schema_is_served():
    response = APIClient().get(reverse('api-schema'))

    assert response.status_code == 200


class TestApiExceptionHandler:

    def test_detail_becomes_error(self):
        response = api_exception_handler(NotFound('No existe'), {})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'No existe'}

    def test_unhandled_exception_is_500(self):
        response = api_exception_handler(RuntimeError('boom'), {'view': None})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'error': 'Error interno del servidor'}
