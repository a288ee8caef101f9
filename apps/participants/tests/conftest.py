import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.accounts.services import issue_access_token
from apps.participants.models import Participant
from apps.participants.services import register_participant


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def tesorero(db):
    """Create and return the staff user registering participants."""
    return User.objects.create_user(
        email='tesorero@example.com',
        password='TestPass123!',
        nombre='Tesorero',
        apellido='General',
        usuario='tesorero',
    )


@pytest.fixture
def tesorero_client(api_client, tesorero):
    """Return API client authenticated as tesorero."""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(tesorero)}')
    return api_client


@pytest.fixture
def participant_data():
    return {
        'nombres': 'María',
        'apellidos': 'Quispe',
        'carrera': 'Ingeniería de Sistemas',
        'ci': '8123456',
        'celular': '70012345',
    }


@pytest.fixture
def participant(tesorero, participant_data):
    """Participant registered with an initial payment of 100."""
    participant, _ = register_participant(
        monto_inicial=Decimal('100'),
        usuario_id=tesorero.id,
        **participant_data
    )
    return participant


@pytest.fixture
def unpaid_participant(db):
    """Participant with no payments and no owner."""
    participant, _ = register_participant(
        nombres='Juan',
        apellidos='Mamani',
        carrera='Medicina',
        ci='6543210',
        celular='71234567',
    )
    return participant


@pytest.fixture
def many_participants(tesorero):
    """Fifteen participants with no payments."""
    return [
        Participant.objects.create(
            nombres=f'Nombre {i}',
            apellidos=f'Apellido {i}',
            carrera='Derecho' if i % 3 else 'Medicina',
            ci=f'{1000000 + i}',
            celular='70000000',
            usuario=tesorero,
        )
        for i in range(15)
    ]
