import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User, Role, Permission, Area, UserRole, UserArea
from apps.accounts.services import issue_access_token


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        nombre='Test',
        apellido='User',
        usuario='testuser',
        ci='1234567',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        nombre='Inactive',
        usuario='inactive',
        is_active=False,
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        nombre='Other',
        apellido='User',
        usuario='otheruser',
        ci='7654321',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an API client carrying a bearer token for `user`."""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(user)}')
    return api_client


@pytest.fixture
def permissions(db):
    return [
        Permission.objects.create(nombre='ver_participantes'),
        Permission.objects.create(nombre='registrar_pagos'),
    ]


@pytest.fixture
def roles(db, permissions):
    """Three roles; the first carries both permissions."""
    admin = Role.objects.create(nombre='Administrador')
    admin.permisos.set(permissions)
    tesorero = Role.objects.create(nombre='Tesorero')
    tecnico = Role.objects.create(nombre=Role.TECNICO)
    return [admin, tesorero, tecnico]


@pytest.fixture
def areas(db):
    return [
        Area.objects.create(nombre='Sistemas'),
        Area.objects.create(nombre='Finanzas'),
    ]


@pytest.fixture
def user_with_roles(user, roles, areas):
    """`user` holding the first two roles and the first area."""
    UserRole.objects.create(user=user, role=roles[0])
    UserRole.objects.create(user=user, role=roles[1])
    UserArea.objects.create(user=user, area=areas[0])
    return user
