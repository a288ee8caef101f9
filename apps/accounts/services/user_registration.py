"""User registration service."""

import logging
from typing import Optional

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    nombre: str,
    usuario: str,
    email: str,
    password: str,
    rol: Optional[str] = None
) -> User:
    """
    Register a new staff user.

    Args:
        nombre: Display name
        usuario: Login handle
        email: User's email address (unique)
        password: User's password (will be hashed)
        rol: Role label for the access token, defaults to 'tesorero'

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    email = User.objects.normalize_email(email)

    if User.objects.filter(email__iexact=email).exists():
        logger.warning("Registration rejected, email already in use: %s", email)
        raise UserRegistrationError("El email ya está registrado")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            nombre=nombre,
            usuario=usuario,
            rol=rol or User.DEFAULT_ROL,
        )
    except IntegrityError:
        # Concurrent registration with the same email
        raise UserRegistrationError("El email ya está registrado")

    logger.info("Registered user id=%s email=%s", user.id, user.email)
    return user
