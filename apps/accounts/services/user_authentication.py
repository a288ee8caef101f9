"""User authentication and token issuance service."""

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import AccessToken

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()


def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Args:
        email: User's email
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
        InactiveAccountError: If account is deactivated
    """
    try:
        user = User.objects.get(email__iexact=email)
    except User.DoesNotExist:
        raise InvalidCredentialsError("Usuario no encontrado")

    if not user.check_password(password):
        raise InvalidCredentialsError("Contraseña incorrecta")

    if not user.is_active:
        raise InactiveAccountError("La cuenta está desactivada")

    return user


def issue_access_token(user: User) -> str:
    """
    Sign an access token carrying the ``{id, email, role}`` claims.

    Lifetime comes from ``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']`` (one hour).
    """
    token = AccessToken.for_user(user)
    token['email'] = user.email
    token['role'] = user.rol
    return str(token)
