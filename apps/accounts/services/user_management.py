"""User, role and area administration service."""

import logging
from typing import Iterable, Optional, Tuple

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import UploadedFile
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from ..models import Role, UserArea, UserRole, UserTeam
from .exceptions import RoleNotFoundError, UserNotFoundError, UserUpdateError
from .photo_storage import delete_user_photo, upload_user_photo
from .team_directory import fetch_user_teams

User = get_user_model()

logger = logging.getLogger(__name__)


def list_users() -> QuerySet:
    """All users, unpaginated."""
    return User.objects.all()


def get_user(*, user_id: int) -> User:
    """
    Get a user with roles (and their permissions) and areas loaded.

    Raises:
        UserNotFoundError: If user does not exist
    """
    try:
        return (
            User.objects
            .prefetch_related('roles__permisos', 'areas')
            .get(id=user_id)
        )
    except User.DoesNotExist:
        raise UserNotFoundError("Usuario no encontrado")


def update_user(
    *,
    user_id: int,
    nombre: str,
    apellido: str,
    usuario: str,
    email: str,
    ci: str,
    profesion: Optional[str] = None,
    password: Optional[str] = None,
    foto: Optional[UploadedFile] = None,
    roles: Iterable[Role] = (),
    areas: Iterable = (),
) -> User:
    """
    Replace a user's profile, role set and area set.

    The new photo is uploaded before the database transaction. Once the
    transaction commits the previous photo is destroyed; if it fails the
    freshly uploaded one is destroyed instead.

    Args:
        user_id: User to update
        nombre, apellido, usuario, email, ci: Required profile fields
        profesion: Optional profession
        password: New password, hashed before storage
        foto: Uploaded photo file
        roles: Roles the user will hold afterwards
        areas: Areas the user will belong to afterwards

    Returns:
        Updated User instance

    Raises:
        UserNotFoundError: If user does not exist
        UserUpdateError: If the email belongs to another user
        PhotoUploadError: If the photo cannot be stored
    """
    if not User.objects.filter(id=user_id).exists():
        raise UserNotFoundError("Usuario no encontrado")

    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exclude(id=user_id).exists():
        logger.warning("Update of user id=%s rejected, email in use: %s", user_id, email)
        raise UserUpdateError("El email ya está registrado por otro usuario")

    new_photo_url = upload_user_photo(foto) if foto else None

    try:
        user, previous_photo = _apply_user_update(
            user_id=user_id,
            fields={
                'nombre': nombre,
                'apellido': apellido,
                'usuario': usuario,
                'email': email,
                'ci': ci,
                'profesion': profesion,
            },
            password=password,
            photo_url=new_photo_url,
            roles=list(roles),
            areas=list(areas),
        )
    except Exception:
        if new_photo_url:
            delete_user_photo(new_photo_url)
        raise

    if new_photo_url and previous_photo:
        delete_user_photo(previous_photo)

    logger.info("Updated user id=%s", user.id)
    return get_user(user_id=user.id)


@transaction.atomic
def _apply_user_update(*, user_id, fields, password, photo_url, roles, areas) -> Tuple[User, Optional[str]]:
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("Usuario no encontrado")

    previous_photo = user.foto

    for name, value in fields.items():
        setattr(user, name, value)
    if password:
        user.set_password(password)
    if photo_url:
        user.foto = photo_url

    try:
        with transaction.atomic():
            user.save()
    except IntegrityError:
        raise UserUpdateError("El email ya está registrado por otro usuario")

    # Role and area sets are replaced wholesale
    UserRole.objects.filter(user=user).delete()
    UserRole.objects.bulk_create([UserRole(user=user, role=role) for role in roles])

    UserArea.objects.filter(user=user).delete()
    UserArea.objects.bulk_create([UserArea(user=user, area=area) for area in areas])

    return user, previous_photo


@transaction.atomic
def delete_user(*, user_id: int) -> None:
    """
    Delete a user after removing its role, team and area links.

    Raises:
        UserNotFoundError: If user does not exist
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("Usuario no encontrado")

    UserRole.objects.filter(user=user).delete()
    UserTeam.objects.filter(user=user).delete()
    UserArea.objects.filter(user=user).delete()
    user.delete()

    logger.info("Deleted user id=%s", user_id)


def get_users_by_role(*, role_id: int) -> QuerySet:
    """Users holding the given role."""
    return (
        User.objects
        .filter(user_roles__role_id=role_id)
        .prefetch_related('roles', 'areas')
        .distinct()
    )


def get_user_full_name(*, user_id: int) -> str:
    """
    Return ``"<nombre> <apellido>"`` for a user.

    Raises:
        UserNotFoundError: If user does not exist
    """
    user = User.objects.filter(id=user_id).only('nombre', 'apellido').first()
    if user is None:
        raise UserNotFoundError("Usuario no encontrado")
    return f"{user.nombre} {user.apellido}"


def get_technicians() -> QuerySet:
    """
    Users holding the ``Tecnico`` role, with roles and areas loaded.

    Raises:
        RoleNotFoundError: If the role is not defined
    """
    role = Role.objects.filter(nombre=Role.TECNICO).first()
    if role is None:
        raise RoleNotFoundError(f"Rol '{Role.TECNICO}' no encontrado")

    return (
        User.objects
        .filter(user_roles__role=role)
        .prefetch_related('roles', 'areas')
        .distinct()
    )


def count_users() -> int:
    return User.objects.count()


def get_user_with_teams(*, user_id: int):
    """
    Get a user together with its teams from the equipment service.

    Returns:
        Tuple of (User, teams payload)

    Raises:
        UserNotFoundError: If user does not exist
        TeamServiceError: If the equipment service call fails
    """
    user = get_user(user_id=user_id)
    equipos = fetch_user_teams(user.id)
    return user, equipos
