"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    RoleNotFoundError,
    UserUpdateError,
    PhotoUploadError,
    TeamServiceError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, issue_access_token
from .user_management import (
    list_users,
    get_user,
    update_user,
    delete_user,
    get_users_by_role,
    get_user_full_name,
    get_technicians,
    count_users,
    get_user_with_teams,
)
from .photo_storage import upload_user_photo, delete_user_photo, extract_public_id
from .team_directory import fetch_user_teams

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'RoleNotFoundError',
    'UserUpdateError',
    'PhotoUploadError',
    'TeamServiceError',
    # Auth
    'register_user',
    'authenticate_user',
    'issue_access_token',
    # User administration
    'list_users',
    'get_user',
    'update_user',
    'delete_user',
    'get_users_by_role',
    'get_user_full_name',
    'get_technicians',
    'count_users',
    'get_user_with_teams',
    # Integrations
    'upload_user_photo',
    'delete_user_photo',
    'extract_public_id',
    'fetch_user_teams',
]
