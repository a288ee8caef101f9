"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class RoleNotFoundError(AccountsServiceError):
    """Raised when a role looked up by name does not exist."""
    pass


class UserUpdateError(AccountsServiceError):
    """Raised when a profile update conflicts with existing data."""
    pass


class PhotoUploadError(AccountsServiceError):
    """Raised when the photo cannot be stored."""
    pass


class TeamServiceError(AccountsServiceError):
    """Raised when the external equipment service cannot be queried."""
    pass
