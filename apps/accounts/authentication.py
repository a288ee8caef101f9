"""
Bearer token authentication.

Tokens are verified without touching the database: ``request.user`` becomes
a SimpleJWT ``TokenUser`` built from the claims and ``request.auth`` holds
the validated token (``id``, ``email``, ``role``).
"""
from rest_framework.exceptions import APIException, AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTStatelessUserAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken


class BadTokenError(APIException):
    """Token present but invalid or expired."""
    status_code = 400
    default_detail = 'Token inválido'
    default_code = 'bad_token'


class BearerTokenAuthentication(JWTStatelessUserAuthentication):
    """
    Stateless JWT authentication.

    A request without an ``Authorization`` header is left to the permission
    layer (401). Any header that does not carry a valid bearer token is
    rejected with 400, including a malformed header or a foreign scheme.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None or not header.strip():
            return None

        try:
            raw_token = self.get_raw_token(header)
        except AuthenticationFailed:
            raise BadTokenError()
        if raw_token is None:
            raise BadTokenError()

        try:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        except (InvalidToken, AuthenticationFailed):
            raise BadTokenError()
