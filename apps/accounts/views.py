from rest_framework import status, serializers
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    UserUpdateSerializer,
    AuthUserSerializer,
    UserSerializer,
    UserWithRolesSerializer,
    UserDetailSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_access_token,
    list_users,
    get_user,
    update_user,
    delete_user,
    get_users_by_role,
    get_user_full_name,
    get_technicians,
    count_users,
    get_user_with_teams,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    RoleNotFoundError,
    UserUpdateError,
    PhotoUploadError,
    TeamServiceError,
)


# Response serializers for API documentation
class RegisterResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()


class LoginResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    token = serializers.CharField()
    user = AuthUserSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class UserUpdateResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserDetailSerializer()


class FullNameResponseSerializer(serializers.Serializer):
    nombreCompleto = serializers.CharField()


class CountResponseSerializer(serializers.Serializer):
    total = serializers.IntegerField()


# =============================================================================
# Authentication
# =============================================================================

@extend_schema(
    request=RegisterSerializer,
    responses={
        201: RegisterResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new staff user.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Usuario registrado exitosamente',
        'user': UserSerializer(user).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=LoginSerializer,
    responses={
        200: LoginResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive an access token.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )
    except InactiveAccountError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_403_FORBIDDEN
        )

    return Response({
        'message': 'Login exitoso',
        'token': issue_access_token(user),
        'user': AuthUserSerializer(user).data,
    })


# =============================================================================
# User administration
# =============================================================================

@extend_schema(
    responses={200: UserSerializer(many=True)},
    description="List all users.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_list(request):
    """List all users."""
    return Response(UserSerializer(list_users(), many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: UserDetailSerializer, 404: ErrorResponseSerializer},
    description="Get a user with roles (and permissions) and areas.",
    tags=['users'],
)
@extend_schema(
    methods=['PUT'],
    request=UserUpdateSerializer,
    responses={
        200: UserUpdateResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Replace a user's profile, roles and areas. Accepts multipart for the photo.",
    tags=['users'],
)
@extend_schema(
    methods=['DELETE'],
    responses={200: MessageResponseSerializer, 404: ErrorResponseSerializer},
    description="Delete a user and its role, team and area links.",
    tags=['users'],
)
@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def user_detail(request, pk):
    """Retrieve, update or delete a user."""
    if request.method == 'GET':
        try:
            user = get_user(user_id=pk)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(UserDetailSerializer(user).data)

    if request.method == 'DELETE':
        try:
            delete_user(user_id=pk)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'Usuario eliminado correctamente'})

    serializer = UserUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        user = update_user(
            user_id=pk,
            nombre=data['nombre'],
            apellido=data['apellido'],
            usuario=data['usuario'],
            email=data['email'],
            ci=data['ci'],
            profesion=data.get('profesion'),
            password=data.get('password') or None,
            foto=data.get('foto'),
            roles=data.get('roles', []),
            areas=data.get('areas', []),
        )
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except UserUpdateError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except PhotoUploadError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'message': 'Usuario actualizado correctamente',
        'user': UserDetailSerializer(user).data,
    })


@extend_schema(
    responses={200: UserWithRolesSerializer(many=True)},
    description="List users holding a role.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def users_by_role(request, role_id):
    """Users holding the given role."""
    users = get_users_by_role(role_id=role_id)
    return Response(UserWithRolesSerializer(users, many=True).data)


@extend_schema(
    responses={200: FullNameResponseSerializer, 404: ErrorResponseSerializer},
    description="Get a user's full name.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_full_name(request, pk):
    try:
        nombre_completo = get_user_full_name(user_id=pk)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'nombreCompleto': nombre_completo})


@extend_schema(
    responses={200: UserWithRolesSerializer(many=True), 404: ErrorResponseSerializer},
    description="List users holding the Tecnico role.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def technicians(request):
    try:
        users = get_technicians()
    except RoleNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(UserWithRolesSerializer(users, many=True).data)


@extend_schema(
    responses={200: CountResponseSerializer},
    description="Count all users.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_count(request):
    return Response({'total': count_users()})


@extend_schema(
    responses={
        200: UserDetailSerializer,
        404: ErrorResponseSerializer,
        500: ErrorResponseSerializer,
    },
    description="Get a user together with its teams from the equipment service.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_teams(request, pk):
    """User profile merged with its teams under ``equipos``."""
    try:
        user, equipos = get_user_with_teams(user_id=pk)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except TeamServiceError:
        return Response(
            {'error': 'Error al obtener los equipos del usuario'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    data = UserDetailSerializer(user).data
    data['equipos'] = equipos
    return Response(data)
