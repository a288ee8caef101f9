from rest_framework import serializers
from .models import User, Role, Area, Permission


# =============================================================================
# Input Serializers
# =============================================================================

class RegisterSerializer(serializers.Serializer):
    """Validate registration input."""

    nombre = serializers.CharField(max_length=100)
    usuario = serializers.CharField(max_length=100)
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )
    rol = serializers.CharField(max_length=50, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    """Validate login input."""

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )


class UserUpdateSerializer(serializers.Serializer):
    """
    Validate a full profile update (JSON or multipart).

    Fields:
        nombre, apellido, usuario, email, ci: Required
        profesion (str): Optional
        password (str): Optional new password
        foto (file): Optional new photo
        roles (list[int]): Role ids, replaces the current set
        areas (list[int]): Area ids, replaces the current set
    """

    nombre = serializers.CharField(max_length=100)
    apellido = serializers.CharField(max_length=100)
    usuario = serializers.CharField(max_length=100)
    email = serializers.EmailField(max_length=255)
    ci = serializers.CharField(max_length=20)
    profesion = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    foto = serializers.FileField(required=False, allow_empty_file=False)
    roles = serializers.PrimaryKeyRelatedField(
        queryset=Role.objects.all(),
        many=True,
        required=False
    )
    areas = serializers.PrimaryKeyRelatedField(
        queryset=Area.objects.all(),
        many=True,
        required=False
    )


# =============================================================================
# Output Serializers
# =============================================================================

class PermissionSerializer(serializers.ModelSerializer):

    class Meta:
        model = Permission
        fields = ['id', 'nombre']
        read_only_fields = fields


class RoleMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = Role
        fields = ['id', 'nombre']
        read_only_fields = fields


class RoleSerializer(serializers.ModelSerializer):
    """Role with its permissions."""

    permisos = PermissionSerializer(many=True, read_only=True)

    class Meta:
        model = Role
        fields = ['id', 'nombre', 'permisos']
        read_only_fields = fields


class AreaSerializer(serializers.ModelSerializer):

    class Meta:
        model = Area
        fields = ['id', 'nombre']
        read_only_fields = fields


class AuthUserSerializer(serializers.ModelSerializer):
    """User fields returned by login."""

    class Meta:
        model = User
        fields = ['id', 'nombre', 'email', 'rol']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for listings and registration."""

    foto = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'nombre',
            'apellido',
            'usuario',
            'email',
            'ci',
            'profesion',
            'foto',
            'rol',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_foto(self, obj):
        return obj.get_photo_url()


class UserWithRolesSerializer(UserSerializer):
    """User with role names and areas."""

    roles = RoleMinimalSerializer(many=True, read_only=True)
    areas = AreaSerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['roles', 'areas']
        read_only_fields = fields


class UserDetailSerializer(UserSerializer):
    """User with roles (including permissions) and areas."""

    roles = RoleSerializer(many=True, read_only=True)
    areas = AreaSerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['roles', 'areas']
        read_only_fields = fields
