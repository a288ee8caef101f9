from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Staff user, authenticated by email."""

    DEFAULT_ROL = 'tesorero'

    email = models.EmailField(unique=True, max_length=255, db_index=True)
    nombre = models.CharField(max_length=100)
    apellido = models.CharField(max_length=100, blank=True)
    usuario = models.CharField(max_length=100)
    ci = models.CharField(max_length=20, blank=True)
    profesion = models.CharField(max_length=100, blank=True, null=True)
    foto = models.CharField(max_length=500, blank=True, null=True)

    # Role label carried in the access token
    rol = models.CharField(max_length=50, default=DEFAULT_ROL)

    roles = models.ManyToManyField(
        'Role',
        through='UserRole',
        related_name='users',
        blank=True
    )
    areas = models.ManyToManyField(
        'Area',
        through='UserArea',
        related_name='users',
        blank=True
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['nombre', 'usuario']

    class Meta:
        db_table = 'users'
        ordering = ['id']
        indexes = [
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return f"{self.nombre} {self.apellido}".strip()

    def get_photo_url(self):
        """Return the photo as an absolute URL, or None."""
        if not self.foto:
            return None
        if self.foto.startswith(('http://', 'https://')):
            return self.foto
        return f"{settings.BASE_URL.rstrip('/')}/{self.foto.lstrip('/')}"


class Permission(models.Model):
    """Named capability granted through roles."""

    nombre = models.CharField(max_length=100, unique=True)

    class Meta:
        db_table = 'permissions'
        ordering = ['id']

    def __str__(self):
        return self.nombre


class Role(models.Model):
    """Administrative role; users hold roles through UserRole."""

    TECNICO = 'Tecnico'

    nombre = models.CharField(max_length=100, unique=True)
    permisos = models.ManyToManyField(
        Permission,
        through='RolePermission',
        related_name='roles',
        blank=True
    )

    class Meta:
        db_table = 'roles'
        ordering = ['id']

    def __str__(self):
        return self.nombre


class Area(models.Model):
    """Organisational area a user is assigned to."""

    nombre = models.CharField(max_length=100, unique=True)

    class Meta:
        db_table = 'areas'
        ordering = ['id']

    def __str__(self):
        return self.nombre


class RolePermission(models.Model):
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='role_permissions')
    permission = models.ForeignKey(Permission, on_delete=models.CASCADE, related_name='role_permissions')

    class Meta:
        db_table = 'role_permissions'
        unique_together = [['role', 'permission']]


class UserRole(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='user_roles')
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='user_roles')

    class Meta:
        db_table = 'user_roles'
        unique_together = [['user', 'role']]


class UserArea(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='user_areas')
    area = models.ForeignKey(Area, on_delete=models.CASCADE, related_name='user_areas')

    class Meta:
        db_table = 'user_areas'
        unique_together = [['user', 'area']]


class UserTeam(models.Model):
    """Membership in a team owned by the external equipment service."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='user_teams')
    equipo_id = models.PositiveIntegerField()

    class Meta:
        db_table = 'user_teams'
        unique_together = [['user', 'equipo_id']]
