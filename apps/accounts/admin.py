# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, Role, Permission, Area, UserRole, UserArea, UserTeam


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0
    autocomplete_fields = ['role']


class UserAreaInline(admin.TabularInline):
    model = UserArea
    extra = 0
    autocomplete_fields = ['area']


class UserTeamInline(admin.TabularInline):
    """Team memberships mirrored from the equipment service."""
    model = UserTeam
    extra = 0


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for staff users.

    Provides:
    - User listing with role label and status badges
    - Inline role, area and team assignments
    - Activate/deactivate bulk actions
    """

    list_display = [
        'email',
        'nombre',
        'apellido',
        'usuario',
        'rol',
        'is_active_badge',
        'created_at',
    ]

    list_filter = [
        'is_active',
        'is_staff',
        'rol',
        'roles',
        'areas',
        'created_at',
    ]

    search_fields = [
        'email',
        'nombre',
        'apellido',
        'usuario',
        'ci',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    # BaseUserAdmin assumes a username field
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'nombre', 'apellido', 'usuario', 'password')
        }),
        ('Profile', {
            'fields': ('ci', 'profesion', 'foto', 'rol'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'nombre', 'usuario', 'rol', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'updated_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']
    inlines = [UserRoleInline, UserAreaInline, UserTeamInline]

    def is_active_badge(self, obj):
        """Display active status as colored badge."""
        if obj.is_active:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Activo</span>'
            )
        return format_html(
            '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Inactivo</span>'
        )
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    actions = [
        'activate_users',
        'deactivate_users',
    ]

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)


class RolePermissionInline(admin.TabularInline):
    model = Role.permisos.through
    extra = 0


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['nombre', 'get_user_count']
    search_fields = ['nombre']
    inlines = [RolePermissionInline]

    def get_user_count(self, obj):
        return obj.user_roles.count()
    get_user_count.short_description = 'Users'


@admin.register(Permission)
class PermissionAdmin(admin.ModelAdmin):
    list_display = ['nombre']
    search_fields = ['nombre']


@admin.register(Area)
class AreaAdmin(admin.ModelAdmin):
    list_display = ['nombre']
    search_fields = ['nombre']
