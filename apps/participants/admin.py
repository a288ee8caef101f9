# ==========================================
# apps/participants/admin.py
# ==========================================

from django.contrib import admin
from django.db import transaction
from django.utils.html import format_html
from .models import Participant, Payment, EstadoPago
from .services import delete_payment, recalculate_monto_pagado


class PaymentInline(admin.TabularInline):
    """Inline admin for payments within a participant."""
    model = Payment
    extra = 0
    fields = ['monto', 'metodo_pago', 'observacion', 'fecha']
    readonly_fields = ['monto', 'metodo_pago', 'observacion', 'fecha']

    def has_add_permission(self, request, obj=None):
        """Payments go through the API so the balance stays consistent."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    """
    Admin interface for participants.

    Provides:
    - Participant listing with balance and status badge
    - Inline payments (read-only)
    - Balance recalculation action
    """

    list_display = [
        'ci',
        'nombres',
        'apellidos',
        'carrera',
        'get_paid_display',
        'estado_badge',
        'usuario',
        'created_at',
    ]

    list_filter = [
        'estado',
        'tipo_pago',
        'carrera',
        'created_at',
    ]

    search_fields = [
        'nombres',
        'apellidos',
        'ci',
        'carrera',
        'celular',
    ]

    readonly_fields = [
        'monto_total',
        'monto_pagado',
        'estado',
        'created_at',
        'updated_at',
    ]

    inlines = [PaymentInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Participant', {
            'fields': ('nombres', 'apellidos', 'ci', 'celular', 'carrera', 'usuario')
        }),
        ('Payment State', {
            'fields': ('tipo_pago', 'monto_total', 'monto_pagado', 'estado'),
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_paid_display(self, obj):
        return f"{obj.monto_pagado} / {obj.monto_total}"
    get_paid_display.short_description = 'Pagado'
    get_paid_display.admin_order_field = 'monto_pagado'

    def estado_badge(self, obj):
        """Display payment status as colored badge."""
        if obj.estado == EstadoPago.COMPLETADO:
            bg, fg = '#6B8E5E', 'white'
        else:
            bg, fg = '#E5C49A', '#2C1810'
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_estado_display()
        )
    estado_badge.short_description = 'Estado'
    estado_badge.admin_order_field = 'estado'

    actions = ['recalculate_balance']

    @admin.action(description='Recalculate paid amount from payments')
    def recalculate_balance(self, request, queryset):
        for participant_id in queryset.values_list('id', flat=True):
            with transaction.atomic():
                participant = Participant.objects.select_for_update().get(id=participant_id)
                recalculate_monto_pagado(participant)
        self.message_user(request, f'Recalculated {queryset.count()} participant(s).')

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('usuario')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['participante', 'monto', 'metodo_pago', 'fecha']
    list_filter = ['metodo_pago', 'fecha']
    search_fields = ['participante__nombres', 'participante__apellidos', 'participante__ci', 'observacion']
    readonly_fields = ['participante', 'monto', 'fecha']
    date_hierarchy = 'fecha'
    ordering = ['-fecha']

    def has_add_permission(self, request):
        return False

    def delete_model(self, request, obj):
        delete_payment(participant_id=obj.participante_id, payment_id=obj.id)

    def delete_queryset(self, request, queryset):
        """Delete one payment at a time so each paid amount is recomputed."""
        for participante_id, payment_id in queryset.values_list('participante_id', 'id'):
            delete_payment(participant_id=participante_id, payment_id=payment_id)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('participante')
