from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


MONTO_TOTAL = Decimal('320.00')


class EstadoPago(models.TextChoices):
    PENDIENTE = 'pendiente', 'Pendiente'
    COMPLETADO = 'completado', 'Completado'


def derive_estado(monto_pagado) -> str:
    """Status is a pure function of the paid amount."""
    if Decimal(monto_pagado) >= MONTO_TOTAL:
        return EstadoPago.COMPLETADO
    return EstadoPago.PENDIENTE


class Participant(models.Model):
    """Event participant paying the fixed fee in installments."""

    nombres = models.CharField(max_length=100)
    apellidos = models.CharField(max_length=100)
    carrera = models.CharField(max_length=150)
    ci = models.CharField(max_length=20, unique=True)
    celular = models.CharField(max_length=20)
    tipo_pago = models.CharField(max_length=20, default='cuotas')

    # Financial state
    monto_total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=MONTO_TOTAL,
        editable=False
    )
    monto_pagado = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    estado = models.CharField(
        max_length=20,
        choices=EstadoPago.choices,
        default=EstadoPago.PENDIENTE
    )

    # Staff user who registered the participant
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='participantes'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'participantes'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['estado'], name='participantes_estado_idx'),
            models.Index(fields=['carrera'], name='participantes_carrera_idx'),
        ]

    def __str__(self):
        return f"{self.nombres} {self.apellidos} ({self.ci})"

    @property
    def monto_restante(self):
        return self.monto_total - self.monto_pagado

    @property
    def porcentaje_pagado(self):
        """Paid share of the total, rounded to one decimal."""
        if not self.monto_total:
            return Decimal('0.0')
        return (self.monto_pagado / self.monto_total * 100).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)

    def apply_monto_pagado(self, monto_pagado):
        """Set the paid aggregate and re-derive the status. Does not save."""
        self.monto_pagado = monto_pagado
        self.estado = derive_estado(monto_pagado)


class Payment(models.Model):
    """Single installment paid by a participant."""

    participante = models.ForeignKey(
        Participant,
        on_delete=models.CASCADE,
        related_name='pagos'
    )
    monto = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    metodo_pago = models.CharField(max_length=50, default='efectivo')
    observacion = models.TextField(blank=True, null=True)
    fecha = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pagos'
        ordering = ['-fecha', '-id']
        indexes = [
            models.Index(fields=['participante', 'fecha'], name='pagos_participante_fecha_idx'),
        ]

    def __str__(self):
        return f"{self.monto} - {self.participante}"
