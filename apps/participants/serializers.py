from rest_framework import serializers
from .models import Participant, Payment, EstadoPago
from .services.participant_management import SORT_FIELDS


# =============================================================================
# Input Serializers
# =============================================================================

class ParticipantFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for participant listing.

    Query Parameters:
        search (str): Case-insensitive match on nombres, apellidos, ci, carrera
        estado (str): Filter by payment status
        carrera (str): Case-insensitive contains on carrera
        page (int): 1-based page number
        limit (int): Page size
        sortBy (str): Field to sort on
        sortOrder (str): asc or desc
    """

    search = serializers.CharField(required=False, allow_blank=True)
    estado = serializers.ChoiceField(
        choices=EstadoPago.choices,
        required=False,
        allow_blank=True
    )
    carrera = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
    sortBy = serializers.ChoiceField(choices=list(SORT_FIELDS), default='createdAt')
    sortOrder = serializers.ChoiceField(choices=['asc', 'desc'], default='desc')


class ParticipantCreateSerializer(serializers.Serializer):
    """Validate participant registration input."""

    nombres = serializers.CharField(max_length=100)
    apellidos = serializers.CharField(max_length=100)
    carrera = serializers.CharField(max_length=150)
    ci = serializers.CharField(max_length=20)
    celular = serializers.CharField(max_length=20)
    monto_inicial = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        required=False,
        default=0
    )
    tipo_pago = serializers.CharField(max_length=20, required=False, default='cuotas')
    metodo_pago = serializers.CharField(max_length=50, required=False, default='efectivo')
    observacion = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ParticipantUpdateSerializer(serializers.Serializer):
    """
    Validate participant data changes.

    The paid amount and status are not accepted here; they only move
    through payments.
    """

    nombres = serializers.CharField(max_length=100, required=False)
    apellidos = serializers.CharField(max_length=100, required=False)
    carrera = serializers.CharField(max_length=150, required=False)
    ci = serializers.CharField(max_length=20, required=False)
    celular = serializers.CharField(max_length=20, required=False)
    tipo_pago = serializers.CharField(max_length=20, required=False)


class PaymentCreateSerializer(serializers.Serializer):
    """Validate input for registering an installment."""

    monto = serializers.DecimalField(max_digits=10, decimal_places=2)
    metodo_pago = serializers.CharField(max_length=50, required=False, default='efectivo')
    observacion = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_monto(self, value):
        if value <= 0:
            raise serializers.ValidationError('El monto debe ser mayor a 0')
        return value


class PaymentUpdateSerializer(serializers.Serializer):
    """Validate a partial payment update."""

    monto = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    metodo_pago = serializers.CharField(max_length=50, required=False)
    observacion = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_monto(self, value):
        if value <= 0:
            raise serializers.ValidationError('El monto debe ser mayor a 0')
        return value


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = [
            'id',
            'participante',
            'monto',
            'metodo_pago',
            'observacion',
            'fecha',
        ]
        read_only_fields = fields


class OwnerSerializer(serializers.Serializer):
    """Staff user who registered the participant."""

    nombre = serializers.CharField(read_only=True)
    usuario = serializers.CharField(read_only=True)


class ParticipantSerializer(serializers.ModelSerializer):
    """Participant with balance figures, owner and payments."""

    monto_restante = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    porcentaje_pagado = serializers.DecimalField(max_digits=4, decimal_places=1, read_only=True)
    usuario = OwnerSerializer(read_only=True, allow_null=True)
    pagos = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Participant
        fields = [
            'id',
            'nombres',
            'apellidos',
            'carrera',
            'ci',
            'celular',
            'tipo_pago',
            'monto_total',
            'monto_pagado',
            'monto_restante',
            'porcentaje_pagado',
            'estado',
            'usuario',
            'pagos',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PaginationSerializer(serializers.Serializer):
    currentPage = serializers.IntegerField()
    totalPages = serializers.IntegerField()
    totalItems = serializers.IntegerField()
    itemsPerPage = serializers.IntegerField()
    hasNext = serializers.BooleanField()
    hasPrev = serializers.BooleanField()


class ParticipantListResponseSerializer(serializers.Serializer):
    participantes = ParticipantSerializer(many=True)
    pagination = PaginationSerializer()


class EstadoCountSerializer(serializers.Serializer):
    estado = serializers.CharField()
    total = serializers.IntegerField()


class PaymentSummarySerializer(serializers.Serializer):
    total_participantes = serializers.IntegerField()
    total_recaudado = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_esperado = serializers.DecimalField(max_digits=12, decimal_places=2)
    porcentaje_recaudado = serializers.DecimalField(max_digits=4, decimal_places=1)
    monto_promedio_por_participante = serializers.DecimalField(max_digits=10, decimal_places=2)
    conteo_por_estado = EstadoCountSerializer(many=True)
