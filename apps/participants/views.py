from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .serializers import (
    ParticipantFilterSerializer,
    ParticipantCreateSerializer,
    ParticipantUpdateSerializer,
    PaymentCreateSerializer,
    PaymentUpdateSerializer,
    ParticipantSerializer,
    ParticipantListResponseSerializer,
    PaymentSerializer,
    PaymentSummarySerializer,
)
from .services import (
    register_participant,
    list_participants,
    get_participant,
    update_participant,
    delete_participant,
    register_payment,
    list_payments,
    update_payment,
    delete_payment,
    get_payment_summary,
    ParticipantNotFoundError,
    DuplicateCiError,
    InvalidAmountError,
    PaymentNotFoundError,
    PaymentExceedsTotalError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class MessageResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()


class ParticipantMessageResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    participante = ParticipantSerializer()


class PaymentCreatedResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    pago = PaymentSerializer()
    monto_restante = drf_serializers.DecimalField(max_digits=10, decimal_places=2)


class PaymentUpdatedResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    pago = PaymentSerializer()


def _not_found(error):
    return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)


def _bad_request(error):
    return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)


# =============================================================================
# Participants
# =============================================================================

@extend_schema(
    request=ParticipantCreateSerializer,
    responses={
        201: ParticipantMessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a participant, optionally with an initial payment.",
    tags=['participantes'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def participant_register(request):
    """Register a participant."""
    serializer = ParticipantCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        participant, initial_payment = register_participant(
            usuario_id=request.user.id,
            **serializer.validated_data
        )
    except (DuplicateCiError, InvalidAmountError) as e:
        return _bad_request(e)

    if initial_payment:
        message = 'Participante registrado con pago inicial'
    else:
        message = 'Participante registrado sin pago inicial'

    participant = get_participant(participant_id=participant.id)
    return Response({
        'message': message,
        'participante': ParticipantSerializer(participant).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[
        OpenApiParameter('search', str, description='Match on nombres, apellidos, ci or carrera'),
        OpenApiParameter('estado', str, enum=['pendiente', 'completado']),
        OpenApiParameter('carrera', str),
        OpenApiParameter('page', int),
        OpenApiParameter('limit', int),
        OpenApiParameter('sortBy', str),
        OpenApiParameter('sortOrder', str, enum=['asc', 'desc']),
    ],
    responses={200: ParticipantListResponseSerializer, 400: ErrorResponseSerializer},
    description="List participants with filters, sorting and pagination.",
    tags=['participantes'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def participant_list(request):
    """List participants."""
    filter_serializer = ParticipantFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data

    participants, pagination = list_participants(
        search=params.get('search'),
        estado=params.get('estado'),
        carrera=params.get('carrera'),
        page=params['page'],
        limit=params['limit'],
        sort_by=params['sortBy'],
        sort_order=params['sortOrder'],
    )

    return Response({
        'participantes': ParticipantSerializer(participants, many=True).data,
        'pagination': pagination,
    })


@extend_schema(
    responses={200: PaymentSummarySerializer},
    description="Collection statistics across all participants.",
    tags=['participantes'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_summary(request):
    return Response(PaymentSummarySerializer(get_payment_summary()).data)


@extend_schema(
    methods=['GET'],
    responses={200: ParticipantSerializer, 404: ErrorResponseSerializer},
    description="Get a participant with balance and payments.",
    tags=['participantes'],
)
@extend_schema(
    methods=['PUT'],
    request=ParticipantUpdateSerializer,
    responses={
        200: ParticipantMessageResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Update participant data. Amounts and status are not editable.",
    tags=['participantes'],
)
@extend_schema(
    methods=['DELETE'],
    responses={200: MessageResponseSerializer, 404: ErrorResponseSerializer},
    description="Delete a participant and its payments.",
    tags=['participantes'],
)
@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def participant_detail(request, pk):
    """Retrieve, update or delete a participant."""
    if request.method == 'GET':
        try:
            participant = get_participant(participant_id=pk)
        except ParticipantNotFoundError as e:
            return _not_found(e)
        return Response(ParticipantSerializer(participant).data)

    if request.method == 'DELETE':
        try:
            delete_participant(participant_id=pk)
        except ParticipantNotFoundError as e:
            return _not_found(e)
        return Response({'message': 'Participante eliminado con éxito'})

    serializer = ParticipantUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        participant = update_participant(participant_id=pk, **serializer.validated_data)
    except ParticipantNotFoundError as e:
        return _not_found(e)
    except DuplicateCiError as e:
        return _bad_request(e)

    return Response({
        'message': 'Participante actualizado con éxito',
        'participante': ParticipantSerializer(participant).data,
    })


# =============================================================================
# Payments
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: PaymentSerializer(many=True), 404: ErrorResponseSerializer},
    description="List a participant's payments, newest first.",
    tags=['pagos'],
)
@extend_schema(
    methods=['POST'],
    request=PaymentCreateSerializer,
    responses={
        201: PaymentCreatedResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Register an installment. Rejected if it exceeds the remaining balance.",
    tags=['pagos'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def participant_payments(request, pk):
    """List or register payments of a participant."""
    if request.method == 'GET':
        try:
            payments = list_payments(participant_id=pk)
        except ParticipantNotFoundError as e:
            return _not_found(e)
        return Response(PaymentSerializer(payments, many=True).data)

    serializer = PaymentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        payment, participant = register_payment(participant_id=pk, **serializer.validated_data)
    except ParticipantNotFoundError as e:
        return _not_found(e)
    except (InvalidAmountError, PaymentExceedsTotalError) as e:
        return _bad_request(e)

    return Response({
        'message': 'Pago registrado con éxito',
        'pago': PaymentSerializer(payment).data,
        'monto_restante': participant.monto_restante,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['PUT'],
    request=PaymentUpdateSerializer,
    responses={
        200: PaymentUpdatedResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Partially update a payment; the participant's balance is recomputed.",
    tags=['pagos'],
)
@extend_schema(
    methods=['DELETE'],
    responses={200: MessageResponseSerializer, 404: ErrorResponseSerializer},
    description="Delete a payment; the participant's balance is recomputed.",
    tags=['pagos'],
)
@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def payment_detail(request, pk, pago_id):
    """Update or delete a single payment."""
    if request.method == 'DELETE':
        try:
            delete_payment(participant_id=pk, payment_id=pago_id)
        except (ParticipantNotFoundError, PaymentNotFoundError) as e:
            return _not_found(e)
        return Response({'message': 'Pago eliminado con éxito'})

    serializer = PaymentUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        payment, _ = update_payment(
            participant_id=pk,
            payment_id=pago_id,
            **serializer.validated_data
        )
    except (ParticipantNotFoundError, PaymentNotFoundError) as e:
        return _not_found(e)
    except (InvalidAmountError, PaymentExceedsTotalError) as e:
        return _bad_request(e)

    return Response({
        'message': 'Pago actualizado con éxito',
        'pago': PaymentSerializer(payment).data,
    })
