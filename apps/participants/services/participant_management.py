"""Participant registration, listing and maintenance service."""

import logging
import math
from decimal import Decimal
from typing import Optional, Tuple

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Prefetch, Q, QuerySet

from ..models import MONTO_TOTAL, Participant, Payment, derive_estado
from .exceptions import DuplicateCiError, InvalidAmountError, ParticipantNotFoundError

User = get_user_model()

logger = logging.getLogger(__name__)

INITIAL_PAYMENT_NOTE = 'Pago inicial al registro'

# Query aliases accepted by ``sortBy`` in addition to the model field names
SORT_FIELDS = {
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
    'id': 'id',
    'nombres': 'nombres',
    'apellidos': 'apellidos',
    'carrera': 'carrera',
    'ci': 'ci',
    'celular': 'celular',
    'tipo_pago': 'tipo_pago',
    'monto_total': 'monto_total',
    'monto_pagado': 'monto_pagado',
    'estado': 'estado',
    'created_at': 'created_at',
    'updated_at': 'updated_at',
}


def participant_queryset() -> QuerySet:
    """Participants with owner and newest-first payments loaded."""
    return (
        Participant.objects
        .select_related('usuario')
        .prefetch_related(
            Prefetch('pagos', queryset=Payment.objects.order_by('-fecha', '-id'))
        )
    )


@transaction.atomic
def register_participant(
    *,
    nombres: str,
    apellidos: str,
    carrera: str,
    ci: str,
    celular: str,
    monto_inicial: Decimal = Decimal('0'),
    tipo_pago: str = 'cuotas',
    metodo_pago: str = 'efectivo',
    observacion: Optional[str] = None,
    usuario_id: Optional[int] = None
) -> Tuple[Participant, Optional[Payment]]:
    """
    Register a participant, optionally with an initial payment.

    Args:
        nombres, apellidos, carrera, ci, celular: Participant data
        monto_inicial: Amount paid at registration, between 0 and 320
        tipo_pago: Payment plan label
        metodo_pago: Method of the initial payment
        observacion: Note on the initial payment, defaults to INITIAL_PAYMENT_NOTE
        usuario_id: Authenticated staff user; ignored if the user is gone

    Returns:
        Tuple of (Participant, initial Payment or None)

    Raises:
        DuplicateCiError: If the CI is already registered
        InvalidAmountError: If monto_inicial is out of range
    """
    if Participant.objects.filter(ci=ci).exists():
        logger.warning("Participant registration rejected, duplicate ci=%s", ci)
        raise DuplicateCiError("La cédula ya está registrada")

    monto_inicial = Decimal(monto_inicial or 0)
    if monto_inicial < 0 or monto_inicial > MONTO_TOTAL:
        raise InvalidAmountError(f"El monto inicial debe estar entre 0 y {MONTO_TOTAL}")

    usuario = User.objects.filter(id=usuario_id).first() if usuario_id else None

    try:
        with transaction.atomic():
            participant = Participant.objects.create(
                nombres=nombres,
                apellidos=apellidos,
                carrera=carrera,
                ci=ci,
                celular=celular,
                tipo_pago=tipo_pago,
                monto_pagado=monto_inicial,
                estado=derive_estado(monto_inicial),
                usuario=usuario,
            )
    except IntegrityError:
        # Concurrent registration with the same ci
        raise DuplicateCiError("La cédula ya está registrada")

    payment = None
    if monto_inicial > 0:
        payment = Payment.objects.create(
            participante=participant,
            monto=monto_inicial,
            metodo_pago=metodo_pago,
            observacion=observacion or INITIAL_PAYMENT_NOTE,
        )

    logger.info(
        "Registered participant id=%s ci=%s monto_inicial=%s",
        participant.id, participant.ci, monto_inicial
    )
    return participant, payment


def list_participants(
    *,
    search: Optional[str] = None,
    estado: Optional[str] = None,
    carrera: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = 'createdAt',
    sort_order: str = 'desc'
):
    """
    Filter, sort and paginate participants.

    Returns:
        Tuple of (list of participants, pagination dict). A page past the
        last one yields an empty list.
    """
    queryset = participant_queryset()

    if search:
        queryset = queryset.filter(
            Q(nombres__icontains=search) |
            Q(apellidos__icontains=search) |
            Q(ci__icontains=search) |
            Q(carrera__icontains=search)
        )
    if estado:
        queryset = queryset.filter(estado=estado)
    if carrera:
        queryset = queryset.filter(carrera__icontains=carrera)

    field = SORT_FIELDS.get(sort_by, 'created_at')
    prefix = '' if sort_order == 'asc' else '-'
    queryset = queryset.order_by(f'{prefix}{field}', f'{prefix}id')

    total_items = queryset.count()
    total_pages = math.ceil(total_items / limit) if limit else 0
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])

    pagination = {
        'currentPage': page,
        'totalPages': total_pages,
        'totalItems': total_items,
        'itemsPerPage': limit,
        'hasNext': page < total_pages,
        'hasPrev': page > 1,
    }
    return items, pagination


def get_participant(*, participant_id: int) -> Participant:
    """
    Raises:
        ParticipantNotFoundError: If participant does not exist
    """
    try:
        return participant_queryset().get(id=participant_id)
    except Participant.DoesNotExist:
        raise ParticipantNotFoundError("Participante no encontrado")


@transaction.atomic
def update_participant(*, participant_id: int, **fields) -> Participant:
    """
    Update personal data of a participant.

    Only nombres, apellidos, carrera, ci, celular and tipo_pago are
    applied; the paid amount, status and payments are never touched.

    Raises:
        ParticipantNotFoundError: If participant does not exist
        DuplicateCiError: If the new CI belongs to another participant
    """
    try:
        participant = Participant.objects.select_for_update().get(id=participant_id)
    except Participant.DoesNotExist:
        raise ParticipantNotFoundError("Participante no encontrado")

    new_ci = fields.get('ci')
    if new_ci and new_ci != participant.ci:
        if Participant.objects.filter(ci=new_ci).exclude(id=participant_id).exists():
            logger.warning("Update of participant id=%s rejected, duplicate ci=%s", participant_id, new_ci)
            raise DuplicateCiError("La cédula ya está registrada en otro participante")

    allowed = ('nombres', 'apellidos', 'carrera', 'ci', 'celular', 'tipo_pago')
    update_fields = []
    for name in allowed:
        if name in fields:
            setattr(participant, name, fields[name])
            update_fields.append(name)

    if update_fields:
        try:
            with transaction.atomic():
                participant.save(update_fields=update_fields + ['updated_at'])
        except IntegrityError:
            raise DuplicateCiError("La cédula ya está registrada en otro participante")

    logger.info("Updated participant id=%s fields=%s", participant_id, update_fields)
    return get_participant(participant_id=participant_id)


@transaction.atomic
def delete_participant(*, participant_id: int) -> None:
    """
    Delete a participant and all its payments.

    Raises:
        ParticipantNotFoundError: If participant does not exist
    """
    try:
        participant = Participant.objects.select_for_update().get(id=participant_id)
    except Participant.DoesNotExist:
        raise ParticipantNotFoundError("Participante no encontrado")

    deleted_payments, _ = Payment.objects.filter(participante=participant).delete()
    participant.delete()

    logger.info("Deleted participant id=%s with %s payment(s)", participant_id, deleted_payments)
