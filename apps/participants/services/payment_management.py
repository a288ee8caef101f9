"""
Installment payment service.

Every mutation locks the participant row, so concurrent payments against
the same participant serialize and the paid aggregate never exceeds the
total.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple

from django.db import transaction
from django.db.models import QuerySet, Sum

from ..models import MONTO_TOTAL, Participant, Payment
from .exceptions import (
    InvalidAmountError,
    ParticipantNotFoundError,
    PaymentExceedsTotalError,
    PaymentNotFoundError,
)

logger = logging.getLogger(__name__)


def _lock_participant(participant_id: int) -> Participant:
    try:
        return Participant.objects.select_for_update().get(id=participant_id)
    except Participant.DoesNotExist:
        raise ParticipantNotFoundError("Participante no encontrado")


def _get_payment(participant: Participant, payment_id: int) -> Payment:
    try:
        return Payment.objects.get(id=payment_id, participante=participant)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError("Pago no encontrado")


def recalculate_monto_pagado(participant: Participant) -> Participant:
    """
    Set the paid aggregate to the sum of the participant's payments.

    Re-derives the status and saves. Callers hold the participant lock.
    """
    total = (
        Payment.objects
        .filter(participante=participant)
        .aggregate(total=Sum('monto'))['total']
    ) or Decimal('0.00')

    participant.apply_monto_pagado(total)
    participant.save(update_fields=['monto_pagado', 'estado', 'updated_at'])
    return participant


@transaction.atomic
def register_payment(
    *,
    participant_id: int,
    monto: Decimal,
    metodo_pago: str = 'efectivo',
    observacion: Optional[str] = None
) -> Tuple[Payment, Participant]:
    """
    Record an installment for a participant.

    Args:
        participant_id: Participant paying
        monto: Installment amount (> 0)
        metodo_pago: Payment method label
        observacion: Optional note

    Returns:
        Tuple of (created Payment, updated Participant)

    Raises:
        ParticipantNotFoundError: If participant does not exist
        InvalidAmountError: If monto is not positive
        PaymentExceedsTotalError: If the payment would exceed the total
    """
    participant = _lock_participant(participant_id)

    monto = Decimal(monto)
    if monto <= 0:
        raise InvalidAmountError("El monto debe ser mayor a 0")

    nuevo_monto_pagado = participant.monto_pagado + monto
    if nuevo_monto_pagado > MONTO_TOTAL:
        logger.warning(
            "Payment rejected for participant id=%s: %s + %s exceeds %s",
            participant_id, participant.monto_pagado, monto, MONTO_TOTAL
        )
        raise PaymentExceedsTotalError(MONTO_TOTAL - participant.monto_pagado)

    payment = Payment.objects.create(
        participante=participant,
        monto=monto,
        metodo_pago=metodo_pago,
        observacion=observacion,
    )

    participant.apply_monto_pagado(nuevo_monto_pagado)
    participant.save(update_fields=['monto_pagado', 'estado', 'updated_at'])

    logger.info(
        "Registered payment id=%s participant id=%s monto=%s monto_pagado=%s",
        payment.id, participant_id, monto, participant.monto_pagado
    )
    return payment, participant


def list_payments(*, participant_id: int) -> QuerySet:
    """
    Payments of a participant, newest first.

    Raises:
        ParticipantNotFoundError: If participant does not exist
    """
    if not Participant.objects.filter(id=participant_id).exists():
        raise ParticipantNotFoundError("Participante no encontrado")

    return Payment.objects.filter(participante_id=participant_id).order_by('-fecha', '-id')


@transaction.atomic
def update_payment(
    *,
    participant_id: int,
    payment_id: int,
    **changes
) -> Tuple[Payment, Participant]:
    """
    Partially update a payment and recompute the participant's aggregate.

    Accepted changes: monto, metodo_pago, observacion.

    Raises:
        ParticipantNotFoundError: If participant does not exist
        PaymentNotFoundError: If the payment is not the participant's
        InvalidAmountError: If the new monto is not positive
        PaymentExceedsTotalError: If the new sum of payments exceeds the total
    """
    participant = _lock_participant(participant_id)
    payment = _get_payment(participant, payment_id)

    update_fields = []
    if 'monto' in changes:
        monto = Decimal(changes['monto'])
        if monto <= 0:
            raise InvalidAmountError("El monto debe ser mayor a 0")

        otros = (
            Payment.objects
            .filter(participante=participant)
            .exclude(id=payment.id)
            .aggregate(total=Sum('monto'))['total']
        ) or Decimal('0.00')
        if otros + monto > MONTO_TOTAL:
            logger.warning(
                "Payment update rejected for payment id=%s: %s + %s exceeds %s",
                payment_id, otros, monto, MONTO_TOTAL
            )
            raise PaymentExceedsTotalError(MONTO_TOTAL - otros)

        payment.monto = monto
        update_fields.append('monto')

    for name in ('metodo_pago', 'observacion'):
        if name in changes:
            setattr(payment, name, changes[name])
            update_fields.append(name)

    if update_fields:
        payment.save(update_fields=update_fields)

    recalculate_monto_pagado(participant)

    logger.info("Updated payment id=%s fields=%s", payment_id, update_fields)
    return payment, participant


@transaction.atomic
def delete_payment(*, participant_id: int, payment_id: int) -> Participant:
    """
    Delete a payment and recompute the participant's aggregate.

    Returns:
        Updated Participant

    Raises:
        ParticipantNotFoundError: If participant does not exist
        PaymentNotFoundError: If the payment is not the participant's
    """
    participant = _lock_participant(participant_id)
    payment = _get_payment(participant, payment_id)

    payment.delete()
    recalculate_monto_pagado(participant)

    logger.info(
        "Deleted payment id=%s participant id=%s monto_pagado=%s",
        payment_id, participant_id, participant.monto_pagado
    )
    return participant
