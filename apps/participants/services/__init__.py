"""Services for participants business logic."""

from .exceptions import (
    ParticipantsServiceError,
    ParticipantNotFoundError,
    DuplicateCiError,
    InvalidAmountError,
    PaymentNotFoundError,
    PaymentExceedsTotalError,
)
from .participant_management import (
    register_participant,
    list_participants,
    get_participant,
    update_participant,
    delete_participant,
)
from .payment_management import (
    register_payment,
    list_payments,
    update_payment,
    delete_payment,
    recalculate_monto_pagado,
)
from .payment_summary import get_payment_summary

__all__ = [
    # Exceptions
    'ParticipantsServiceError',
    'ParticipantNotFoundError',
    'DuplicateCiError',
    'InvalidAmountError',
    'PaymentNotFoundError',
    'PaymentExceedsTotalError',
    # Participants
    'register_participant',
    'list_participants',
    'get_participant',
    'update_participant',
    'delete_participant',
    # Payments
    'register_payment',
    'list_payments',
    'update_payment',
    'delete_payment',
    'recalculate_monto_pagado',
    # Statistics
    'get_payment_summary',
]
