import pytest
from decimal import Decimal
from unittest.mock import patch
from django.db import DatabaseError
from django.db.models import Sum
from apps.participants.models import (
    MONTO_TOTAL,
    EstadoPago,
    Participant,
    Payment,
    derive_estado,
)
from apps.participants.services import (
    register_participant,
    list_participants,
    delete_participant,
    register_payment,
    update_payment,
    delete_payment,
    get_payment_summary,
    DuplicateCiError,
    InvalidAmountError,
    ParticipantNotFoundError,
    PaymentExceedsTotalError,
    PaymentNotFoundError,
)


def assert_balance_consistent(participant):
    """Aggregate within bounds, equal to the payment sum, status derived from it."""
    participant.refresh_from_db()
    total = Payment.objects.filter(participante=participant).aggregate(t=Sum('monto'))['t'] or Decimal('0')
    assert Decimal('0') <= participant.monto_pagado <= MONTO_TOTAL
    assert participant.monto_pagado == total
    assert (participant.estado == EstadoPago.COMPLETADO) == (participant.monto_pagado >= MONTO_TOTAL)


class TestDeriveEstado:

    @pytest.mark.parametrize('monto, estado', [
        (Decimal('0'), EstadoPago.PENDIENTE),
        (Decimal('319.99'), EstadoPago.PENDIENTE),
        (Decimal('320'), EstadoPago.COMPLETADO),
    ])
    def test_threshold(self, monto, estado):
        assert derive_estado(monto) == estado


@pytest.mark.django_db
class TestRegisterParticipant:

    def test_duplicate_ci_writes_nothing(self, participant, participant_data):
        with pytest.raises(DuplicateCiError):
            register_participant(monto_inicial=Decimal('50'), **participant_data)

        assert Participant.objects.count() == 1
        assert Payment.objects.count() == 1

    def test_initial_amount_above_total(self, participant_data):
        with pytest.raises(InvalidAmountError):
            register_participant(monto_inicial=Decimal('320.01'), **participant_data)

        assert not Participant.objects.exists()

    def test_unknown_owner_is_ignored(self, participant_data, db):
        participant, payment = register_participant(usuario_id=99999, **participant_data)

        assert participant.usuario is None
        assert payment is None

    def test_initial_payment_note(self, participant_data):
        _, payment = register_participant(
            monto_inicial=Decimal('30'),
            observacion='Recibo 0042',
            **participant_data
        )

        assert payment.observacion == 'Recibo 0042'

    def test_failed_initial_payment_rolls_back_participant(self, participant_data):
        with patch.object(Payment.objects, 'create', side_effect=DatabaseError('write failed')):
            with pytest.raises(DatabaseError):
                register_participant(monto_inicial=Decimal('50'), **participant_data)

        assert not Participant.objects.exists()
        assert not Payment.objects.exists()


@pytest.mark.django_db
class TestPaymentInvariants:

    def test_overpayment_leaves_aggregate_unchanged(self, participant):
        with pytest.raises(PaymentExceedsTotalError) as excinfo:
            register_payment(participant_id=participant.id, monto=Decimal('220.01'))

        assert excinfo.value.max_allowed == Decimal('220')
        participant.refresh_from_db()
        assert participant.monto_pagado == Decimal('100')

    def test_exact_remainder_completes(self, participant):
        _, updated = register_payment(participant_id=participant.id, monto=Decimal('220'))

        assert updated.estado == EstadoPago.COMPLETADO
        assert updated.monto_restante == Decimal('0')
        assert_balance_consistent(participant)

    def test_mixed_operations_keep_balance_consistent(self, unpaid_participant):
        pid = unpaid_participant.id
        a, _ = register_payment(participant_id=pid, monto=Decimal('120.50'))
        b, _ = register_payment(participant_id=pid, monto=Decimal('99.50'))
        assert_balance_consistent(unpaid_participant)

        with pytest.raises(PaymentExceedsTotalError):
            register_payment(participant_id=pid, monto=Decimal('100.01'))
        assert_balance_consistent(unpaid_participant)

        register_payment(participant_id=pid, monto=Decimal('100'))
        assert_balance_consistent(unpaid_participant)
        assert unpaid_participant.estado == EstadoPago.COMPLETADO

        delete_payment(participant_id=pid, payment_id=a.id)
        assert_balance_consistent(unpaid_participant)
        assert unpaid_participant.monto_pagado == Decimal('199.50')

        update_payment(participant_id=pid, payment_id=b.id, monto=Decimal('220'))
        assert_balance_consistent(unpaid_participant)
        assert unpaid_participant.monto_pagado == Decimal('320')

    def test_delete_payment_of_other_participant(self, participant, unpaid_participant):
        pago = participant.pagos.get()

        with pytest.raises(PaymentNotFoundError):
            delete_payment(participant_id=unpaid_participant.id, payment_id=pago.id)

        assert Payment.objects.filter(id=pago.id).exists()

    def test_update_without_monto_keeps_aggregate(self, participant):
        pago = participant.pagos.get()

        payment, updated = update_payment(
            participant_id=participant.id,
            payment_id=pago.id,
            metodo_pago='transferencia',
        )

        assert payment.metodo_pago == 'transferencia'
        assert updated.monto_pagado == Decimal('100')

    def test_missing_participant(self, db):
        with pytest.raises(ParticipantNotFoundError):
            register_payment(participant_id=99999, monto=Decimal('10'))

    def test_failed_balance_update_rolls_back_payment(self, participant):
        with patch.object(Participant, 'save', side_effect=DatabaseError('write failed')):
            with pytest.raises(DatabaseError):
                register_payment(participant_id=participant.id, monto=Decimal('50'))

        assert participant.pagos.count() == 1
        assert_balance_consistent(participant)
        assert participant.monto_pagado == Decimal('100')


@pytest.mark.django_db
class TestDeleteParticipant:

    def test_no_orphan_payments(self, participant):
        register_payment(participant_id=participant.id, monto=Decimal('20'))

        delete_participant(participant_id=participant.id)

        assert not Payment.objects.filter(participante_id=participant.id).exists()

    def test_missing(self, db):
        with pytest.raises(ParticipantNotFoundError):
            delete_participant(participant_id=99999)

    def test_failed_delete_keeps_payments(self, participant):
        with patch.object(Participant, 'delete', side_effect=DatabaseError('write failed')):
            with pytest.raises(DatabaseError):
                delete_participant(participant_id=participant.id)

        assert Participant.objects.filter(id=participant.id).exists()
        assert participant.pagos.count() == 1
        assert_balance_consistent(participant)


@pytest.mark.django_db
class TestListParticipants:

    def test_single_page(self, many_participants):
        items, pagination = list_participants(limit=20)

        assert len(items) == 15
        assert pagination['totalPages'] == 1
        assert pagination['hasNext'] is False

    def test_no_results(self, db):
        items, pagination = list_participants()

        assert items == []
        assert pagination['totalPages'] == 0
        assert pagination['hasNext'] is False
        assert pagination['hasPrev'] is False


@pytest.mark.django_db
class TestPaymentSummary:

    def test_average_and_percentage(self, participant, unpaid_participant):
        summary = get_payment_summary()

        assert summary['total_participantes'] == 2
        assert summary['total_recaudado'] == Decimal('100')
        assert summary['total_esperado'] == Decimal('640')
        assert summary['porcentaje_recaudado'] == Decimal('15.6')
        assert summary['monto_promedio_por_participante'] == Decimal('50.00')
