import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.participants.models import Participant, Payment, EstadoPago
from apps.participants.services import register_participant


# =============================================================================
# Participant Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestParticipantRegistration:
    """Tests for POST /api/participantes/register"""

    def test_requires_token(self, api_client, participant_data):
        url = reverse('participants:participant-register')
        response = api_client.post(url, participant_data, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not Participant.objects.exists()

    def test_register_with_initial_payment(self, tesorero_client, tesorero, participant_data):
        url = reverse('participants:participant-register')
        data = {**participant_data, 'monto_inicial': '100'}
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Participante registrado con pago inicial'

        body = response.data['participante']
        assert body['monto_pagado'] == Decimal('100')
        assert body['monto_total'] == Decimal('320')
        assert body['monto_restante'] == Decimal('220')
        assert body['porcentaje_pagado'] == Decimal('31.3')
        assert body['estado'] == EstadoPago.PENDIENTE
        assert body['tipo_pago'] == 'cuotas'
        assert body['usuario'] == {'nombre': tesorero.nombre, 'usuario': tesorero.usuario}
        assert len(body['pagos']) == 1
        assert body['pagos'][0]['observacion'] == 'Pago inicial al registro'
        assert body['pagos'][0]['metodo_pago'] == 'efectivo'

    def test_register_without_initial_payment(self, tesorero_client, participant_data):
        url = reverse('participants:participant-register')
        response = tesorero_client.post(url, participant_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Participante registrado sin pago inicial'
        assert response.data['participante']['pagos'] == []
        assert response.data['participante']['monto_pagado'] == Decimal('0')
        assert not Payment.objects.exists()

    def test_register_full_payment_is_completed(self, tesorero_client, participant_data):
        url = reverse('participants:participant-register')
        data = {**participant_data, 'monto_inicial': '320', 'metodo_pago': 'transferencia'}
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['participante']['estado'] == EstadoPago.COMPLETADO
        assert response.data['participante']['monto_restante'] == Decimal('0')
        assert Payment.objects.get().metodo_pago == 'transferencia'

    def test_register_initial_payment_note(self, tesorero_client, participant_data):
        url = reverse('participants:participant-register')
        data = {**participant_data, 'monto_inicial': '50', 'observacion': 'Recibo 0042'}
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['participante']['pagos'][0]['observacion'] == 'Recibo 0042'
        assert Payment.objects.get().observacion == 'Recibo 0042'

    def test_register_blank_note_uses_default(self, tesorero_client, participant_data):
        url = reverse('participants:participant-register')
        data = {**participant_data, 'monto_inicial': '50', 'observacion': ''}
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Payment.objects.get().observacion == 'Pago inicial al registro'

    def test_register_duplicate_ci(self, tesorero_client, participant, participant_data):
        """Duplicate ci is rejected and no rows are written."""
        url = reverse('participants:participant-register')
        data = {**participant_data, 'nombres': 'Otra', 'monto_inicial': '50'}
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'La cédula ya está registrada'
        assert Participant.objects.count() == 1
        assert Payment.objects.count() == 1

    @pytest.mark.parametrize('monto', ['321', '-1'])
    def test_register_initial_out_of_range(self, tesorero_client, participant_data, monto):
        url = reverse('participants:participant-register')
        data = {**participant_data, 'monto_inicial': monto}
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data
        assert not Participant.objects.exists()
        assert not Payment.objects.exists()

    def test_register_missing_field(self, tesorero_client, participant_data):
        url = reverse('participants:participant-register')
        data = {**participant_data}
        del data['ci']
        response = tesorero_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'ci' in response.data['details']

    def test_register_after_owner_deleted(self, tesorero_client, tesorero, participant_data):
        """A valid token for a deleted user still registers, without owner."""
        tesorero.delete()

        url = reverse('participants:participant-register')
        response = tesorero_client.post(url, participant_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['participante']['usuario'] is None


# =============================================================================
# Participant Listing Tests
# =============================================================================

@pytest.mark.django_db
class TestParticipantList:
    """Tests for GET /api/participantes/"""

    def test_second_page(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'page': 2, 'limit': 10})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['participantes']) == 5
        assert response.data['pagination'] == {
            'currentPage': 2,
            'totalPages': 2,
            'totalItems': 15,
            'itemsPerPage': 10,
            'hasNext': False,
            'hasPrev': True,
        }

    def test_defaults(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url)

        pagination = response.data['pagination']
        assert pagination['currentPage'] == 1
        assert pagination['itemsPerPage'] == 10
        assert pagination['hasNext'] is True
        assert pagination['hasPrev'] is False
        # Newest first
        assert response.data['participantes'][0]['ci'] == many_participants[-1].ci

    def test_page_past_the_end(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'page': 5})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['participantes'] == []
        assert response.data['pagination']['totalItems'] == 15

    def test_search(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'search': 'apellido 7'})

        assert [p['ci'] for p in response.data['participantes']] == ['1000007']

    def test_search_by_ci(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'search': '1000012'})

        assert response.data['pagination']['totalItems'] == 1

    def test_filter_carrera_case_insensitive(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'carrera': 'MEDIC'})

        assert response.data['pagination']['totalItems'] == 5

    def test_filter_estado(self, tesorero_client, many_participants, participant):
        Participant.objects.filter(id=participant.id).update(
            monto_pagado=Decimal('320'), estado=EstadoPago.COMPLETADO
        )
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'estado': 'completado'})

        assert [p['id'] for p in response.data['participantes']] == [participant.id]

    def test_sort_ascending(self, tesorero_client, many_participants):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, {'sortBy': 'nombres', 'sortOrder': 'asc', 'limit': 3})

        assert [p['nombres'] for p in response.data['participantes']] == [
            'Nombre 0', 'Nombre 1', 'Nombre 10'
        ]

    def test_items_are_enriched(self, tesorero_client, participant, tesorero):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url)

        item = response.data['participantes'][0]
        assert item['monto_restante'] == Decimal('220')
        assert item['porcentaje_pagado'] == Decimal('31.3')
        assert item['usuario'] == {'nombre': tesorero.nombre, 'usuario': tesorero.usuario}
        assert len(item['pagos']) == 1

    @pytest.mark.parametrize('params', [
        {'page': 0},
        {'limit': 'many'},
        {'sortOrder': 'sideways'},
        {'sortBy': 'password'},
        {'estado': 'pagado'},
    ])
    def test_invalid_query_params(self, tesorero_client, params):
        url = reverse('participants:participant-list')
        response = tesorero_client.get(url, params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data


# =============================================================================
# Participant Detail Tests
# =============================================================================

@pytest.mark.django_db
class TestParticipantDetail:
    """Tests for GET/PUT/DELETE /api/participantes/{id}"""

    def test_get(self, tesorero_client, participant):
        url = reverse('participants:participant-detail', kwargs={'pk': participant.id})
        response = tesorero_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['ci'] == participant.ci
        assert response.data['monto_restante'] == Decimal('220')

    def test_get_not_found(self, tesorero_client):
        url = reverse('participants:participant-detail', kwargs={'pk': 99999})
        response = tesorero_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Participante no encontrado'

    def test_update(self, tesorero_client, participant):
        url = reverse('participants:participant-detail', kwargs={'pk': participant.id})
        response = tesorero_client.put(url, {'nombres': 'María José', 'celular': '79999999'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Participante actualizado con éxito'
        assert response.data['participante']['nombres'] == 'María José'
        assert response.data['participante']['celular'] == '79999999'

    def test_update_ignores_amounts(self, tesorero_client, participant):
        url = reverse('participants:participant-detail', kwargs={'pk': participant.id})
        data = {'monto_pagado': '320', 'estado': 'completado', 'carrera': 'Derecho'}
        response = tesorero_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        participant.refresh_from_db()
        assert participant.monto_pagado == Decimal('100')
        assert participant.estado == EstadoPago.PENDIENTE
        assert participant.carrera == 'Derecho'

    def test_update_duplicate_ci(self, tesorero_client, participant, unpaid_participant):
        url = reverse('participants:participant-detail', kwargs={'pk': unpaid_participant.id})
        response = tesorero_client.put(url, {'ci': participant.ci}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        unpaid_participant.refresh_from_db()
        assert unpaid_participant.ci == '6543210'

    def test_update_same_ci_allowed(self, tesorero_client, participant):
        url = reverse('participants:participant-detail', kwargs={'pk': participant.id})
        response = tesorero_client.put(url, {'ci': participant.ci}, format='json')

        assert response.status_code == status.HTTP_200_OK

    def test_update_not_found(self, tesorero_client):
        url = reverse('participants:participant-detail', kwargs={'pk': 99999})
        response = tesorero_client.put(url, {'nombres': 'X'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_removes_payments(self, tesorero_client, participant):
        url = reverse('participants:participant-detail', kwargs={'pk': participant.id})
        response = tesorero_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Participant.objects.filter(id=participant.id).exists()
        assert not Payment.objects.filter(participante_id=participant.id).exists()

    def test_delete_not_found(self, tesorero_client):
        url = reverse('participants:participant-detail', kwargs={'pk': 99999})
        response = tesorero_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Payment Tests
# =============================================================================

@pytest.mark.django_db
class TestPayments:
    """Tests for /api/participantes/{id}/pagos"""

    def test_installments_complete_the_balance(self, tesorero_client, unpaid_participant):
        """Registering with nothing, then paying 100 and 220, completes the balance."""
        url = reverse('participants:participant-payments', kwargs={'pk': unpaid_participant.id})

        first = tesorero_client.post(url, {'monto': '100'}, format='json')
        assert first.status_code == status.HTTP_201_CREATED
        assert first.data['monto_restante'] == Decimal('220')

        second = tesorero_client.post(url, {'monto': '220', 'metodo_pago': 'qr'}, format='json')
        assert second.status_code == status.HTTP_201_CREATED
        assert second.data['message'] == 'Pago registrado con éxito'
        assert second.data['pago']['monto'] == Decimal('220')
        assert second.data['monto_restante'] == Decimal('0')

        unpaid_participant.refresh_from_db()
        assert unpaid_participant.monto_pagado == Decimal('320')
        assert unpaid_participant.estado == EstadoPago.COMPLETADO

    def test_overpayment_rejected(self, tesorero_client, participant):
        url = reverse('participants:participant-payments', kwargs={'pk': participant.id})
        response = tesorero_client.post(url, {'monto': '221'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Máximo permitido: 220' in response.data['error']
        participant.refresh_from_db()
        assert participant.monto_pagado == Decimal('100')
        assert Payment.objects.filter(participante=participant).count() == 1

    @pytest.mark.parametrize('monto', ['0', '-5'])
    def test_non_positive_amount(self, tesorero_client, participant, monto):
        url = reverse('participants:participant-payments', kwargs={'pk': participant.id})
        response = tesorero_client.post(url, {'monto': monto}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Payment.objects.filter(participante=participant).count() == 1

    def test_payment_for_missing_participant(self, tesorero_client):
        url = reverse('participants:participant-payments', kwargs={'pk': 99999})
        response = tesorero_client.post(url, {'monto': '10'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_newest_first(self, tesorero_client, participant):
        url = reverse('participants:participant-payments', kwargs={'pk': participant.id})
        tesorero_client.post(url, {'monto': '50', 'observacion': 'segunda'}, format='json')

        response = tesorero_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [p['observacion'] for p in response.data] == ['segunda', 'Pago inicial al registro']

    def test_list_missing_participant(self, tesorero_client):
        url = reverse('participants:participant-payments', kwargs={'pk': 99999})
        response = tesorero_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_payment_recomputes_balance(self, tesorero_client, participant):
        pago = participant.pagos.get()
        url = reverse('participants:payment-detail', kwargs={'pk': participant.id, 'pago_id': pago.id})
        response = tesorero_client.put(url, {'monto': '320', 'observacion': 'corregido'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Pago actualizado con éxito'
        assert response.data['pago']['observacion'] == 'corregido'
        participant.refresh_from_db()
        assert participant.monto_pagado == Decimal('320')
        assert participant.estado == EstadoPago.COMPLETADO

    def test_update_payment_over_total(self, tesorero_client, participant):
        url_pagos = reverse('participants:participant-payments', kwargs={'pk': participant.id})
        tesorero_client.post(url_pagos, {'monto': '200'}, format='json')
        primero = participant.pagos.order_by('id').first()

        url = reverse('participants:payment-detail', kwargs={'pk': participant.id, 'pago_id': primero.id})
        response = tesorero_client.put(url, {'monto': '150'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Máximo permitido: 120' in response.data['error']
        participant.refresh_from_db()
        assert participant.monto_pagado == Decimal('300')

    def test_update_payment_of_other_participant(self, tesorero_client, participant, unpaid_participant):
        pago = participant.pagos.get()
        url = reverse('participants:payment-detail', kwargs={'pk': unpaid_participant.id, 'pago_id': pago.id})
        response = tesorero_client.put(url, {'metodo_pago': 'qr'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Pago no encontrado'

    def test_delete_payment_recomputes_balance(self, tesorero_client, participant):
        url_pagos = reverse('participants:participant-payments', kwargs={'pk': participant.id})
        tesorero_client.post(url_pagos, {'monto': '220'}, format='json')
        participant.refresh_from_db()
        assert participant.estado == EstadoPago.COMPLETADO

        inicial = participant.pagos.get(monto=Decimal('100'))
        url = reverse('participants:payment-detail', kwargs={'pk': participant.id, 'pago_id': inicial.id})
        response = tesorero_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        participant.refresh_from_db()
        assert participant.monto_pagado == Decimal('220')
        assert participant.estado == EstadoPago.PENDIENTE

    def test_delete_missing_payment(self, tesorero_client, participant):
        url = reverse('participants:payment-detail', kwargs={'pk': participant.id, 'pago_id': 99999})
        response = tesorero_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Summary Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentSummary:
    """Tests for GET /api/participantes/resumen"""

    def test_summary(self, tesorero_client, participant, unpaid_participant):
        url_pagos = reverse('participants:participant-payments', kwargs={'pk': participant.id})
        tesorero_client.post(url_pagos, {'monto': '220'}, format='json')

        register_participant(
            nombres='Ana', apellidos='Rojas', carrera='Derecho',
            ci='111', celular='1', monto_inicial=Decimal('100'),
        )

        response = tesorero_client.get(reverse('participants:payment-summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_participantes'] == 3
        assert response.data['total_recaudado'] == Decimal('420')
        assert response.data['total_esperado'] == Decimal('960')
        assert response.data['porcentaje_recaudado'] == Decimal('43.8')
        assert response.data['monto_promedio_por_participante'] == Decimal('140.00')
        assert response.data['conteo_por_estado'] == [
            {'estado': 'completado', 'total': 1},
            {'estado': 'pendiente', 'total': 2},
        ]

    def test_summary_empty(self, tesorero_client):
        response = tesorero_client.get(reverse('participants:payment-summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_participantes'] == 0
        assert response.data['porcentaje_recaudado'] == Decimal('0')
        assert response.data['conteo_por_estado'] == []
