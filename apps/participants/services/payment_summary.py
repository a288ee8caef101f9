"""Collection statistics across all participants."""

from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Count, Sum

from ..models import MONTO_TOTAL, Participant


def get_payment_summary() -> dict:
    """
    Aggregate collection figures.

    Returns:
        Dict with total_participantes, total_recaudado, total_esperado,
        porcentaje_recaudado (one decimal), monto_promedio_por_participante
        (two decimals) and conteo_por_estado.
    """
    totals = Participant.objects.aggregate(
        total_participantes=Count('id'),
        total_recaudado=Sum('monto_pagado'),
    )
    total_participantes = totals['total_participantes']
    total_recaudado = totals['total_recaudado'] or Decimal('0.00')
    total_esperado = MONTO_TOTAL * total_participantes

    if total_esperado:
        porcentaje = (total_recaudado / total_esperado * 100).quantize(
            Decimal('0.1'), rounding=ROUND_HALF_UP
        )
    else:
        porcentaje = Decimal('0.0')

    if total_participantes:
        promedio = (total_recaudado / total_participantes).quantize(
            Decimal('0.01'), rounding=ROUND_HALF_UP
        )
    else:
        promedio = Decimal('0.00')

    conteo_por_estado = list(
        Participant.objects
        .values('estado')
        .annotate(total=Count('id'))
        .order_by('estado')
    )

    return {
        'total_participantes': total_participantes,
        'total_recaudado': total_recaudado,
        'total_esperado': total_esperado,
        'porcentaje_recaudado': porcentaje,
        'monto_promedio_por_participante': promedio,
        'conteo_por_estado': conteo_por_estado,
    }
