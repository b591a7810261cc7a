# oficina/tests/test_status.py
from datetime import date, timedelta
from decimal import Decimal

import pytest

from oficina.constants import ParcelaStatus
from oficina.models.models import Parcela
from oficina.services.errors import StateConflictError, ValidationError
from oficina.services.status import alternar_status, finalizar_plano, status_observado

HOJE = date(2025, 6, 15)


def _parcela(status, vencimento=HOJE + timedelta(days=10), pagamento=None):
    return Parcela(
        ordem_id=1, pagamento_id=1, numero_parcela=1, total_parcelas=2,
        valor=Decimal("50.00"), status=status.value,
        data_vencimento=vencimento, data_pagamento=pagamento,
    )


def test_pending_past_due_is_observed_overdue():
    p = _parcela(ParcelaStatus.PENDENTE, vencimento=HOJE - timedelta(days=1))
    assert status_observado(p, HOJE) == ParcelaStatus.VENCIDO
    # nada é gravado na observação
    assert p.status == ParcelaStatus.PENDENTE.value


def test_pending_due_today_is_not_overdue():
    p = _parcela(ParcelaStatus.PENDENTE, vencimento=HOJE)
    assert status_observado(p, HOJE) == ParcelaStatus.PENDENTE


def test_paid_past_due_stays_paid():
    p = _parcela(ParcelaStatus.PAGO, vencimento=HOJE - timedelta(days=30), pagamento=HOJE)
    assert status_observado(p, HOJE) == ParcelaStatus.PAGO


def test_finalizar_plano_moves_generated_to_pending():
    p = _parcela(ParcelaStatus.GERADO)
    assert finalizar_plano(p, HOJE) == (ParcelaStatus.GERADO, ParcelaStatus.PENDENTE)
    assert p.data_pagamento is None


def test_finalizar_plano_a_vista_is_paid_today():
    p = _parcela(ParcelaStatus.GERADO, vencimento=None)
    finalizar_plano(p, HOJE, a_vista=True)
    assert p.status == ParcelaStatus.PAGO.value
    assert p.data_pagamento == HOJE


def test_finalizar_plano_rejects_non_generated():
    with pytest.raises(StateConflictError):
        finalizar_plano(_parcela(ParcelaStatus.PENDENTE), HOJE)


def test_mark_paid_sets_payment_date():
    p = _parcela(ParcelaStatus.PENDENTE)
    assert alternar_status(p, "Pago", HOJE) == (ParcelaStatus.PENDENTE, ParcelaStatus.PAGO)
    assert p.status == "pago"
    assert p.data_pagamento == HOJE


def test_mark_paid_uses_supplied_date():
    p = _parcela(ParcelaStatus.PENDENTE)
    alternar_status(p, "pago", HOJE, data_pagamento=date(2025, 6, 1))
    assert p.data_pagamento == date(2025, 6, 1)


def test_toggle_round_trip_restores_pending():
    venc = HOJE + timedelta(days=3)
    p = _parcela(ParcelaStatus.PENDENTE, vencimento=venc)
    alternar_status(p, "pago", HOJE)
    alternar_status(p, "pendente", HOJE)
    assert p.status == ParcelaStatus.PENDENTE.value
    assert p.data_pagamento is None
    assert p.data_vencimento == venc


def test_overdue_can_be_paid():
    p = _parcela(ParcelaStatus.PENDENTE, vencimento=HOJE - timedelta(days=5))
    anterior, novo = alternar_status(p, "pago", HOJE)
    assert (anterior, novo) == (ParcelaStatus.VENCIDO, ParcelaStatus.PAGO)


def test_unpaying_past_due_is_observed_overdue():
    p = _parcela(ParcelaStatus.PAGO, vencimento=HOJE - timedelta(days=5), pagamento=HOJE)
    _, novo = alternar_status(p, "pendente", HOJE)
    assert p.status == ParcelaStatus.PENDENTE.value
    assert novo == ParcelaStatus.VENCIDO


def test_overdue_cannot_go_back_to_pending():
    p = _parcela(ParcelaStatus.VENCIDO, vencimento=HOJE - timedelta(days=5))
    with pytest.raises(StateConflictError):
        alternar_status(p, "pendente", HOJE)
    assert p.status == ParcelaStatus.VENCIDO.value


@pytest.mark.parametrize("destino", ["pago", "pendente"])
def test_generated_is_rejected(destino):
    p = _parcela(ParcelaStatus.GERADO)
    with pytest.raises(StateConflictError):
        alternar_status(p, destino, HOJE)
    assert p.status == ParcelaStatus.GERADO.value
    assert p.data_pagamento is None


@pytest.mark.parametrize("destino", ["vencido", "gerado"])
def test_derived_targets_are_rejected(destino):
    with pytest.raises(StateConflictError):
        alternar_status(_parcela(ParcelaStatus.PENDENTE), destino, HOJE)


def test_unknown_status_is_validation_error():
    with pytest.raises(ValidationError):
        alternar_status(_parcela(ParcelaStatus.PENDENTE), "quitado", HOJE)


def test_same_state_is_noop():
    p = _parcela(ParcelaStatus.PAGO, pagamento=date(2025, 6, 1))
    assert alternar_status(p, "pago", HOJE) == (ParcelaStatus.PAGO, ParcelaStatus.PAGO)
    assert p.data_pagamento == date(2025, 6, 1)
