# oficina/tests/test_calculadora.py
from datetime import date
from decimal import Decimal

import pytest

from oficina.constants import MAX_PARCELAS
from oficina.services.calculadora import (
    calcular_pagamento, calcular_total, dividir_total, normalizar_parcelas,
)
from oficina.services.errors import ValidationError


def test_total_with_discount_and_three_installments():
    plano = calcular_pagamento(1000, desconto=100, acrescimos=0, parcelas=3,
                               data_vencimento_primeira=date(2025, 1, 10))
    assert plano.total == Decimal("900.00")
    assert [p.valor for p in plano.parcelas] == [Decimal("300.00")] * 3
    assert [p.numero_parcela for p in plano.parcelas] == [1, 2, 3]
    assert all(p.total_parcelas == 3 for p in plano.parcelas)


def test_remainder_goes_to_last_installment():
    plano = calcular_pagamento(1000, parcelas=3, data_vencimento_primeira=date(2025, 1, 10))
    valores = [p.valor for p in plano.parcelas]
    assert valores == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
    assert sum(valores) == Decimal("1000.00")


@pytest.mark.parametrize("subtotal,desconto,acrescimos,n", [
    ("100.00", "0", "0", 7),
    ("1234.56", "34.56", "10.01", 11),
    ("0.05", "0", "0", 3),
    ("999.99", "0.99", "0.33", 12),
])
def test_installments_always_sum_to_total(subtotal, desconto, acrescimos, n):
    plano = calcular_pagamento(subtotal, desconto, acrescimos, parcelas=n,
                               data_vencimento_primeira=date(2025, 3, 1))
    assert plano.total == Decimal(subtotal) - Decimal(desconto) + Decimal(acrescimos)
    assert sum(p.valor for p in plano.parcelas) == plano.total
    assert len(plano.parcelas) == n


def test_a_vista_single_installment():
    plano = calcular_pagamento(250.5, acrescimos=9.5, parcelas="vista")
    assert plano.a_vista is True
    assert len(plano.parcelas) == 1
    unica = plano.parcelas[0]
    assert unica.valor == plano.total == Decimal("260.00")
    assert unica.total_parcelas is None
    assert unica.data_vencimento is None


def test_a_vista_keeps_supplied_due_date():
    plano = calcular_pagamento(100, parcelas="vista", data_vencimento_primeira=date(2025, 5, 5))
    assert plano.parcelas[0].data_vencimento == date(2025, 5, 5)


def test_monthly_due_dates_clamp_end_of_month():
    plano = calcular_pagamento(300, parcelas=3, data_vencimento_primeira=date(2025, 1, 31))
    assert [p.data_vencimento for p in plano.parcelas] == [
        date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31),
    ]


def test_juros_never_added_to_total():
    plano = calcular_pagamento(500, parcelas=2, data_vencimento_primeira=date(2025, 1, 1), juros=25)
    assert plano.juros == Decimal("25.00")
    assert plano.total == Decimal("500.00")


def test_float_inputs_do_not_drift():
    assert calcular_total(0.1, 0, 0.2) == Decimal("0.30")


@pytest.mark.parametrize("subtotal", [0, -10])
def test_rejects_non_positive_subtotal(subtotal):
    with pytest.raises(ValidationError):
        calcular_pagamento(subtotal, parcelas="vista")


def test_rejects_negative_total():
    with pytest.raises(ValidationError) as exc:
        calcular_pagamento(100, desconto=150, parcelas="vista")
    assert exc.value.extra["total"] == -50.0


@pytest.mark.parametrize("parcelas", [0, -1, "0", "abc", 2.5, "2.5", True, "²", "٣x", float("inf"), MAX_PARCELAS + 1, str(MAX_PARCELAS + 1), 200000])
def test_rejects_invalid_installment_count(parcelas):
    with pytest.raises(ValidationError):
        calcular_pagamento(100, parcelas=parcelas, data_vencimento_primeira=date(2025, 1, 1))


def test_requires_first_due_date_when_split():
    with pytest.raises(ValidationError):
        calcular_pagamento(100, parcelas=2)


def test_normalizar_parcelas_accepts_strings():
    assert normalizar_parcelas("vista") is None
    assert normalizar_parcelas(" Vista ") is None
    assert normalizar_parcelas("4") == 4
    assert normalizar_parcelas(4.0) == 4


def test_dividir_total_one_installment():
    assert dividir_total(Decimal("10.01"), 1) == [Decimal("10.01")]


def test_accepts_max_installments():
    plano = calcular_pagamento(4800, parcelas=MAX_PARCELAS, data_vencimento_primeira=date(2025, 1, 31))
    assert len(plano.parcelas) == MAX_PARCELAS
    assert sum(p.valor for p in plano.parcelas) == Decimal("4800.00")


def test_rejects_due_dates_past_calendar_range():
    with pytest.raises(ValidationError):
        calcular_pagamento(100, parcelas=3, data_vencimento_primeira=date(9999, 11, 1))


@pytest.mark.parametrize("valor", [float("inf"), float("nan"), "Infinity", Decimal("NaN")])
def test_rejects_non_finite_amounts(valor):
    with pytest.raises(ValidationError):
        calcular_total(100, desconto=valor)
    with pytest.raises(ValidationError):
        calcular_total(valor)
