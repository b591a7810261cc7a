# oficina/services/calculadora.py
"""
Calculadora do painel de pagamento.

    total = subtotal - desconto + acrescimos

O total é dividido em N parcelas com vencimentos mensais a partir da
primeira data informada. Cada parcela é truncada no centavo e a sobra vai
para a última, de modo que a soma bate exatamente com o total.

Juros são guardados no resultado, mas NUNCA entram no total.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from oficina.constants import A_VISTA, MAX_PARCELAS
from oficina.services.errors import ValidationError

CENTAVO = Decimal("0.01")

Parcelas = Union[int, str]


@dataclass
class ParcelaPlanejada:
    numero_parcela: int
    total_parcelas: Optional[int]   # None = à vista
    valor: Decimal
    data_vencimento: Optional[date]


@dataclass
class PlanoPagamento:
    subtotal: Decimal
    desconto: Decimal
    acrescimos: Decimal
    juros: Decimal
    total: Decimal
    a_vista: bool
    parcelas: list[ParcelaPlanejada] = field(default_factory=list)


def D(x) -> Decimal:
    """Converte float/str/int em Decimal sem herdar o ruído binário do float."""
    if x is None or x == "":
        return Decimal("0")
    if isinstance(x, Decimal):
        d = x
    else:
        try:
            d = Decimal(str(x))
        except InvalidOperation:
            raise ValidationError(f"Valor monetário inválido: {x!r}")
    # Infinity/NaN
    if not d.is_finite():
        raise ValidationError(f"Valor monetário inválido: {x!r}")
    return d


def _money(x: Decimal) -> Decimal:
    return x.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def normalizar_parcelas(parcelas: Parcelas) -> Optional[int]:
    """
    'vista' → None; 3 / '3' → 3.
    Rejeita < 1, fracionários e textos não numéricos.
    """
    if isinstance(parcelas, str):
        raw = parcelas.strip().lower()
        if raw == A_VISTA:
            return None
        if not raw.isdecimal():
            raise ValidationError(f"Quantidade de parcelas inválida: {parcelas!r}")
        n = int(raw)
    elif isinstance(parcelas, bool):
        raise ValidationError(f"Quantidade de parcelas inválida: {parcelas!r}")
    elif isinstance(parcelas, int):
        n = parcelas
    elif isinstance(parcelas, float) and parcelas.is_integer():
        n = int(parcelas)
    else:
        raise ValidationError(f"Quantidade de parcelas inválida: {parcelas!r}")

    if n < 1:
        raise ValidationError("A quantidade de parcelas deve ser pelo menos 1")
    if n > MAX_PARCELAS:
        raise ValidationError(
            f"A quantidade de parcelas deve ser no máximo {MAX_PARCELAS}",
            max_parcelas=MAX_PARCELAS,
        )
    return n


def calcular_total(subtotal, desconto=0, acrescimos=0) -> Decimal:
    sub = D(subtotal)
    desc = D(desconto)
    acr = D(acrescimos)

    if sub <= 0:
        raise ValidationError("Subtotal inválido. Adicione itens à ordem primeiro.")
    if desc < 0:
        raise ValidationError("Desconto não pode ser negativo")
    if acr < 0:
        raise ValidationError("Acréscimos não podem ser negativos")

    total = _money(sub - desc + acr)
    if total < 0:
        raise ValidationError(
            "Desconto maior que subtotal + acréscimos",
            total=float(total),
        )
    return total


def dividir_total(total: Decimal, n: int) -> list[Decimal]:
    """Divide no centavo: todas truncadas, a sobra vai para a última."""
    base = (total / n).quantize(CENTAVO, rounding=ROUND_DOWN)
    valores = [base] * n
    valores[-1] = total - base * (n - 1)
    return valores


def vencimentos_mensais(primeira: date, n: int) -> list[date]:
    # relativedelta ajusta fim de mês (31/01 + 1 mês → 28 ou 29/02)
    try:
        return [primeira + relativedelta(months=k) for k in range(n)]
    except ValueError:
        raise ValidationError("Data de vencimento fora do intervalo suportado")


def calcular_pagamento(
    subtotal,
    desconto=0,
    acrescimos=0,
    parcelas: Parcelas = A_VISTA,
    data_vencimento_primeira: Optional[date] = None,
    juros=0,
) -> PlanoPagamento:
    """
    Calcula o total e o plano de parcelas, sem efeitos colaterais.

    Levanta ValidationError para subtotal <= 0, total negativo, quantidade
    de parcelas inválida ou falta da primeira data de vencimento em plano
    parcelado.
    """
    n = normalizar_parcelas(parcelas)
    total = calcular_total(subtotal, desconto, acrescimos)
    juros_d = D(juros)
    if juros_d < 0:
        raise ValidationError("Juros não podem ser negativos")

    plano = PlanoPagamento(
        subtotal=_money(D(subtotal)),
        desconto=_money(D(desconto)),
        acrescimos=_money(D(acrescimos)),
        juros=_money(juros_d),
        total=total,
        a_vista=n is None,
    )

    if n is None:
        plano.parcelas.append(
            ParcelaPlanejada(
                numero_parcela=1,
                total_parcelas=None,
                valor=total,
                data_vencimento=data_vencimento_primeira,
            )
        )
        return plano

    if data_vencimento_primeira is None:
        raise ValidationError("Data de vencimento da primeira parcela é obrigatória")

    valores = dividir_total(total, n)
    datas = vencimentos_mensais(data_vencimento_primeira, n)
    for i, (valor, venc) in enumerate(zip(valores, datas), start=1):
        plano.parcelas.append(
            ParcelaPlanejada(
                numero_parcela=i,
                total_parcelas=n,
                valor=valor,
                data_vencimento=venc,
            )
        )
    return plano
