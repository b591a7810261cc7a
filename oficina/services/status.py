# oficina/services/status.py
"""
Ciclo de vida da parcela.

    gerado ──finalizar_plano──► pendente ◄──alternar──► pago
                                   │                    ▲
                                   └─(vencimento passa)─► vencido ──alternar──┘

'vencido' nunca é escolhido pelo usuário: é observado na leitura (ou gravado
pelo job de vencidos) a partir de 'pendente'. 'pago' é reversível.
"""
from datetime import date
from typing import Optional, Tuple

from oficina.constants import ParcelaStatus
from oficina.models.models import Parcela
from oficina.services.errors import StateConflictError, ValidationError
from oficina.utils.normalize import norm_parcela_status

# Destinos que o usuário pode pedir na listagem
DESTINOS_USUARIO = {ParcelaStatus.PAGO, ParcelaStatus.PENDENTE}


def status_observado(parcela: Parcela, hoje: date) -> ParcelaStatus:
    """Status como deve ser exibido hoje (pendente vencida → vencido)."""
    atual = ParcelaStatus(parcela.status)
    if (
        atual == ParcelaStatus.PENDENTE
        and parcela.data_vencimento is not None
        and parcela.data_vencimento < hoje
    ):
        return ParcelaStatus.VENCIDO
    return atual


def finalizar_plano(parcela: Parcela, hoje: date, a_vista: bool = False) -> Tuple[ParcelaStatus, ParcelaStatus]:
    """
    gerado → pendente quando o plano é fechado.
    À vista é quitado na hora: gerado → pago com data_pagamento = hoje.
    """
    anterior = ParcelaStatus(parcela.status)
    if anterior != ParcelaStatus.GERADO:
        raise StateConflictError(
            f"Parcela em '{anterior.value}' não pode ser finalizada",
            status=anterior.value,
        )
    if a_vista:
        parcela.status = ParcelaStatus.PAGO.value
        parcela.data_pagamento = hoje
    else:
        parcela.status = ParcelaStatus.PENDENTE.value
        parcela.data_pagamento = None
    return anterior, ParcelaStatus(parcela.status)


def alternar_status(
    parcela: Parcela,
    novo_status: str,
    hoje: date,
    data_pagamento: Optional[date] = None,
) -> Tuple[ParcelaStatus, ParcelaStatus]:
    """
    Troca manual de status feita na listagem de parcelas.

    - pendente/vencido → pago: grava data_pagamento (informada ou hoje)
    - pago → pendente: limpa data_pagamento; data_vencimento fica intacta
    - mesmo status: não faz nada
    Devolve (anterior, novo), ambos observados em `hoje`.
    """
    destino = norm_parcela_status(novo_status)
    if destino is None:
        raise ValidationError(f"Status inválido: {novo_status!r}")

    anterior = status_observado(parcela, hoje)

    if anterior == ParcelaStatus.GERADO:
        raise StateConflictError(
            "Parcela ainda não tem plano de pagamento; inclua o pagamento antes",
            status=anterior.value,
        )
    if destino not in DESTINOS_USUARIO:
        raise StateConflictError(
            f"Status '{destino.value}' não pode ser definido manualmente",
            status=anterior.value,
        )

    if destino == ParcelaStatus.PAGO:
        if anterior == ParcelaStatus.PAGO:
            return anterior, anterior
        parcela.status = ParcelaStatus.PAGO.value
        parcela.data_pagamento = data_pagamento or hoje
        return anterior, ParcelaStatus.PAGO

    # destino == PENDENTE
    if anterior == ParcelaStatus.VENCIDO:
        raise StateConflictError(
            "Parcela vencida só pode ser marcada como paga",
            status=anterior.value,
        )
    if anterior == ParcelaStatus.PENDENTE:
        return anterior, anterior

    parcela.status = ParcelaStatus.PENDENTE.value
    parcela.data_pagamento = None
    return anterior, status_observado(parcela, hoje)
