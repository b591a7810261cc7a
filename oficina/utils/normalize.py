# oficina/utils/normalize.py
from typing import Optional

from oficina.constants import (
    NORMALIZE_FORMA_PAGAMENTO, NORMALIZE_PARCELA_STATUS,
    FormaPagamento, ParcelaStatus,
)

def norm_parcela_status(raw: Optional[str]) -> Optional[ParcelaStatus]:
    """'Pago', ' PENDENTE ' → enum canônico; desconhecido → None."""
    if not raw:
        return None
    return NORMALIZE_PARCELA_STATUS.get(raw.strip().lower())

def norm_forma_pagamento(raw: Optional[str]) -> Optional[FormaPagamento]:
    if not raw:
        return None
    return NORMALIZE_FORMA_PAGAMENTO.get(raw.strip().lower())
