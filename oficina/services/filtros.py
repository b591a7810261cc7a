# oficina/services/filtros.py
from typing import Optional, Tuple

from sqlalchemy.orm import Query

from oficina.constants import FILTROS_PARCELAS, ParcelaStatus
from oficina.models.models import Pagamento, Parcela
from oficina.services.errors import ValidationError


def status_do_filtro(nome: Optional[str]) -> Optional[Tuple[ParcelaStatus, ...]]:
    """Nome do filtro da UI → status incluídos. None = sem filtro."""
    if nome is None or not nome.strip():
        return None
    try:
        return FILTROS_PARCELAS[nome.strip()]
    except KeyError:
        raise ValidationError(
            f"Filtro desconhecido: {nome!r}",
            filtros=sorted(FILTROS_PARCELAS),
        )


def aplicar_filtro(q: Query, nome: Optional[str], caixa_id: Optional[int] = None) -> Query:
    """
    Aplica o predicado do filtro à query de Parcela.
    A query precisa ter Pagamento no JOIN quando caixa_id for usado.
    """
    incluidos = status_do_filtro(nome)
    if incluidos is not None:
        q = q.filter(Parcela.status.in_([s.value for s in incluidos]))
    if caixa_id is not None:
        q = q.filter(Pagamento.caixa_id == caixa_id)
    return q
