# oficina/jobs/overdue.py
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from oficina.constants import ParcelaStatus
from oficina.database.db import SessionLocal
from oficina.models.models import Parcela
from oficina.utils.time_windows import hoje_local

logger = logging.getLogger(__name__)


def marcar_parcelas_vencidas(db: Session, hoje: Optional[date] = None) -> int:
    """
    Marca como 'vencido' toda parcela 'pendente' cujo vencimento já passou.
    'gerado' e 'pago' nunca são tocados.
    """
    hoje = hoje or hoje_local()

    # UPDATE em bloco (idempotente)
    updated = (
        db.query(Parcela)
          .filter(
              Parcela.status == ParcelaStatus.PENDENTE.value,
              Parcela.data_vencimento.isnot(None),
              Parcela.data_vencimento < hoje,
          )
          .update(
              {
                  Parcela.status: ParcelaStatus.VENCIDO.value,
                  Parcela.versao: Parcela.versao + 1,
              },
              synchronize_session=False,
          )
    )
    db.commit()
    updated = int(updated or 0)
    if updated:
        logger.info("Parcelas marcadas como vencidas: %s (hoje=%s)", updated, hoje)
    return updated


def marcar_parcelas_vencidas_job() -> int:
    """
    Wrapper para rodar sem FastAPI:
    - usado pelo scheduler (se habilitado)
    - ou pelo script CLI
    """
    db = SessionLocal()
    try:
        return marcar_parcelas_vencidas(db)
    finally:
        db.close()
