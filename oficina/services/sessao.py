# oficina/services/sessao.py
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from oficina.database.db import get_db
from oficina.models.models import Caixa, Usuario
from oficina.utils.auth import get_current_user


@dataclass(frozen=True)
class Sessao:
    """Contexto do balcão: quem está operando e em qual caixa."""
    usuario_id: int
    estabelecimento_id: int
    caixa_id: Optional[int] = None


def caixa_aberto(db: Session, estabelecimento_id: int) -> Optional[Caixa]:
    return (
        db.query(Caixa)
          .filter(Caixa.estabelecimento_id == estabelecimento_id, Caixa.aberto.is_(True))
          .order_by(Caixa.data_abertura.desc())
          .first()
    )


def get_sessao(
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
) -> Sessao:
    caixa = caixa_aberto(db, current.estabelecimento_id)
    return Sessao(
        usuario_id=current.id,
        estabelecimento_id=current.estabelecimento_id,
        caixa_id=caixa.id if caixa else None,
    )
