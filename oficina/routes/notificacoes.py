# routes/notificacoes.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from oficina.database.db import get_db
from oficina.models.models import Notificacao, Usuario
from oficina.schemas.notificacoes import NotificacaoOut
from oficina.utils.auth import get_current_user

router = APIRouter(
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[NotificacaoOut])
def list_notificacoes(
    lida: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    q = db.query(Notificacao).filter(Notificacao.estabelecimento_id == current.estabelecimento_id)
    if lida is not None:
        q = q.filter(Notificacao.lida.is_(lida))
    return q.order_by(Notificacao.criado_em.desc(), Notificacao.id.desc()).limit(limit).all()


@router.put("/{notificacao_id}/lida", response_model=NotificacaoOut)
def marcar_lida(
    notificacao_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    notif = (
        db.query(Notificacao)
          .filter(Notificacao.id == notificacao_id,
                  Notificacao.estabelecimento_id == current.estabelecimento_id)
          .first()
    )
    if not notif:
        raise HTTPException(status_code=404, detail="Notificação não encontrada")
    notif.lida = True
    db.commit()
    db.refresh(notif)
    return notif
