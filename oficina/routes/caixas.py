# routes/caixas.py
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from oficina.constants import ParcelaStatus
from oficina.database.db import get_db
from oficina.models.models import Caixa, Pagamento, Parcela, Usuario
from oficina.schemas.caixas import CaixaCreate, CaixaDetalhesOut, CaixaFechar, CaixaOut
from oficina.services.sessao import caixa_aberto
from oficina.utils.auth import get_current_user
from oficina.utils.time_windows import local_dates_to_utc_window

router = APIRouter(
    dependencies=[Depends(get_current_user)],  # 👈 exige Bearer em todas as rotas
)


def _get_caixa_escopo(caixa_id: int, db: Session, current: Usuario) -> Caixa:
    caixa = (
        db.query(Caixa)
          .filter(Caixa.id == caixa_id, Caixa.estabelecimento_id == current.estabelecimento_id)
          .first()
    )
    if not caixa:
        raise HTTPException(status_code=404, detail="Caixa não encontrado")
    return caixa


@router.post("", response_model=CaixaOut, status_code=status.HTTP_201_CREATED)
def abrir_caixa(
    body: CaixaCreate,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    # Um caixa aberto por estabelecimento
    if caixa_aberto(db, current.estabelecimento_id):
        raise HTTPException(status_code=400, detail="Já existe um caixa aberto para este estabelecimento")

    caixa = Caixa(
        estabelecimento_id=current.estabelecimento_id,
        usuario_abertura_id=current.id,
        valor_abertura=body.valor_abertura,
        observacao=body.observacao,
        aberto=True,
    )
    db.add(caixa)
    db.commit()
    db.refresh(caixa)
    return caixa


@router.get("", response_model=list[CaixaOut])
def list_caixas(
    aberto: Optional[bool] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    q = db.query(Caixa).filter(Caixa.estabelecimento_id == current.estabelecimento_id)
    if aberto is not None:
        q = q.filter(Caixa.aberto.is_(aberto))
    if date_from:
        start_utc, _ = local_dates_to_utc_window(date_from, date_from)
        q = q.filter(Caixa.data_abertura >= start_utc)
    if date_to:
        _, end_utc_excl = local_dates_to_utc_window(date_to, date_to)
        q = q.filter(Caixa.data_abertura < end_utc_excl)
    return q.order_by(Caixa.data_abertura.desc()).all()


@router.get("/aberto", response_model=CaixaOut)
def get_caixa_aberto(
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    caixa = caixa_aberto(db, current.estabelecimento_id)
    if not caixa:
        raise HTTPException(status_code=404, detail="Nenhum caixa aberto")
    return caixa


@router.get("/{caixa_id}/detalhes", response_model=CaixaDetalhesOut)
def get_caixa_detalhes(
    caixa_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    caixa = _get_caixa_escopo(caixa_id, db, current)

    por_forma = (
        db.query(Parcela.forma_pagamento, func.coalesce(func.sum(Parcela.valor), 0), func.count(Parcela.id))
          .join(Pagamento, Pagamento.id == Parcela.pagamento_id)
          .filter(Pagamento.caixa_id == caixa.id, Parcela.status == ParcelaStatus.PAGO.value)
          .group_by(Parcela.forma_pagamento)
          .all()
    )
    em_aberto = (
        db.query(func.count(Parcela.id))
          .join(Pagamento, Pagamento.id == Parcela.pagamento_id)
          .filter(Pagamento.caixa_id == caixa.id, Parcela.status != ParcelaStatus.PAGO.value)
          .scalar()
    )

    recebido = {(forma or "Desconhecido"): float(total or 0) for forma, total, _ in por_forma}
    out = CaixaDetalhesOut.model_validate(caixa)
    out.recebido_por_forma = recebido
    out.total_recebido = round(sum(recebido.values()), 2)
    out.parcelas_pagas = sum(int(n) for _, _, n in por_forma)
    out.parcelas_em_aberto = int(em_aberto or 0)
    return out


@router.put("/{caixa_id}/fechar", response_model=CaixaOut)
def fechar_caixa(
    caixa_id: int,
    body: CaixaFechar,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    caixa = _get_caixa_escopo(caixa_id, db, current)
    if not caixa.aberto:
        raise HTTPException(status_code=400, detail="Este caixa já está fechado")

    caixa.aberto = False
    caixa.valor_fechamento = body.valor_fechamento
    caixa.usuario_fechamento_id = current.id
    caixa.data_fechamento = datetime.now(timezone.utc)
    if body.observacao:
        caixa.observacao = body.observacao
    db.commit()
    db.refresh(caixa)
    return caixa
