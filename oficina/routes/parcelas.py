# routes/parcelas.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from oficina.constants import ParcelaStatus
from oficina.database.db import get_db
from oficina.models.models import Estabelecimento, Usuario
from oficina.schemas.parcelas import ParcelaHistoricoOut, ParcelaOut, ParcelaStatusUpdate
from oficina.services.eventos import CanalEventos, get_canal
from oficina.services.exportacao import build_parcelas_xlsx
from oficina.services.pagamentos import (
    atualizar_status, descricao_parcela, get_parcela_escopo, listar_parcelas, parcela_out,
)
from oficina.services.recibo import ReciboData, build_recibo_pdf
from oficina.services.sessao import Sessao, get_sessao
from oficina.services.status import status_observado
from oficina.utils.auth import get_current_user
from oficina.utils.time_windows import hoje_local

router = APIRouter(
    dependencies=[Depends(get_current_user)],  # 👈 exige Bearer em todas as rotas
)


# =========================
#        LIST
# =========================
@router.get("", response_model=list[ParcelaOut])
def get_parcelas(
    status_filtro: Optional[str] = Query(None, alias="status",
                                         description='"Pagamentos" | "Pagamentos Pendente" | "Pagamentos Pagos" | "Pagamentos Vencido"'),
    caixa_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    hoje = hoje_local()
    parcelas = listar_parcelas(db, current.estabelecimento_id, status_filtro, caixa_id, hoje)
    return [parcela_out(p, hoje) for p in parcelas]


@router.get("/export")
def export_parcelas(
    status_filtro: Optional[str] = Query(None, alias="status"),
    caixa_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    hoje = hoje_local()
    parcelas = listar_parcelas(db, current.estabelecimento_id, status_filtro, caixa_id, hoje)
    content = build_parcelas_xlsx(parcela_out(p, hoje) for p in parcelas)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="parcelas-{hoje.isoformat()}.xlsx"'},
    )


# =========================
#        STATUS
# =========================
@router.put("/{parcela_id}", response_model=ParcelaOut)
def update_parcela(
    parcela_id: int,
    body: ParcelaStatusUpdate,
    db: Session = Depends(get_db),
    sessao: Sessao = Depends(get_sessao),
    canal: CanalEventos = Depends(get_canal),
):
    """
    Marca/desmarca como paga. 404 significa lista local desatualizada:
    o cliente deve recarregar sem mostrar erro.
    """
    hoje = hoje_local()
    parcela = atualizar_status(db, parcela_id, body, sessao, canal, hoje)
    return parcela_out(parcela, hoje)


@router.get("/{parcela_id}/historico", response_model=list[ParcelaHistoricoOut])
def get_historico(
    parcela_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    parcela = get_parcela_escopo(db, parcela_id, current.estabelecimento_id)
    return parcela.historico


# =========================
#        RECIBO
# =========================
@router.get("/{parcela_id}/recibo")
def get_recibo(
    parcela_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    parcela = get_parcela_escopo(db, parcela_id, current.estabelecimento_id)
    if status_observado(parcela, hoje_local()) != ParcelaStatus.PAGO:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Apenas parcelas com status "pago" podem gerar recibo',
        )

    ordem = parcela.ordem
    cliente = ordem.cliente
    estabelecimento = db.query(Estabelecimento).get(ordem.estabelecimento_id)
    pdf = build_recibo_pdf(ReciboData(
        estabelecimento_nome=estabelecimento.nome if estabelecimento else "",
        cliente_nome=cliente.nome,
        cliente_cpf=cliente.cpf,
        cliente_cnpj=cliente.cnpj,
        ordem_id=ordem.id,
        ordem_codigo=ordem.codigo,
        forma_pagamento=parcela.forma_pagamento,
        parcela_descricao=descricao_parcela(parcela),
        valor=float(parcela.valor),
        data_pagamento=parcela.data_pagamento,
    ))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="recibo-{parcela.id}.pdf"'},
    )
