# routes/ordens.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from oficina.database.db import get_db
from oficina.models.models import Cliente, ItemOrdem, OrdemServico, ParcelaHistorico, Usuario
from oficina.schemas.ordens import (
    ItemOrdemCreate, ItemOrdemOut, ItemOrdemUpdate, OrdemCreate, OrdemOut,
)
from oficina.schemas.pagamentos import (
    CalculoOut, CalculoRequest, PagamentoCreate, PagamentoOut,
)
from oficina.schemas.parcelas import ParcelaHistoricoOut
from oficina.services.calculadora import calcular_pagamento
from oficina.services.eventos import CanalEventos, get_canal
from oficina.services.pagamentos import faturar_ordem, parcela_out, registrar_pagamento
from oficina.services.sessao import Sessao, get_sessao
from oficina.utils.auth import get_current_user
from oficina.utils.time_windows import hoje_local

router = APIRouter(
    dependencies=[Depends(get_current_user)],  # 👈 exige Bearer em todas as rotas
)


# =========================
#        HELPERS
# =========================
def _404(msg: str = "Recurso não encontrado"):
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=msg)

def _get_ordem_escopo(ordem_id: int, db: Session, estabelecimento_id: int) -> OrdemServico:
    ordem = (
        db.query(OrdemServico)
          .filter(OrdemServico.id == ordem_id, OrdemServico.estabelecimento_id == estabelecimento_id)
          .first()
    )
    if not ordem:
        _404("Ordem não encontrada")
    return ordem

def _pagamento_out(pagamento, hoje) -> dict:
    return {
        "id": pagamento.id,
        "ordem_id": pagamento.ordem_id,
        "cliente_id": pagamento.cliente_id,
        "caixa_id": pagamento.caixa_id,
        "forma_pagamento": pagamento.forma_pagamento,
        "total_parcelas": pagamento.total_parcelas,
        "subtotal": pagamento.subtotal,
        "desconto": pagamento.desconto,
        "acrescimo": pagamento.acrescimo,
        "juros": pagamento.juros,
        "valor_total": pagamento.valor_total,
        "criado_em": pagamento.criado_em,
        "parcelas": [parcela_out(p, hoje) for p in pagamento.parcelas],
    }


# =========================
#        ORDENS
# =========================
@router.post("/", response_model=OrdemOut, status_code=status.HTTP_201_CREATED)
def create_ordem(
    body: OrdemCreate,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    cliente = db.query(Cliente).filter(Cliente.id == body.cliente_id).first()
    if not cliente or cliente.estabelecimento_id != current.estabelecimento_id:
        _404("Cliente não encontrado")

    ordem = OrdemServico(
        cliente_id=cliente.id,
        estabelecimento_id=current.estabelecimento_id,
        codigo=body.codigo,
        descricao=body.descricao,
        desconto=body.desconto,
        acrescimos=body.acrescimos,
    )
    for item in body.itens:
        ordem.itens.append(ItemOrdem(**item.model_dump()))
    db.add(ordem)
    db.commit()
    db.refresh(ordem)

    if not ordem.codigo:
        ordem.codigo = f"OS-{ordem.id:05d}"
        db.commit()
        db.refresh(ordem)
    return ordem


@router.get("/{ordem_id}", response_model=OrdemOut)
def get_ordem(
    ordem_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    return _get_ordem_escopo(ordem_id, db, current.estabelecimento_id)


@router.post("/{ordem_id}/itens", response_model=ItemOrdemOut, status_code=status.HTTP_201_CREATED)
def add_item(
    ordem_id: int,
    body: ItemOrdemCreate,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    ordem = _get_ordem_escopo(ordem_id, db, current.estabelecimento_id)
    item = ItemOrdem(ordem_id=ordem.id, **body.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.put("/{ordem_id}/itens/{item_id}", response_model=ItemOrdemOut)
def update_item(
    ordem_id: int,
    item_id: int,
    body: ItemOrdemUpdate,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    ordem = _get_ordem_escopo(ordem_id, db, current.estabelecimento_id)
    item = db.query(ItemOrdem).filter(ItemOrdem.id == item_id, ItemOrdem.ordem_id == ordem.id).first()
    if not item:
        _404("Item não encontrado")

    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(item, k, v)
    db.commit()
    db.refresh(item)
    return item


# =========================
#        PAGAMENTOS
# =========================
@router.post("/{ordem_id}/faturar", response_model=PagamentoOut, status_code=status.HTTP_201_CREATED)
def faturar(
    ordem_id: int,
    db: Session = Depends(get_db),
    sessao: Sessao = Depends(get_sessao),
    canal: CanalEventos = Depends(get_canal),
):
    """
    Finaliza a ordem gerando o pagamento em 'gerado' (aparece no filtro
    "Pagamentos" até alguém incluir a forma de pagamento).
    """
    ordem = _get_ordem_escopo(ordem_id, db, sessao.estabelecimento_id)
    pagamento = faturar_ordem(db, ordem, sessao, canal)
    return _pagamento_out(pagamento, hoje_local())


@router.post("/{ordem_id}/pagamentos/calcular", response_model=CalculoOut)
def calcular(
    ordem_id: int,
    body: CalculoRequest,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    """Prévia do painel de pagamento; nada é gravado."""
    ordem = _get_ordem_escopo(ordem_id, db, current.estabelecimento_id)
    return calcular_pagamento(
        subtotal=body.valor_subtotal if body.valor_subtotal is not None else ordem.subtotal,
        desconto=body.desconto,
        acrescimos=body.acrescimo,
        parcelas=body.parcelas,
        data_vencimento_primeira=body.data_vencimento,
        juros=body.juros,
    )


@router.post("/{ordem_id}/pagamentos", response_model=PagamentoOut, status_code=status.HTTP_201_CREATED)
def create_pagamento(
    ordem_id: int,
    body: PagamentoCreate,
    db: Session = Depends(get_db),
    sessao: Sessao = Depends(get_sessao),
    canal: CanalEventos = Depends(get_canal),
):
    ordem = _get_ordem_escopo(ordem_id, db, sessao.estabelecimento_id)
    hoje = hoje_local()
    pagamento = registrar_pagamento(db, ordem, body, sessao, canal, hoje)
    return _pagamento_out(pagamento, hoje)


@router.get("/{ordem_id}/pagamentos", response_model=list[PagamentoOut])
def list_pagamentos(
    ordem_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    ordem = _get_ordem_escopo(ordem_id, db, current.estabelecimento_id)
    hoje = hoje_local()
    return [_pagamento_out(pg, hoje) for pg in ordem.pagamentos]


@router.get("/{ordem_id}/historico", response_model=list[ParcelaHistoricoOut])
def list_historico(
    ordem_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    """Histórico de status de todas as parcelas da ordem, inclusive de planos refeitos."""
    ordem = _get_ordem_escopo(ordem_id, db, current.estabelecimento_id)
    return (
        db.query(ParcelaHistorico)
          .filter(ParcelaHistorico.ordem_id == ordem.id)
          .order_by(ParcelaHistorico.id)
          .all()
    )
