# oficina/services/pagamentos.py
"""
Registro de pagamentos de ordens e troca de status das parcelas.

As funções recebem a sessão do balcão (`Sessao`) e o canal de eventos de
forma explícita; não leem estado global.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from oficina.constants import OrdemStatus, ParcelaStatus
from oficina.jobs.overdue import marcar_parcelas_vencidas
from oficina.models.models import (
    Caixa, OrdemServico, Pagamento, Parcela, ParcelaHistorico,
)
from oficina.services.calculadora import calcular_pagamento, calcular_total, D
from oficina.services.errors import NotFoundError, StateConflictError, ValidationError
from oficina.services.eventos import PARCELA_ATUALIZADA, PARCELA_CRIADA, CanalEventos
from oficina.services.filtros import aplicar_filtro, status_do_filtro
from oficina.services.sessao import Sessao
from oficina.services.status import alternar_status, finalizar_plano, status_observado
from oficina.utils.normalize import norm_forma_pagamento

logger = logging.getLogger(__name__)


# =========================
#        HELPERS
# =========================
def get_parcela_escopo(db: Session, parcela_id: int, estabelecimento_id: int) -> Parcela:
    """Parcela do estabelecimento; se não existir (ou for de outro), NotFoundError."""
    parcela = (
        db.query(Parcela)
          .join(OrdemServico, OrdemServico.id == Parcela.ordem_id)
          .filter(Parcela.id == parcela_id, OrdemServico.estabelecimento_id == estabelecimento_id)
          .first()
    )
    if not parcela:
        raise NotFoundError("Parcela não encontrada", parcela_id=parcela_id)
    return parcela


def _resolver_caixa(db: Session, caixa_id: Optional[int], sessao: Sessao) -> Optional[int]:
    if caixa_id is None:
        return sessao.caixa_id
    caixa = (
        db.query(Caixa)
          .filter(Caixa.id == caixa_id, Caixa.estabelecimento_id == sessao.estabelecimento_id)
          .first()
    )
    if not caixa:
        raise NotFoundError("Caixa não encontrado", caixa_id=caixa_id)
    return caixa.id


def _registrar_historico(db: Session, parcela: Parcela, anterior: Optional[str], usuario_id: Optional[int]):
    db.add(ParcelaHistorico(
        parcela=parcela,
        ordem_id=parcela.ordem_id,
        status_anterior=anterior,
        status_novo=parcela.status,
        usuario_id=usuario_id,
    ))


def descricao_parcela(parcela: Parcela) -> str:
    if not parcela.total_parcelas:
        return "À vista"
    return f"{parcela.numero_parcela}/{parcela.total_parcelas}"


def parcela_out(parcela: Parcela, hoje: date) -> dict:
    """Linha da listagem, com o status já observado em `hoje`."""
    pagamento = parcela.pagamento
    ordem = parcela.ordem
    return {
        "id": parcela.id,
        "pagamento_id": parcela.pagamento_id,
        "ordem_id": parcela.ordem_id,
        "ordem_codigo": ordem.codigo if ordem else None,
        "cliente_nome": ordem.cliente.nome if ordem and ordem.cliente else None,
        "caixa_id": pagamento.caixa_id if pagamento else None,
        "numero_parcela": parcela.numero_parcela,
        "total_parcelas": parcela.total_parcelas,
        "descricao": descricao_parcela(parcela),
        "valor": parcela.valor,
        "forma_pagamento": parcela.forma_pagamento,
        "status": status_observado(parcela, hoje).value,
        "data_vencimento": parcela.data_vencimento,
        "data_pagamento": parcela.data_pagamento,
        "juros_aplicado": parcela.juros_aplicado,
        "versao": parcela.versao,
    }


# =========================
#        FATURAR
# =========================
def faturar_ordem(db: Session, ordem: OrdemServico, sessao: Sessao, canal: CanalEventos) -> Pagamento:
    """
    Fatura a ordem: cria um plano 'gerado' com uma única parcela no valor
    total, ainda sem forma de pagamento nem vencimento.
    """
    if ordem.pagamentos:
        raise StateConflictError("Pagamento já existe para esta ordem", ordem_id=ordem.id)

    total = calcular_total(ordem.subtotal, ordem.desconto, ordem.acrescimos)

    pagamento = Pagamento(
        ordem_id=ordem.id,
        cliente_id=ordem.cliente_id,
        caixa_id=sessao.caixa_id,
        forma_pagamento=None,
        total_parcelas=None,
        subtotal=ordem.subtotal,
        desconto=D(ordem.desconto),
        acrescimo=D(ordem.acrescimos),
        valor_total=total,
    )
    parcela = Parcela(
        ordem_id=ordem.id,
        numero_parcela=1,
        total_parcelas=None,
        valor=total,
        status=ParcelaStatus.GERADO.value,
    )
    pagamento.parcelas.append(parcela)
    ordem.status = OrdemStatus.FINALIZADA.value

    db.add(pagamento)
    _registrar_historico(db, parcela, None, sessao.usuario_id)
    db.commit()
    db.refresh(pagamento)

    logger.info("Ordem %s faturada: total=%s caixa=%s", ordem.id, total, sessao.caixa_id)
    canal.publish(PARCELA_CRIADA, db=db, parcela=parcela, anterior=None,
                  novo=parcela.status, usuario_id=sessao.usuario_id)
    return pagamento


# =========================
#        REGISTRAR
# =========================
def registrar_pagamento(
    db: Session,
    ordem: OrdemServico,
    dados,
    sessao: Sessao,
    canal: CanalEventos,
    hoje: date,
) -> Pagamento:
    """
    Registra (ou refaz) o plano de pagamento da ordem.

    - valida tudo antes de gravar
    - recusa se alguma parcela da ordem já estiver paga
    - apaga o plano não pago anterior e cria as novas parcelas
    - à vista: parcela única já 'pago'; parcelado: N parcelas 'pendente'
    """
    forma = norm_forma_pagamento(dados.forma_pagamento)
    if forma is None:
        raise ValidationError(f"Forma de pagamento inválida: {dados.forma_pagamento!r}")

    subtotal = dados.valor_subtotal if dados.valor_subtotal is not None else ordem.subtotal
    plano = calcular_pagamento(
        subtotal=subtotal,
        desconto=dados.desconto,
        acrescimos=dados.acrescimo,
        parcelas=dados.parcelas,
        data_vencimento_primeira=dados.data_vencimento,
        juros=dados.juros,
    )

    anteriores = list(ordem.pagamentos)
    pagas = [p for pg in anteriores for p in pg.parcelas if p.status == ParcelaStatus.PAGO.value]
    if pagas:
        raise StateConflictError(
            "Ordem já possui parcelas pagas; desmarque-as antes de refazer o plano",
            parcelas_pagas=[p.id for p in pagas],
        )

    caixa_id = _resolver_caixa(db, dados.caixa_id, sessao)

    for pg in anteriores:
        db.delete(pg)
    db.flush()

    pagamento = Pagamento(
        ordem_id=ordem.id,
        cliente_id=ordem.cliente_id,
        caixa_id=caixa_id,
        forma_pagamento=forma.value,
        total_parcelas=None if plano.a_vista else len(plano.parcelas),
        subtotal=plano.subtotal,
        desconto=plano.desconto,
        acrescimo=plano.acrescimos,
        juros=plano.juros,
        valor_total=plano.total,
    )
    criadas = []
    for planejada in plano.parcelas:
        parcela = Parcela(
            ordem_id=ordem.id,
            numero_parcela=planejada.numero_parcela,
            total_parcelas=planejada.total_parcelas,
            valor=planejada.valor,
            forma_pagamento=forma.value,
            data_vencimento=planejada.data_vencimento,
            status=ParcelaStatus.GERADO.value,
        )
        anterior, _ = finalizar_plano(parcela, hoje, a_vista=plano.a_vista)
        pagamento.parcelas.append(parcela)
        _registrar_historico(db, parcela, anterior.value, sessao.usuario_id)
        criadas.append(parcela)

    ordem.desconto = plano.desconto
    ordem.acrescimos = plano.acrescimos
    ordem.status = OrdemStatus.FINALIZADA.value

    db.add(pagamento)
    db.commit()
    db.refresh(pagamento)

    logger.info(
        "Pagamento registrado: ordem=%s forma=%s parcelas=%s total=%s caixa=%s",
        ordem.id, forma.value, len(criadas), plano.total, caixa_id,
    )
    for parcela in criadas:
        canal.publish(PARCELA_CRIADA, db=db, parcela=parcela, anterior=ParcelaStatus.GERADO.value,
                      novo=parcela.status, usuario_id=sessao.usuario_id)
    return pagamento


# =========================
#        STATUS
# =========================
def atualizar_status(
    db: Session,
    parcela_id: int,
    dados,
    sessao: Sessao,
    canal: CanalEventos,
    hoje: date,
) -> Parcela:
    """
    Marca/desmarca a parcela como paga.
    `dados.versao`, se informado, precisa bater com a versão atual da linha.
    """
    parcela = get_parcela_escopo(db, parcela_id, sessao.estabelecimento_id)

    if dados.versao is not None and dados.versao != parcela.versao:
        raise StateConflictError(
            "Parcela foi alterada por outro terminal; recarregue a lista",
            versao_atual=parcela.versao,
        )

    status_gravado = parcela.status
    anterior, novo = alternar_status(parcela, dados.status, hoje, dados.data_pagamento)
    if parcela.status == status_gravado:
        return parcela

    usuario_id = dados.usuario_id or sessao.usuario_id
    versao_lida = parcela.versao
    _registrar_historico(db, parcela, anterior.value, usuario_id)
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning("Parcela %s: versão %s desatualizada na gravação", parcela_id, versao_lida)
        versao_atual = db.query(Parcela.versao).filter(Parcela.id == parcela_id).scalar()
        if versao_atual is None:
            raise NotFoundError("Parcela não encontrada", parcela_id=parcela_id)
        raise StateConflictError(
            "Parcela foi alterada por outro terminal; recarregue a lista",
            versao_atual=versao_atual,
        )
    db.refresh(parcela)

    logger.info("Parcela %s: %s -> %s (usuario=%s)", parcela.id, anterior.value, novo.value, usuario_id)
    canal.publish(PARCELA_ATUALIZADA, db=db, parcela=parcela, anterior=anterior.value,
                  novo=parcela.status, usuario_id=usuario_id)
    return parcela


# =========================
#        LISTAR
# =========================
def query_parcelas(db: Session, estabelecimento_id: int, status: Optional[str] = None,
                   caixa_id: Optional[int] = None):
    q = (
        db.query(Parcela)
          .join(Pagamento, Pagamento.id == Parcela.pagamento_id)
          .join(OrdemServico, OrdemServico.id == Parcela.ordem_id)
          .filter(OrdemServico.estabelecimento_id == estabelecimento_id)
    )
    q = aplicar_filtro(q, status, caixa_id)
    return q.order_by(Pagamento.criado_em.desc(), Parcela.ordem_id.desc(), Parcela.numero_parcela.asc())


def listar_parcelas(
    db: Session,
    estabelecimento_id: int,
    status: Optional[str],
    caixa_id: Optional[int],
    hoje: date,
) -> list[Parcela]:
    # valida o nome do filtro antes de tocar no banco
    status_do_filtro(status)
    # pendentes vencidas viram 'vencido' antes de filtrar
    marcar_parcelas_vencidas(db, hoje)
    return query_parcelas(db, estabelecimento_id, status, caixa_id).all()
