# oficina/services/notificacoes.py
import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from oficina.constants import NOTIFICACAO_PAGAMENTO_REALIZADO, ParcelaStatus
from oficina.models.models import Notificacao, Parcela, Usuario
from oficina.services.eventos import PARCELA_ATUALIZADA, PARCELA_CRIADA, CanalEventos

logger = logging.getLogger(__name__)


def formatar_reais(valor) -> str:
    """1234.5 → 'R$ 1.234,50'"""
    q = Decimal(str(valor or 0)).quantize(Decimal("0.01"))
    inteiro, centavos = f"{q:,.2f}".split(".")
    return f"R$ {inteiro.replace(',', '.')},{centavos}"


def criar_notificacao_pagamento(db: Session, parcela: Parcela, usuario_id: int | None) -> Notificacao:
    usuario_nome = "Sistema"
    if usuario_id:
        usuario = db.query(Usuario).get(usuario_id)
        if usuario and usuario.nome:
            usuario_nome = usuario.nome

    ordem = parcela.ordem
    cliente_nome = ordem.cliente.nome if ordem and ordem.cliente else "Cliente"
    mensagem = (
        f"{usuario_nome} registrou o pagamento de {cliente_nome}: "
        f"{formatar_reais(parcela.valor)} ({parcela.forma_pagamento or 'Desconhecido'})"
    )
    if parcela.total_parcelas:
        mensagem += f" - parcela {parcela.numero_parcela}/{parcela.total_parcelas}"

    notif = Notificacao(
        estabelecimento_id=ordem.estabelecimento_id,
        tipo=NOTIFICACAO_PAGAMENTO_REALIZADO,
        titulo="Pagamento realizado",
        mensagem=mensagem,
        parcela_id=parcela.id,
        ordem_id=parcela.ordem_id,
        usuario_id=usuario_id,
    )
    db.add(notif)
    return notif


def _ao_mudar_parcela(db: Session, parcela: Parcela, anterior: str | None, novo: str,
                      usuario_id: int | None = None, **_):
    # Só notifica a entrada em 'pago'
    if novo != ParcelaStatus.PAGO.value or anterior == ParcelaStatus.PAGO.value:
        return
    try:
        criar_notificacao_pagamento(db, parcela, usuario_id)
        db.commit()
    except Exception:
        db.rollback()
        raise


def registrar_assinantes(c: CanalEventos) -> None:
    c.subscribe(PARCELA_CRIADA, _ao_mudar_parcela)
    c.subscribe(PARCELA_ATUALIZADA, _ao_mudar_parcela)
