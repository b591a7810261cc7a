from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Index,
)
from sqlalchemy.orm import relationship

from oficina.constants import OrdemStatus, ParcelaStatus
from oficina.database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Estabelecimento(Base):
    __tablename__ = "estabelecimentos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nome = Column(String(255), nullable=False)
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    usuarios = relationship("Usuario", back_populates="estabelecimento")
    clientes = relationship("Cliente", back_populates="estabelecimento")
    caixas = relationship("Caixa", back_populates="estabelecimento")


class Usuario(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String, index=True)
    role = Column(String, nullable=False, default="operador")
    email = Column(String, unique=True, nullable=False, index=True)
    senha = Column(String, nullable=False)  # hash bcrypt
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    estabelecimento_id = Column(Integer, ForeignKey("estabelecimentos.id"), nullable=False)
    token_version = Column(Integer, nullable=False, default=0)

    estabelecimento = relationship("Estabelecimento", back_populates="usuarios")


class Cliente(Base):
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String, nullable=False, index=True)
    whatsapp = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    cpf = Column(String(11), nullable=True)
    cnpj = Column(String(14), nullable=True)
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    estabelecimento_id = Column(Integer, ForeignKey("estabelecimentos.id"), nullable=False, index=True)

    estabelecimento = relationship("Estabelecimento", back_populates="clientes")
    ordens = relationship("OrdemServico", back_populates="cliente")


class OrdemServico(Base):
    __tablename__ = "ordens_servico"

    id = Column(Integer, primary_key=True, index=True)
    codigo = Column(String, nullable=True, index=True)
    descricao = Column(String, nullable=True)
    status = Column(String, nullable=False, default=OrdemStatus.ABERTA.value)
    desconto = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    acrescimos = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=False, index=True)
    estabelecimento_id = Column(Integer, ForeignKey("estabelecimentos.id"), nullable=False, index=True)

    cliente = relationship("Cliente", back_populates="ordens", lazy="joined")
    itens = relationship("ItemOrdem", back_populates="ordem", cascade="all, delete-orphan",
                         order_by="ItemOrdem.id")
    pagamentos = relationship("Pagamento", back_populates="ordem")

    @property
    def subtotal(self) -> Decimal:
        # Só itens ativos entram no subtotal
        return sum((i.valor_total for i in self.itens if i.ativo), Decimal("0.00"))

    @property
    def total(self) -> Decimal:
        return self.subtotal - Decimal(self.desconto or 0) + Decimal(self.acrescimos or 0)


class ItemOrdem(Base):
    __tablename__ = "itens_ordem"

    id = Column(Integer, primary_key=True, index=True)
    ordem_id = Column(Integer, ForeignKey("ordens_servico.id", ondelete="CASCADE"), nullable=False, index=True)
    descricao = Column(String, nullable=False)
    quantidade = Column(Integer, nullable=False, default=1)
    valor_unitario = Column(Numeric(12, 2), nullable=False)
    ativo = Column(Boolean, nullable=False, default=True)

    ordem = relationship("OrdemServico", back_populates="itens")

    @property
    def valor_total(self) -> Decimal:
        return Decimal(self.valor_unitario or 0) * int(self.quantidade or 0)


class Caixa(Base):
    __tablename__ = "caixas"

    id = Column(Integer, primary_key=True, index=True)
    estabelecimento_id = Column(Integer, ForeignKey("estabelecimentos.id"), nullable=False, index=True)
    usuario_abertura_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False)
    usuario_fechamento_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)

    valor_abertura = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    valor_fechamento = Column(Numeric(12, 2), nullable=True)
    aberto = Column(Boolean, nullable=False, default=True, index=True)
    data_abertura = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    data_fechamento = Column(DateTime(timezone=True), nullable=True)
    observacao = Column(String, nullable=True)

    estabelecimento = relationship("Estabelecimento", back_populates="caixas")
    pagamentos = relationship("Pagamento", back_populates="caixa")


class Pagamento(Base):
    """Cabeçalho do plano de pagamento de uma ordem."""
    __tablename__ = "pagamentos"

    id = Column(Integer, primary_key=True, index=True)
    ordem_id = Column(Integer, ForeignKey("ordens_servico.id"), nullable=False, index=True)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=False, index=True)
    caixa_id = Column(Integer, ForeignKey("caixas.id"), nullable=True, index=True)

    forma_pagamento = Column(String, nullable=True)
    total_parcelas = Column(Integer, nullable=True)  # NULL = à vista
    subtotal = Column(Numeric(12, 2), nullable=False)
    desconto = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    acrescimo = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    # Juros ficam registrados mas não entram no total
    juros = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    valor_total = Column(Numeric(12, 2), nullable=False)
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    ordem = relationship("OrdemServico", back_populates="pagamentos")
    caixa = relationship("Caixa", back_populates="pagamentos")
    parcelas = relationship("Parcela", back_populates="pagamento", cascade="all, delete-orphan",
                            order_by="Parcela.numero_parcela")


class Parcela(Base):
    __tablename__ = "parcelas_pagamento"

    id = Column(Integer, primary_key=True, index=True)
    pagamento_id = Column(Integer, ForeignKey("pagamentos.id", ondelete="CASCADE"), nullable=False, index=True)
    ordem_id = Column(Integer, ForeignKey("ordens_servico.id"), nullable=False, index=True)

    numero_parcela = Column(Integer, nullable=False, default=1)
    total_parcelas = Column(Integer, nullable=True)  # NULL = "À vista"
    valor = Column(Numeric(12, 2), nullable=False)
    forma_pagamento = Column(String, nullable=True)
    status = Column(String, nullable=False, default=ParcelaStatus.GERADO.value, index=True)
    data_vencimento = Column(Date, nullable=True, index=True)
    data_pagamento = Column(Date, nullable=True)
    juros_aplicado = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    versao = Column(Integer, nullable=False, default=1)
    atualizado_em = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    pagamento = relationship("Pagamento", back_populates="parcelas")
    ordem = relationship("OrdemServico")
    # sem cascade de delete: ao refazer o plano o histórico fica, com parcela_id NULL
    historico = relationship("ParcelaHistorico", back_populates="parcela", cascade="save-update, merge",
                             order_by="ParcelaHistorico.id")

    __table_args__ = (
        Index("ix_parcelas_status_vencimento", "status", "data_vencimento"),
    )
    # UPDATE/DELETE levam "WHERE versao = <lida>" e incrementam a versão
    __mapper_args__ = {"version_id_col": versao}


class ParcelaHistorico(Base):
    """Log de mudanças de status; linhas não são reescritas, só perdem parcela_id quando o plano é refeito."""
    __tablename__ = "parcelas_historico"

    id = Column(Integer, primary_key=True, index=True)
    parcela_id = Column(Integer, ForeignKey("parcelas_pagamento.id", ondelete="SET NULL"), nullable=True, index=True)
    ordem_id = Column(Integer, ForeignKey("ordens_servico.id"), nullable=False, index=True)
    status_anterior = Column(String, nullable=True)
    status_novo = Column(String, nullable=False)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    parcela = relationship("Parcela", back_populates="historico")


class Notificacao(Base):
    __tablename__ = "notificacoes"

    id = Column(Integer, primary_key=True, index=True)
    estabelecimento_id = Column(Integer, ForeignKey("estabelecimentos.id"), nullable=False, index=True)
    tipo = Column(String, nullable=False)
    titulo = Column(String, nullable=False)
    mensagem = Column(String, nullable=False)
    parcela_id = Column(Integer, ForeignKey("parcelas_pagamento.id", ondelete="SET NULL"), nullable=True)
    ordem_id = Column(Integer, ForeignKey("ordens_servico.id"), nullable=True)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)
    lida = Column(Boolean, nullable=False, default=False, index=True)
    criado_em = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
