"""tabelas iniciais: ordens, pagamentos, parcelas e caixa

Revision ID: 3b7e1f2a9c10
Revises:
Create Date: 2026-10-19 10:12:31.480215

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7e1f2a9c10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "estabelecimentos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("senha", sa.String(), nullable=False),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
        sa.Column("estabelecimento_id", sa.Integer(), sa.ForeignKey("estabelecimentos.id"), nullable=False),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_usuarios_id", "usuarios", ["id"])
    op.create_index("ix_usuarios_nome", "usuarios", ["nome"])
    op.create_index("ix_usuarios_email", "usuarios", ["email"], unique=True)

    op.create_table(
        "clientes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(), nullable=False),
        sa.Column("whatsapp", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("cpf", sa.String(length=11), nullable=True),
        sa.Column("cnpj", sa.String(length=14), nullable=True),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
        sa.Column("estabelecimento_id", sa.Integer(), sa.ForeignKey("estabelecimentos.id"), nullable=False),
    )
    op.create_index("ix_clientes_id", "clientes", ["id"])
    op.create_index("ix_clientes_nome", "clientes", ["nome"])
    op.create_index("ix_clientes_email", "clientes", ["email"])
    op.create_index("ix_clientes_estabelecimento_id", "clientes", ["estabelecimento_id"])

    op.create_table(
        "ordens_servico",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("codigo", sa.String(), nullable=True),
        sa.Column("descricao", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="aberta"),
        sa.Column("desconto", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("acrescimos", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cliente_id", sa.Integer(), sa.ForeignKey("clientes.id"), nullable=False),
        sa.Column("estabelecimento_id", sa.Integer(), sa.ForeignKey("estabelecimentos.id"), nullable=False),
    )
    op.create_index("ix_ordens_servico_id", "ordens_servico", ["id"])
    op.create_index("ix_ordens_servico_codigo", "ordens_servico", ["codigo"])
    op.create_index("ix_ordens_servico_criado_em", "ordens_servico", ["criado_em"])
    op.create_index("ix_ordens_servico_cliente_id", "ordens_servico", ["cliente_id"])
    op.create_index("ix_ordens_servico_estabelecimento_id", "ordens_servico", ["estabelecimento_id"])

    op.create_table(
        "itens_ordem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ordem_id", sa.Integer(), sa.ForeignKey("ordens_servico.id", ondelete="CASCADE"), nullable=False),
        sa.Column("descricao", sa.String(), nullable=False),
        sa.Column("quantidade", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("valor_unitario", sa.Numeric(12, 2), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_itens_ordem_id", "itens_ordem", ["id"])
    op.create_index("ix_itens_ordem_ordem_id", "itens_ordem", ["ordem_id"])

    op.create_table(
        "caixas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("estabelecimento_id", sa.Integer(), sa.ForeignKey("estabelecimentos.id"), nullable=False),
        sa.Column("usuario_abertura_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=False),
        sa.Column("usuario_fechamento_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=True),
        sa.Column("valor_abertura", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("valor_fechamento", sa.Numeric(12, 2), nullable=True),
        sa.Column("aberto", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("data_abertura", sa.DateTime(timezone=True), nullable=False),
        sa.Column("data_fechamento", sa.DateTime(timezone=True), nullable=True),
        sa.Column("observacao", sa.String(), nullable=True),
    )
    op.create_index("ix_caixas_id", "caixas", ["id"])
    op.create_index("ix_caixas_estabelecimento_id", "caixas", ["estabelecimento_id"])
    op.create_index("ix_caixas_aberto", "caixas", ["aberto"])

    op.create_table(
        "pagamentos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ordem_id", sa.Integer(), sa.ForeignKey("ordens_servico.id"), nullable=False),
        sa.Column("cliente_id", sa.Integer(), sa.ForeignKey("clientes.id"), nullable=False),
        sa.Column("caixa_id", sa.Integer(), sa.ForeignKey("caixas.id"), nullable=True),
        sa.Column("forma_pagamento", sa.String(), nullable=True),
        sa.Column("total_parcelas", sa.Integer(), nullable=True),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("desconto", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("acrescimo", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("juros", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("valor_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_pagamentos_id", "pagamentos", ["id"])
    op.create_index("ix_pagamentos_ordem_id", "pagamentos", ["ordem_id"])
    op.create_index("ix_pagamentos_cliente_id", "pagamentos", ["cliente_id"])
    op.create_index("ix_pagamentos_caixa_id", "pagamentos", ["caixa_id"])

    op.create_table(
        "parcelas_pagamento",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("pagamento_id", sa.Integer(), sa.ForeignKey("pagamentos.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ordem_id", sa.Integer(), sa.ForeignKey("ordens_servico.id"), nullable=False),
        sa.Column("numero_parcela", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_parcelas", sa.Integer(), nullable=True),
        sa.Column("valor", sa.Numeric(12, 2), nullable=False),
        sa.Column("forma_pagamento", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="gerado"),
        sa.Column("data_vencimento", sa.Date(), nullable=True),
        sa.Column("data_pagamento", sa.Date(), nullable=True),
        sa.Column("juros_aplicado", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("versao", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("atualizado_em", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_parcelas_pagamento_id", "parcelas_pagamento", ["id"])
    op.create_index("ix_parcelas_pagamento_pagamento_id", "parcelas_pagamento", ["pagamento_id"])
    op.create_index("ix_parcelas_pagamento_ordem_id", "parcelas_pagamento", ["ordem_id"])
    op.create_index("ix_parcelas_pagamento_status", "parcelas_pagamento", ["status"])
    op.create_index("ix_parcelas_pagamento_data_vencimento", "parcelas_pagamento", ["data_vencimento"])
    op.create_index("ix_parcelas_status_vencimento", "parcelas_pagamento", ["status", "data_vencimento"])

    op.create_table(
        "parcelas_historico",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("parcela_id", sa.Integer(),
                  sa.ForeignKey("parcelas_pagamento.id", ondelete="SET NULL"), nullable=True),
        sa.Column("ordem_id", sa.Integer(), sa.ForeignKey("ordens_servico.id"), nullable=False),
        sa.Column("status_anterior", sa.String(), nullable=True),
        sa.Column("status_novo", sa.String(), nullable=False),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=True),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_parcelas_historico_id", "parcelas_historico", ["id"])
    op.create_index("ix_parcelas_historico_parcela_id", "parcelas_historico", ["parcela_id"])
    op.create_index("ix_parcelas_historico_ordem_id", "parcelas_historico", ["ordem_id"])

    op.create_table(
        "notificacoes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("estabelecimento_id", sa.Integer(), sa.ForeignKey("estabelecimentos.id"), nullable=False),
        sa.Column("tipo", sa.String(), nullable=False),
        sa.Column("titulo", sa.String(), nullable=False),
        sa.Column("mensagem", sa.String(), nullable=False),
        sa.Column("parcela_id", sa.Integer(),
                  sa.ForeignKey("parcelas_pagamento.id", ondelete="SET NULL"), nullable=True),
        sa.Column("ordem_id", sa.Integer(), sa.ForeignKey("ordens_servico.id"), nullable=True),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=True),
        sa.Column("lida", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("criado_em", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_notificacoes_id", "notificacoes", ["id"])
    op.create_index("ix_notificacoes_estabelecimento_id", "notificacoes", ["estabelecimento_id"])
    op.create_index("ix_notificacoes_lida", "notificacoes", ["lida"])
    op.create_index("ix_notificacoes_criado_em", "notificacoes", ["criado_em"])


def downgrade():
    op.drop_table("notificacoes")
    op.drop_table("parcelas_historico")
    op.drop_table("parcelas_pagamento")
    op.drop_table("pagamentos")
    op.drop_table("caixas")
    op.drop_table("itens_ordem")
    op.drop_table("ordens_servico")
    op.drop_table("clientes")
    op.drop_table("usuarios")
    op.drop_table("estabelecimentos")
