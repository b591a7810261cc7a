# oficina/tests/test_overdue.py
from datetime import date, timedelta
from decimal import Decimal

from oficina.jobs.overdue import marcar_parcelas_vencidas
from oficina.models.models import Cliente, OrdemServico, Pagamento, Parcela


def _plano(db, estabelecimento, vencimentos_status):
    cliente = Cliente(nome="Maria", estabelecimento_id=estabelecimento.id)
    db.add(cliente)
    db.flush()
    ordem = OrdemServico(cliente_id=cliente.id, estabelecimento_id=estabelecimento.id, codigo="OS-1")
    db.add(ordem)
    db.flush()
    pagamento = Pagamento(ordem_id=ordem.id, cliente_id=cliente.id, forma_pagamento="Pix",
                          total_parcelas=len(vencimentos_status), subtotal=Decimal("300"),
                          valor_total=Decimal("300"))
    for i, (venc, status) in enumerate(vencimentos_status, start=1):
        pagamento.parcelas.append(Parcela(
            ordem_id=ordem.id, numero_parcela=i, total_parcelas=len(vencimentos_status),
            valor=Decimal("100"), forma_pagamento="Pix", status=status, data_vencimento=venc,
        ))
    db.add(pagamento)
    db.commit()
    return pagamento


def test_only_past_due_pending_rows_are_marked(db, seeded_admin):
    estabelecimento, _ = seeded_admin
    hoje = date(2025, 3, 10)
    _plano(db, estabelecimento, [
        (date(2025, 3, 9), "pendente"),
        (date(2025, 3, 10), "pendente"),   # vence hoje: ainda não
        (date(2025, 3, 1), "pago"),
        (date(2025, 2, 1), "gerado"),
    ])

    assert marcar_parcelas_vencidas(db, hoje) == 1

    rows = db.query(Parcela).order_by(Parcela.numero_parcela).all()
    assert [p.status for p in rows] == ["vencido", "pendente", "pago", "gerado"]
    assert rows[0].versao == 2
    assert rows[1].versao == 1


def test_is_idempotent(db, seeded_admin):
    estabelecimento, _ = seeded_admin
    hoje = date(2025, 3, 10)
    _plano(db, estabelecimento, [(hoje - timedelta(days=5), "pendente")])

    assert marcar_parcelas_vencidas(db, hoje) == 1
    assert marcar_parcelas_vencidas(db, hoje) == 0


def test_task_endpoint_requires_auth(client):
    r = client.post("/tasks/marcar-vencidas")
    assert r.status_code == 401


def test_task_endpoint(client, auth_headers, db, seeded_admin):
    estabelecimento, _ = seeded_admin
    _plano(db, estabelecimento, [(date(2000, 1, 1), "pendente")])

    r = client.post("/tasks/marcar-vencidas", headers=auth_headers)
    assert r.status_code == 200, r.text
    assert r.json()["updated"] == 1
    assert "ran_at" in r.json()
