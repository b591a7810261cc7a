# oficina/tests/test_caixas.py
from datetime import timedelta

from oficina.utils.time_windows import hoje_local


def test_open_and_close_caixa(client, auth_headers):
    r = client.post("/caixas", json={"valor_abertura": 100, "observacao": "turno manhã"}, headers=auth_headers)
    assert r.status_code == 201, r.text
    caixa = r.json()
    assert caixa["aberto"] is True
    assert caixa["valor_abertura"] == 100.0

    dup = client.post("/caixas", json={"valor_abertura": 0}, headers=auth_headers)
    assert dup.status_code == 400

    aberto = client.get("/caixas/aberto", headers=auth_headers)
    assert aberto.status_code == 200
    assert aberto.json()["id"] == caixa["id"]

    fechado = client.put(f"/caixas/{caixa['id']}/fechar", json={"valor_fechamento": 350}, headers=auth_headers)
    assert fechado.status_code == 200, fechado.text
    assert fechado.json()["aberto"] is False
    assert fechado.json()["valor_fechamento"] == 350.0
    assert fechado.json()["data_fechamento"] is not None

    again = client.put(f"/caixas/{caixa['id']}/fechar", json={"valor_fechamento": 350}, headers=auth_headers)
    assert again.status_code == 400

    assert client.get("/caixas/aberto", headers=auth_headers).status_code == 404


def test_list_caixas_filters(client, auth_headers):
    c1 = client.post("/caixas", json={}, headers=auth_headers).json()
    client.put(f"/caixas/{c1['id']}/fechar", json={"valor_fechamento": 0}, headers=auth_headers)
    c2 = client.post("/caixas", json={}, headers=auth_headers).json()

    todos = client.get("/caixas", headers=auth_headers).json()
    assert {c["id"] for c in todos} == {c1["id"], c2["id"]}

    abertos = client.get("/caixas", params={"aberto": True}, headers=auth_headers).json()
    assert [c["id"] for c in abertos] == [c2["id"]]

    hoje = hoje_local()
    hoje_only = client.get("/caixas", params={"date_from": hoje.isoformat(), "date_to": hoje.isoformat()},
                           headers=auth_headers).json()
    assert len(hoje_only) == 2

    ontem = (hoje - timedelta(days=1)).isoformat()
    vazio = client.get("/caixas", params={"date_from": ontem, "date_to": ontem}, headers=auth_headers).json()
    assert vazio == []


def test_caixa_details_group_by_forma(client, auth_headers, nova_ordem):
    caixa = client.post("/caixas", json={"valor_abertura": 0}, headers=auth_headers).json()

    o1 = nova_ordem()
    client.post(f"/ordens/{o1['id']}/pagamentos", headers=auth_headers,
                json={"forma_pagamento": "Dinheiro", "parcelas": "vista", "desconto": 50})
    o2 = nova_ordem()
    r = client.post(f"/ordens/{o2['id']}/pagamentos", headers=auth_headers, json={
        "forma_pagamento": "Credito", "parcelas": 4,
        "data_vencimento": (hoje_local() + timedelta(days=30)).isoformat(),
    })
    primeira = r.json()["parcelas"][0]
    client.put(f"/parcelas-pagamento/{primeira['id']}", json={"status": "pago"}, headers=auth_headers)

    r = client.get(f"/caixas/{caixa['id']}/detalhes", headers=auth_headers)
    assert r.status_code == 200, r.text
    det = r.json()
    assert det["recebido_por_forma"] == {"Dinheiro": 950.0, "Credito": 250.0}
    assert det["total_recebido"] == 1200.0
    assert det["parcelas_pagas"] == 2
    assert det["parcelas_em_aberto"] == 3


def test_payment_with_foreign_caixa_is_not_found(client, auth_headers, nova_ordem):
    ordem = nova_ordem()
    r = client.post(f"/ordens/{ordem['id']}/pagamentos", headers=auth_headers,
                    json={"forma_pagamento": "Pix", "parcelas": "vista", "caixa_id": 999})
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "NOT_FOUND"


def test_unknown_caixa_details(client, auth_headers):
    r = client.get("/caixas/999/detalhes", headers=auth_headers)
    assert r.status_code == 404
