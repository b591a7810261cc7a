# oficina/tests/test_listagem.py
from datetime import timedelta
from io import BytesIO

from openpyxl import load_workbook

from oficina.utils.time_windows import hoje_local


def _montar_cenario(client, headers, nova_ordem):
    """Uma ordem em cada estado: gerado, pendente, pago e vencido."""
    hoje = hoje_local()

    gerada = nova_ordem()
    assert client.post(f"/ordens/{gerada['id']}/faturar", headers=headers).status_code == 201

    pendente = nova_ordem()
    r = client.post(f"/ordens/{pendente['id']}/pagamentos", headers=headers, json={
        "forma_pagamento": "Credito", "parcelas": 2,
        "data_vencimento": (hoje + timedelta(days=7)).isoformat(),
    })
    assert r.status_code == 201, r.text

    paga = nova_ordem()
    r = client.post(f"/ordens/{paga['id']}/pagamentos", headers=headers,
                    json={"forma_pagamento": "Pix", "parcelas": "vista"})
    assert r.status_code == 201, r.text

    vencida = nova_ordem()
    r = client.post(f"/ordens/{vencida['id']}/pagamentos", headers=headers, json={
        "forma_pagamento": "Debito", "parcelas": 1,
        "data_vencimento": (hoje - timedelta(days=3)).isoformat(),
    })
    assert r.status_code == 201, r.text
    return gerada, pendente, paga, vencida


def _listar(client, headers, filtro=None):
    params = {"status": filtro} if filtro is not None else {}
    r = client.get("/parcelas-pagamento", params=params, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_filters_are_exclusive(client, auth_headers, nova_ordem):
    gerada, pendente, paga, vencida = _montar_cenario(client, auth_headers, nova_ordem)

    linhas = _listar(client, auth_headers, "Pagamentos")
    assert {l["status"] for l in linhas} == {"gerado"}
    assert {l["ordem_id"] for l in linhas} == {gerada["id"]}

    linhas = _listar(client, auth_headers, "Pagamentos Pendente")
    assert {l["status"] for l in linhas} == {"pendente"}
    assert len(linhas) == 2
    assert {l["ordem_id"] for l in linhas} == {pendente["id"]}

    linhas = _listar(client, auth_headers, "Pagamentos Pagos")
    assert [l["ordem_id"] for l in linhas] == [paga["id"]]

    linhas = _listar(client, auth_headers, "Pagamentos Vencido")
    assert [l["ordem_id"] for l in linhas] == [vencida["id"]]
    assert linhas[0]["status"] == "vencido"


def test_no_filter_lists_everything(client, auth_headers, nova_ordem):
    _montar_cenario(client, auth_headers, nova_ordem)
    linhas = _listar(client, auth_headers)
    assert len(linhas) == 5
    assert {l["status"] for l in linhas} == {"gerado", "pendente", "pago", "vencido"}


def test_unknown_filter_is_rejected(client, auth_headers):
    r = client.get("/parcelas-pagamento", params={"status": "Pagamentos Atrasados"}, headers=auth_headers)
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["code"] == "VALIDATION_ERROR"
    assert "Pagamentos Pendente" in detail["filtros"]


def test_overdue_can_still_be_paid(client, auth_headers, nova_ordem):
    _, _, _, vencida = _montar_cenario(client, auth_headers, nova_ordem)
    (linha,) = _listar(client, auth_headers, "Pagamentos Vencido")

    r = client.put(f"/parcelas-pagamento/{linha['id']}", json={"status": "Pendente"}, headers=auth_headers)
    assert r.status_code == 409

    r = client.put(f"/parcelas-pagamento/{linha['id']}", json={"status": "Pago"}, headers=auth_headers)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "pago"
    assert _listar(client, auth_headers, "Pagamentos Vencido") == []


def test_unpaying_past_due_shows_as_overdue_again(client, auth_headers, nova_ordem):
    ordem = nova_ordem()
    venc = (hoje_local() - timedelta(days=1)).isoformat()
    r = client.post(f"/ordens/{ordem['id']}/pagamentos", headers=auth_headers,
                    json={"forma_pagamento": "Pix", "parcelas": 1, "data_vencimento": venc})
    pid = r.json()["parcelas"][0]["id"]

    client.put(f"/parcelas-pagamento/{pid}", json={"status": "pago"}, headers=auth_headers)
    r2 = client.put(f"/parcelas-pagamento/{pid}", json={"status": "pendente"}, headers=auth_headers)
    assert r2.status_code == 200, r2.text
    assert r2.json()["status"] == "vencido"
    assert r2.json()["data_pagamento"] is None


def test_filter_by_caixa(client, auth_headers, nova_ordem):
    caixa = client.post("/caixas", json={"valor_abertura": 50}, headers=auth_headers).json()
    ordem = nova_ordem()
    client.post(f"/ordens/{ordem['id']}/pagamentos", headers=auth_headers,
                json={"forma_pagamento": "Dinheiro", "parcelas": "vista"})

    linhas = client.get("/parcelas-pagamento", params={"caixa_id": caixa["id"]},
                        headers=auth_headers).json()
    assert len(linhas) == 1
    assert linhas[0]["caixa_id"] == caixa["id"]

    outras = client.get("/parcelas-pagamento", params={"caixa_id": caixa["id"] + 1},
                        headers=auth_headers).json()
    assert outras == []


def test_export_xlsx(client, auth_headers, nova_ordem):
    _montar_cenario(client, auth_headers, nova_ordem)
    r = client.get("/parcelas-pagamento/export", params={"status": "Pagamentos Pendente"},
                   headers=auth_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    ws = load_workbook(BytesIO(r.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0][0] == "ID"
    assert len(rows) == 3
    assert {row[8] for row in rows[1:]} == {"pendente"}
    assert sum(row[5] for row in rows[1:]) == 1000.0
