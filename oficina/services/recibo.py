# oficina/services/recibo.py
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from oficina.services.notificacoes import formatar_reais


@dataclass
class ReciboData:
    estabelecimento_nome: str
    cliente_nome: str
    cliente_cpf: Optional[str]
    cliente_cnpj: Optional[str]
    ordem_id: int
    ordem_codigo: Optional[str]
    forma_pagamento: Optional[str]
    parcela_descricao: str   # "À vista" | "2/3"
    valor: float
    data_pagamento: date


def _fmt_cpf(cpf: str) -> str:
    if len(cpf) != 11:
        return cpf
    return f"{cpf[:3]}.{cpf[3:6]}.{cpf[6:9]}-{cpf[9:]}"


def _fmt_cnpj(cnpj: str) -> str:
    if len(cnpj) != 14:
        return cnpj
    return f"{cnpj[:2]}.{cnpj[2:5]}.{cnpj[5:8]}/{cnpj[8:12]}-{cnpj[12:]}"


def build_recibo_pdf(d: ReciboData) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    W, H = A4

    mx = 20 * mm
    cur = H - 25 * mm

    # Título
    c.setFont("Helvetica-Bold", 20)
    c.drawCentredString(W / 2, cur, "RECIBO")
    cur -= 8 * mm
    c.setFont("Helvetica", 9)
    c.setFillColor(colors.grey)
    c.drawCentredString(W / 2, cur, d.estabelecimento_nome)
    c.setFillColor(colors.black)
    cur -= 6 * mm

    c.setLineWidth(0.8)
    c.line(mx, cur, W - mx, cur)
    cur -= 10 * mm

    c.setFont("Helvetica", 11)
    c.drawRightString(W - mx, cur, f"Data: {d.data_pagamento.strftime('%d/%m/%Y')}")
    cur -= 12 * mm

    valor = formatar_reais(d.valor)
    referencia = d.ordem_codigo or f"Ordem de Serviço #{d.ordem_id}"

    linhas = [f"Recebi de {d.cliente_nome}"]
    if d.cliente_cpf:
        linhas.append(f"CPF: {_fmt_cpf(d.cliente_cpf)}")
    elif d.cliente_cnpj:
        linhas.append(f"CNPJ: {_fmt_cnpj(d.cliente_cnpj)}")
    linhas += [
        f"a quantia de {valor}",
        f"referente ao pagamento da {referencia} (parcela {d.parcela_descricao})",
        f"Forma de pagamento: {d.forma_pagamento or '-'}",
    ]
    for linha in linhas:
        c.drawString(mx, cur, linha)
        cur -= 7 * mm

    cur -= 4 * mm
    c.setFont("Helvetica-Bold", 12)
    c.drawString(mx, cur, f"Valor: {valor}")
    cur -= 20 * mm

    # Assinatura
    c.setFont("Helvetica", 10)
    c.line(W / 2 - 40 * mm, cur, W / 2 + 40 * mm, cur)
    cur -= 5 * mm
    c.drawCentredString(W / 2, cur, "Assinatura")

    c.showPage()
    c.save()
    return buf.getvalue()
