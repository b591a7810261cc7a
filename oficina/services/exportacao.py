# oficina/services/exportacao.py
from io import BytesIO
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font

COLUNAS = [
    ("ID", "id"),
    ("Ordem", "ordem_codigo"),
    ("Cliente", "cliente_nome"),
    ("Parcela", "descricao"),
    ("Forma", "forma_pagamento"),
    ("Valor", "valor"),
    ("Vencimento", "data_vencimento"),
    ("Pagamento", "data_pagamento"),
    ("Status", "status"),
]


def build_parcelas_xlsx(linhas: Iterable[dict]) -> bytes:
    """Planilha da listagem de parcelas (uma linha por parcela)."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Parcelas"

    ws.append([titulo for titulo, _ in COLUNAS])
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for linha in linhas:
        row = []
        for _, chave in COLUNAS:
            v = linha.get(chave)
            if chave == "valor" and v is not None:
                v = float(v)
            row.append(v)
        ws.append(row)

    for cell in ws["F"][1:]:
        cell.number_format = "#,##0.00"
    for col in ("G", "H"):
        for cell in ws[col][1:]:
            cell.number_format = "DD/MM/YYYY"

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
