# oficina/constants.py
from enum import Enum

# ==============================
# Parcelas
# ==============================
class ParcelaStatus(str, Enum):
    GERADO   = "gerado"     # Faturado ao finalizar a ordem, ainda sem plano
    PENDENTE = "pendente"   # Aguardando pagamento
    PAGO     = "pago"       # Pago
    VENCIDO  = "vencido"    # Pendente com vencimento passado (derivado)


class FormaPagamento(str, Enum):
    DINHEIRO = "Dinheiro"
    DEBITO   = "Debito"
    PIX      = "Pix"
    CREDITO  = "Credito"


class OrdemStatus(str, Enum):
    ABERTA     = "aberta"
    FINALIZADA = "finalizada"


# Valor do campo "parcelas" para pagamento à vista
A_VISTA = "vista"

# Teto de parcelas de um plano
MAX_PARCELAS = 48

# ==============================
# Normalização de entradas da UI
# (rótulos capitalizados e variantes → valor canônico)
# ==============================
NORMALIZE_PARCELA_STATUS = {
    "gerado":   ParcelaStatus.GERADO,
    "gerada":   ParcelaStatus.GERADO,

    "pendente": ParcelaStatus.PENDENTE,
    "pending":  ParcelaStatus.PENDENTE,

    "pago":     ParcelaStatus.PAGO,
    "paga":     ParcelaStatus.PAGO,
    "paid":     ParcelaStatus.PAGO,

    "vencido":  ParcelaStatus.VENCIDO,
    "vencida":  ParcelaStatus.VENCIDO,
    "overdue":  ParcelaStatus.VENCIDO,
}

NORMALIZE_FORMA_PAGAMENTO = {
    "dinheiro": FormaPagamento.DINHEIRO,
    "debito":   FormaPagamento.DEBITO,
    "débito":   FormaPagamento.DEBITO,
    "pix":      FormaPagamento.PIX,
    "credito":  FormaPagamento.CREDITO,
    "crédito":  FormaPagamento.CREDITO,
}

# ==============================
# Filtros da listagem de parcelas
# Cada filtro é EXCLUSIVO: "Pagamentos Pendente" nunca traz 'gerado'.
# ==============================
FILTROS_PARCELAS = {
    "Pagamentos":          (ParcelaStatus.GERADO,),
    "Pagamentos Pendente": (ParcelaStatus.PENDENTE,),
    "Pagamentos Pagos":    (ParcelaStatus.PAGO,),
    "Pagamentos Vencido":  (ParcelaStatus.VENCIDO,),
}

# Tipos de notificação
NOTIFICACAO_PAGAMENTO_REALIZADO = "pagamento_realizado"
