from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class ParcelaOut(BaseModel):
    id: int
    pagamento_id: int
    ordem_id: int
    ordem_codigo: Optional[str] = None
    cliente_nome: Optional[str] = None
    caixa_id: Optional[int] = None
    numero_parcela: int
    total_parcelas: Optional[int] = None   # None = "À vista"
    descricao: str
    valor: float
    forma_pagamento: Optional[str] = None
    status: str                            # já observado (pendente vencida → vencido)
    data_vencimento: Optional[date] = None
    data_pagamento: Optional[date] = None
    juros_aplicado: float = 0
    versao: int


class ParcelaStatusUpdate(BaseModel):
    status: str                                # "pago" | "pendente" (aceita "Pago")
    usuario_id: Optional[int] = None
    data_pagamento: Optional[date] = None
    versao: Optional[int] = Field(None, ge=1, description="Versão lida pelo cliente")


class ParcelaHistoricoOut(BaseModel):
    id: int
    parcela_id: Optional[int] = None   # None = parcela de um plano já refeito
    ordem_id: int
    status_anterior: Optional[str] = None
    status_novo: str
    usuario_id: Optional[int] = None
    criado_em: datetime

    class Config:
        from_attributes = True
