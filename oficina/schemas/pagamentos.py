from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .parcelas import ParcelaOut


class PagamentoCreate(BaseModel):
    forma_pagamento: str                    # Dinheiro | Debito | Pix | Credito
    parcelas: Union[int, str] = "vista"     # "vista" ou N >= 1
    desconto: float = Field(0, allow_inf_nan=False)
    acrescimo: float = Field(0, allow_inf_nan=False)
    juros: float = Field(0, allow_inf_nan=False)  # registrado, não entra no total
    data_vencimento: Optional[date] = None  # vencimento da 1ª parcela
    valor_subtotal: Optional[float] = Field(None, allow_inf_nan=False)  # se omitido, usa o subtotal da ordem
    caixa_id: Optional[int] = None          # se omitido, usa o caixa aberto


class CalculoRequest(BaseModel):
    parcelas: Union[int, str] = "vista"
    desconto: float = Field(0, allow_inf_nan=False)
    acrescimo: float = Field(0, allow_inf_nan=False)
    juros: float = Field(0, allow_inf_nan=False)
    data_vencimento: Optional[date] = None
    valor_subtotal: Optional[float] = Field(None, allow_inf_nan=False)


class ParcelaPlanejadaOut(BaseModel):
    numero_parcela: int
    total_parcelas: Optional[int] = None
    valor: float
    data_vencimento: Optional[date] = None

    class Config:
        from_attributes = True


class CalculoOut(BaseModel):
    subtotal: float
    desconto: float
    acrescimos: float
    juros: float
    total: float
    a_vista: bool
    parcelas: List[ParcelaPlanejadaOut] = []

    class Config:
        from_attributes = True


class PagamentoOut(BaseModel):
    id: int
    ordem_id: int
    cliente_id: int
    caixa_id: Optional[int] = None
    forma_pagamento: Optional[str] = None
    total_parcelas: Optional[int] = None
    subtotal: float
    desconto: float
    acrescimo: float
    juros: float
    valor_total: float
    criado_em: datetime
    parcelas: List[ParcelaOut] = []
