from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ItemOrdemCreate(BaseModel):
    descricao: str
    quantidade: int = Field(1, ge=1)
    valor_unitario: float = Field(..., ge=0, allow_inf_nan=False)

class ItemOrdemUpdate(BaseModel):
    descricao: Optional[str] = None
    quantidade: Optional[int] = Field(None, ge=1)
    valor_unitario: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    ativo: Optional[bool] = None

class ItemOrdemOut(BaseModel):
    id: int
    descricao: str
    quantidade: int
    valor_unitario: float
    valor_total: float
    ativo: bool

    class Config:
        from_attributes = True


class OrdemCreate(BaseModel):
    cliente_id: int
    codigo: Optional[str] = None
    descricao: Optional[str] = None
    desconto: float = Field(0, ge=0, allow_inf_nan=False)
    acrescimos: float = Field(0, ge=0, allow_inf_nan=False)
    itens: List[ItemOrdemCreate] = []

class OrdemOut(BaseModel):
    id: int
    codigo: Optional[str] = None
    descricao: Optional[str] = None
    status: str
    cliente_id: int
    subtotal: float
    desconto: float
    acrescimos: float
    total: float
    criado_em: datetime
    itens: List[ItemOrdemOut] = []

    class Config:
        from_attributes = True
