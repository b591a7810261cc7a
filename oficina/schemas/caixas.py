from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class CaixaCreate(BaseModel):
    valor_abertura: float = Field(0, ge=0, allow_inf_nan=False)
    observacao: Optional[str] = None

class CaixaFechar(BaseModel):
    valor_fechamento: float = Field(..., ge=0, allow_inf_nan=False)
    observacao: Optional[str] = None

class CaixaOut(BaseModel):
    id: int
    estabelecimento_id: int
    usuario_abertura_id: int
    usuario_fechamento_id: Optional[int] = None
    valor_abertura: float
    valor_fechamento: Optional[float] = None
    aberto: bool
    data_abertura: datetime
    data_fechamento: Optional[datetime] = None
    observacao: Optional[str] = None

    class Config:
        from_attributes = True

class CaixaDetalhesOut(CaixaOut):
    total_recebido: float = 0
    recebido_por_forma: Dict[str, float] = {}
    parcelas_pagas: int = 0
    parcelas_em_aberto: int = 0
