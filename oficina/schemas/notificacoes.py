from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificacaoOut(BaseModel):
    id: int
    tipo: str
    titulo: str
    mensagem: str
    parcela_id: Optional[int] = None
    ordem_id: Optional[int] = None
    usuario_id: Optional[int] = None
    lida: bool
    criado_em: datetime

    class Config:
        from_attributes = True
