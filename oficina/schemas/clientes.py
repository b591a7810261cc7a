from typing import Optional

from pydantic import BaseModel, Field


class ClienteCreate(BaseModel):
    nome: str = Field(..., min_length=1)
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = Field(None, pattern=r"^\d{11}$")
    cnpj: Optional[str] = Field(None, pattern=r"^\d{14}$")

class ClienteOut(BaseModel):
    id: int
    nome: str
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    cnpj: Optional[str] = None

    class Config:
        from_attributes = True
