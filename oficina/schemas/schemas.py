from pydantic import BaseModel

# Schema do login
class LoginRequest(BaseModel):
    username: str  # é o email
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str

class TokenPairResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    usuario_id: int
    estabelecimento_id: int
    nome: str
    email: str
