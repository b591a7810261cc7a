# oficina/utils/auth.py
from datetime import datetime, timedelta, timezone
from sqlalchemy import func

from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from oficina.database.db import get_db
from oficina.models import models
from oficina.schemas.schemas import LoginRequest, RefreshRequest, TokenPairResponse
from oficina.config import (
    SECRET_KEY,
    JWT_ALGORITHM,
    JWT_EXPIRE_MINUTES,
    JWT_REFRESH_EXPIRE_MINUTES,
)

router = APIRouter(tags=["auth"])
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# ===== Hash de senha =====
def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

# ===== OAuth2 / JWT =====
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login")

def _jwt_encode(payload: dict, minutes: int) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode = payload.copy()
    to_encode.update({"exp": exp})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)

def _claims(usuario: models.Usuario, scope: str) -> dict:
    # tv = token_version; subir a versão invalida todos os tokens emitidos
    return {
        "sub": str(usuario.id),
        "estabelecimento_id": usuario.estabelecimento_id,
        "scope": scope,
        "tv": int(getattr(usuario, "token_version", 0)),
    }

def create_access_token(usuario: models.Usuario) -> str:
    return _jwt_encode(_claims(usuario, "access"), JWT_EXPIRE_MINUTES)

def create_refresh_token(usuario: models.Usuario) -> str:
    return _jwt_encode(_claims(usuario, "refresh"), JWT_REFRESH_EXPIRE_MINUTES)

def decode_token(token: str) -> dict:
    return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.Usuario:
    cred_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Não autorizado",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        if payload.get("scope") != "access":
            raise cred_exc
        sub = payload.get("sub")
        tv_in_token = payload.get("tv")
        if sub is None or tv_in_token is None:
            raise cred_exc
        usuario_id = int(sub)
        tv_in_token = int(tv_in_token)
    except (JWTError, ValueError):
        raise cred_exc

    usuario = db.query(models.Usuario).filter(models.Usuario.id == usuario_id).first()
    if not usuario:
        raise cred_exc

    if tv_in_token != int(getattr(usuario, "token_version", 0)):
        # access token antigo/invalidado
        raise cred_exc

    return usuario

def _token_pair(usuario: models.Usuario) -> dict:
    return {
        "access_token": create_access_token(usuario),
        "refresh_token": create_refresh_token(usuario),
        "token_type": "bearer",
        "usuario_id": usuario.id,
        "estabelecimento_id": usuario.estabelecimento_id,
        "nome": usuario.nome or "",
        "email": usuario.email,
    }

# ===== Endpoints =====

@router.post("/login", response_model=TokenPairResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    normalized_email = request.username.strip().lower()

    usuario = (
        db.query(models.Usuario)
        .filter(func.lower(models.Usuario.email) == normalized_email)
        .first()
    )
    if not usuario or not verify_password(request.password, usuario.senha):
        raise HTTPException(status_code=401, detail="Email ou senha incorretos")

    return _token_pair(usuario)


@router.post("/refresh", response_model=TokenPairResponse)
def refresh_token(body: RefreshRequest, db: Session = Depends(get_db)):
    try:
        payload = decode_token(body.refresh_token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Refresh token inválido")

    if payload.get("scope") != "refresh":
        raise HTTPException(status_code=401, detail="Token inválido (scope)")

    sub = payload.get("sub")
    tv = payload.get("tv")
    if sub is None or tv is None:
        raise HTTPException(status_code=401, detail="Token inválido (claims)")

    try:
        usuario_id = int(sub)
        token_version_in_token = int(tv)
    except ValueError:
        raise HTTPException(status_code=401, detail="Token inválido (formato)")

    usuario = db.query(models.Usuario).filter(models.Usuario.id == usuario_id).first()
    if not usuario:
        raise HTTPException(status_code=401, detail="Usuário não encontrado")

    current_version = int(getattr(usuario, "token_version", 0))
    if token_version_in_token != current_version:
        raise HTTPException(status_code=401, detail="Refresh token expirado ou rotacionado")

    # Rotação: invalida refresh anteriores subindo a versão
    usuario.token_version = current_version + 1
    db.add(usuario)
    db.commit()
    db.refresh(usuario)

    return _token_pair(usuario)

@router.post("/logout_all", status_code=204)
def logout_all(db: Session = Depends(get_db), current: models.Usuario = Depends(get_current_user)):
    """
    Invalida TODOS os tokens do usuário atual elevando a 'token_version'.
    """
    current.token_version = int(getattr(current, "token_version", 0)) + 1
    db.add(current)
    db.commit()
    return
