# routes/clientes.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from oficina.database.db import get_db
from oficina.models.models import Cliente, Usuario
from oficina.schemas.clientes import ClienteCreate, ClienteOut
from oficina.utils.auth import get_current_user

router = APIRouter(
    dependencies=[Depends(get_current_user)],  # 👈 exige Bearer em todas as rotas
)


@router.post("/", response_model=ClienteOut, status_code=status.HTTP_201_CREATED)
def create_cliente(
    body: ClienteCreate,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    if body.cpf and body.cnpj:
        raise HTTPException(status_code=422, detail="Informe CPF ou CNPJ, não ambos")

    cliente = Cliente(**body.model_dump(), estabelecimento_id=current.estabelecimento_id)
    db.add(cliente)
    db.commit()
    db.refresh(cliente)
    return cliente


@router.get("/{cliente_id}", response_model=ClienteOut)
def get_cliente(
    cliente_id: int,
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    cliente = (
        db.query(Cliente)
          .filter(Cliente.id == cliente_id, Cliente.estabelecimento_id == current.estabelecimento_id)
          .first()
    )
    if not cliente:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")
    return cliente
