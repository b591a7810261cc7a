# routes/tasks.py
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from oficina.database.db import get_db
from oficina.utils.auth import get_current_user
from oficina.models.models import Usuario
from oficina.jobs.overdue import marcar_parcelas_vencidas
from oficina.utils.time_windows import LOCAL_TZ

router = APIRouter(prefix="/tasks", tags=["Tasks"])

@router.post("/marcar-vencidas", status_code=status.HTTP_200_OK)
def run_marcar_vencidas(
    db: Session = Depends(get_db),
    current: Usuario = Depends(get_current_user),
):
    """
    Executa a marcação de parcelas vencidas.
    Requer autenticação.
    """
    updated = marcar_parcelas_vencidas(db)
    return {
        "updated": updated,
        "ran_at": datetime.now(LOCAL_TZ).isoformat(),
    }
