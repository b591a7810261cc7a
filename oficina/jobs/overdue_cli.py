# python -m oficina.jobs.overdue_cli
from dotenv import load_dotenv
load_dotenv()

from oficina.jobs.overdue import marcar_parcelas_vencidas_job

if __name__ == "__main__":
    updated = marcar_parcelas_vencidas_job()
    print(f"Parcelas vencidas marcadas: {updated}")
