# oficina/seeds/seed_minimal.py
import os

from oficina.database.db import SessionLocal
from oficina.models.models import Estabelecimento, Usuario
from oficina.utils.auth import hash_password

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@oficina.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "secret123")


def ensure_seed():
    db = SessionLocal()
    try:
        # Evita duplicados se rodar de novo
        estabelecimento = db.query(Estabelecimento).first()
        if not estabelecimento:
            estabelecimento = Estabelecimento(nome=os.getenv("SEED_ESTABELECIMENTO", "Oficina"))
            db.add(estabelecimento)
            db.flush()

        existing_admin = db.query(Usuario).filter(Usuario.email.ilike(ADMIN_EMAIL)).first()
        if existing_admin:
            print("Admin já existe; seed ignorado.")
            return

        admin = Usuario(
            nome="Admin",
            email=ADMIN_EMAIL.lower().strip(),
            role="admin",
            senha=hash_password(ADMIN_PASSWORD),
            estabelecimento_id=estabelecimento.id,
            # token_version usa default 0
        )
        db.add(admin)
        db.commit()

        print("Seed OK ✅")
        print(f"- Estabelecimento: {estabelecimento.nome} (id={estabelecimento.id})")
        print(f"- Admin:           {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    ensure_seed()
