# oficina/tests/conftest.py
import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from oficina.main import app
from oficina.database.db import Base, get_db
from oficina.models.models import Estabelecimento, Usuario
from oficina.utils.auth import hash_password, create_access_token

# SQLite em arquivo para evitar problemas de conexão em memória
TEST_DB_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test_unit.db")

# ---------- ENGINE (session-scoped) ----------
@pytest.fixture(scope="session")
def engine():
    eng = create_engine(TEST_DB_URL, future=True, echo=False)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)

# ---------- DB (function-scoped) ----------
@pytest.fixture
def db(engine):
    """
    Base limpa por teste: dropa e cria as tabelas antes de cada caso.
    """
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

# ---------- Override de get_db ----------
@pytest.fixture
def client(db):
    def _get_db():
        yield db
    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)

# ---------- Seed: Estabelecimento + Admin ----------
@pytest.fixture
def seeded_admin(db):
    estabelecimento = Estabelecimento(nome="Auto Center Teste")
    db.add(estabelecimento)
    db.flush()

    admin = Usuario(
        nome="Admin",
        role="admin",
        email="admin@test.local",
        senha=hash_password("123456"),
        estabelecimento_id=estabelecimento.id,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return estabelecimento, admin

# ---------- Header Authorization ----------
@pytest.fixture
def auth_headers(seeded_admin):
    _, admin = seeded_admin
    return {"Authorization": f"Bearer {create_access_token(admin)}"}

# ---------- Helpers de API ----------
@pytest.fixture
def nova_ordem(client, auth_headers):
    """Cria cliente + ordem com itens; devolve o JSON da ordem."""
    def _nova_ordem(itens=None, **extra):
        rc = client.post("/clientes/", json={"nome": "João da Silva", "cpf": "12345678901"},
                         headers=auth_headers)
        assert rc.status_code == 201, rc.text
        if itens is None:
            itens = [{"descricao": "Troca de óleo", "quantidade": 1, "valor_unitario": 1000.0}]
        r = client.post("/ordens/", json={"cliente_id": rc.json()["id"], "itens": itens, **extra},
                        headers=auth_headers)
        assert r.status_code == 201, r.text
        return r.json()
    return _nova_ordem
