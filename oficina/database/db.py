from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv  # type: ignore
import os

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./oficina.db")

# 👇 Normaliza scheme se vier como 'postgres://'
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# connect_args só para SQLite
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# 👇 pool_pre_ping ajuda em servidores que "dormem"
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Importa modelos para registrar as tabelas
from oficina.models import models  # noqa: E402,F401

# Em produção o caminho é o Alembic; em dev basta o create_all
if os.getenv("ENV", "dev").lower() == "dev" and os.getenv("DB_CREATE_ALL", "true").lower() == "true":
    Base.metadata.create_all(bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
