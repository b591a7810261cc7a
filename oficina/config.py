# oficina/config.py
import os
from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("ENV", "dev").lower()

SECRET_KEY = os.getenv("SECRET_KEY")
if ENV == "prod":
    # Em prod: chave obrigatória e longa o suficiente (>=32 bytes)
    if not SECRET_KEY or len(SECRET_KEY) < 32:
        raise RuntimeError("SECRET_KEY obrigatório em prod (>=32 bytes)")
elif not SECRET_KEY:
    SECRET_KEY = "dev-secret-key-nao-usar-em-producao-000000"

# JWT
JWT_ALGORITHM = os.getenv("JWT_ALGO", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_MINS", "60"))
JWT_REFRESH_EXPIRE_MINUTES = int(os.getenv("JWT_REFRESH_MINS", "10080"))

# Fuso da oficina: define "hoje" para vencimentos e data_pagamento
LOCAL_TZ_NAME = os.getenv("LOCAL_TZ", "America/Sao_Paulo")

# Scheduler do job de vencidos
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "false").lower() == "true"
SCHED_HOUR = int(os.getenv("SCHED_HOUR", "2"))
SCHED_MINUTE = int(os.getenv("SCHED_MINUTE", "0"))
