import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from oficina.config import ENABLE_SCHEDULER, SCHED_HOUR, SCHED_MINUTE
from oficina.routes import caixas, clientes, notificacoes, ordens, parcelas, tasks
from oficina.services.errors import NotFoundError, PagamentoError
from oficina.services.eventos import canal
from oficina.services.notificacoes import registrar_assinantes
from oficina.utils.auth import router as auth_router
from oficina.utils.time_windows import LOCAL_TZ

# -----------------------------------------------------------------------------
# Logging base
# -----------------------------------------------------------------------------
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("uvicorn.error")

# -----------------------------------------------------------------------------
# Lifespan: scheduler opcional do job de vencidos
# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Se ENABLE_SCHEDULER=true, sobe o APScheduler com o job diário que
    marca parcelas vencidas e o desliga no shutdown.
    """
    scheduler = None

    if ENABLE_SCHEDULER:
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
            from oficina.jobs.overdue import marcar_parcelas_vencidas_job

            scheduler = AsyncIOScheduler(timezone=LOCAL_TZ)
            scheduler.add_job(
                marcar_parcelas_vencidas_job,
                CronTrigger(hour=SCHED_HOUR, minute=SCHED_MINUTE, timezone=LOCAL_TZ),
                id="marcar-vencidas-diario",
                replace_existing=True,
                max_instances=1,          # sem sobreposição
                coalesce=True,            # se perdeu execuções, roda uma só
                misfire_grace_time=3600,
            )
            scheduler.start()
            logger.info("✅ Scheduler iniciado: %02d:%02d TZ=%s", SCHED_HOUR, SCHED_MINUTE, LOCAL_TZ.key)
        except Exception as e:
            logger.exception("❌ Erro iniciando scheduler: %s", e)

    try:
        yield
    finally:
        if scheduler:
            try:
                scheduler.shutdown(wait=False)
                logger.info("🛑 Scheduler parado")
            except Exception as e:
                logger.exception("⚠️ Erro ao parar scheduler: %s", e)

# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------
app = FastAPI(title="Oficina - Pagamentos", lifespan=lifespan)

registrar_assinantes(canal)

# -----------------------------------------------------------------------------
# CORS por ambiente
# -----------------------------------------------------------------------------
ENV = os.getenv("ENV", "dev").lower()
_raw = os.getenv("CORS_ORIGINS", "")
ALLOWED_ORIGINS = [o.strip() for o in _raw.split(",") if o.strip()]

if ENV == "prod" and any(o == "*" for o in ALLOWED_ORIGINS):
    raise RuntimeError('Em prod, CORS_ORIGINS não pode conter "*". Defina domínios explícitos.')
if ENV != "prod" and not ALLOWED_ORIGINS:
    ALLOWED_ORIGINS = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
    expose_headers=["Content-Disposition"],  # download de recibo/planilha
    max_age=600,
)

# -----------------------------------------------------------------------------
# Handlers e health
# -----------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error("422 detail: %s", exc.errors())
    # 'input' pode trazer Infinity/NaN, que não viram JSON
    erros = [{k: v for k, v in e.items() if k != "input"} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(erros)})

@app.exception_handler(PagamentoError)
async def pagamento_error_handler(request: Request, exc: PagamentoError):
    if isinstance(exc, NotFoundError):
        logger.info("%s %s → 404 (%s)", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s → %s %s: %s", request.method, request.url.path,
                       exc.status_code, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})

@app.get("/health")
def health():
    return {"ok": True}

@app.get("/healthz")
def healthz():
    return {"ok": True}

# -----------------------------------------------------------------------------
# Routers
# -----------------------------------------------------------------------------
app.include_router(clientes.router,      prefix="/clientes",           tags=["Clientes"])
app.include_router(ordens.router,        prefix="/ordens",             tags=["Ordens"])
app.include_router(parcelas.router,      prefix="/parcelas-pagamento", tags=["Parcelas"])
app.include_router(caixas.router,        prefix="/caixas",             tags=["Caixas"])
app.include_router(notificacoes.router,  prefix="/notificacoes",       tags=["Notificações"])
app.include_router(tasks.router)
app.include_router(auth_router)
