# oficina/services/eventos.py
"""
Canal publish/subscribe em processo.

O núcleo de pagamentos publica aqui quando cria ou altera parcelas; quem
quiser reagir (notificações, listas abertas em outras telas) assina o
evento. O núcleo não conhece nenhum assinante.
"""
import logging
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)

PARCELA_CRIADA = "parcela.criada"
PARCELA_ATUALIZADA = "parcela.atualizada"

Assinante = Callable[..., None]


class CanalEventos:
    def __init__(self):
        self._assinantes: dict[str, list[Assinante]] = defaultdict(list)

    def subscribe(self, evento: str, fn: Assinante) -> None:
        if fn not in self._assinantes[evento]:
            self._assinantes[evento].append(fn)

    def unsubscribe(self, evento: str, fn: Assinante) -> None:
        if fn in self._assinantes[evento]:
            self._assinantes[evento].remove(fn)

    def assinantes(self, evento: str) -> list[Assinante]:
        return list(self._assinantes[evento])

    def publish(self, evento: str, **payload) -> int:
        """
        Entrega o evento a cada assinante, na ordem de inscrição.
        Falha de um assinante é logada e não interrompe os demais.
        Devolve quantos assinantes rodaram sem erro.
        """
        ok = 0
        for fn in self.assinantes(evento):
            try:
                fn(**payload)
                ok += 1
            except Exception:
                logger.exception("Assinante %r falhou no evento %s", fn, evento)
        return ok


canal = CanalEventos()


def get_canal() -> CanalEventos:
    return canal
