# oficina/services/errors.py
"""
Erros de domínio de pagamentos/parcelas.

Os serviços levantam estes erros; `oficina.main` traduz cada tipo em uma
resposta JSON com o status HTTP correspondente.
"""


class PagamentoError(Exception):
    status_code = 400
    code = "PAGAMENTO_ERROR"

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message, **self.extra}


class ValidationError(PagamentoError):
    """Entrada inválida para a calculadora ou para a troca de status."""
    status_code = 422
    code = "VALIDATION_ERROR"


class NotFoundError(PagamentoError):
    """Registro inexistente. O cliente deve recarregar a lista local."""
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str, **extra):
        extra.setdefault("refetch", True)
        super().__init__(message, **extra)


class StateConflictError(PagamentoError):
    """Transição não permitida a partir do estado atual."""
    status_code = 409
    code = "STATE_CONFLICT"
