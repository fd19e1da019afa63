"""Structured JSON logging carrying request and checkout correlation ids."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from momopay.common.config import settings


# Bound per HTTP request by the middleware.
trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
# Bound per checkout attempt by the orchestrator.
transaction_id_ctx: ContextVar[str] = ContextVar("transaction_id", default="")

_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class CorrelationFilter(logging.Filter):
    """Stamp service name, trace id and transaction id on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        record.trace_id = trace_id_ctx.get()
        record.transaction_id = transaction_id_ctx.get()
        return True


def configure_logging(level: str | None = None) -> None:
    """Route all logging to stdout as JSON; call once per process."""

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationFilter())
    handler.setFormatter(
        JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(service_name)s %(trace_id)s %(transaction_id)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level or settings.log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger("momopay")
