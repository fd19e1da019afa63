"""Startup-time helpers for safe config logging."""

from momopay.common.config import CommonSettings
from momopay.common.logging import logger

_SECRET_MARKERS = ("KEY", "SECRET", "PASSWORD", "TOKEN")


def _safe_value(name: str, value: object) -> str:
    """Render one setting with redaction for secret-like names."""

    if value in (None, ""):
        return "<unset>"
    if any(marker in name.upper() for marker in _SECRET_MARKERS):
        return "<redacted>"
    return str(value)


def startup_summary(cfg: CommonSettings, fields: list[str]) -> dict[str, str]:
    """Build the redacted `{ENV_NAME: value}` view logged at boot."""

    summary = {"service": cfg.service_name}
    for field in fields:
        summary[field.upper()] = _safe_value(field, getattr(cfg, field))
    return summary


def log_startup_config(cfg: CommonSettings, fields: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    logger.info("startup_config=%s", startup_summary(cfg, fields))
