"""Central environment-driven settings for the checkout portal.

The process loads this once at startup. Provider credentials, currency and
mode are read-only afterwards (see `.env.example`).
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed, immutable view of runtime configuration from environment variables."""

    service_name: str = "checkout-portal"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    paydunya_master_key: str = ""
    paydunya_private_key: str = ""
    paydunya_public_key: str = ""
    paydunya_token: str = ""
    paydunya_mode: Literal["test", "live"] = "test"
    paydunya_store_name: str = "Mobile Money Payment Portal"
    currency: str = "XOF"
    provider_backend: Literal["paydunya", "simulated"] = "paydunya"
    provider_timeout_seconds: float = 15.0
    simulated_checkout_url: str = "https://checkout.example.test/pay"
    phone_initial_country: str = "sn"
    phone_preferred_countries: list[str] = ["sn", "ci", "ml", "bf", "gn"]
    otel_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 3:
            raise ValueError("currency must be a 3-letter ISO 4217 code")
        return value


settings = CommonSettings()
