"""Configuration schema using Pydantic.

Single data model and defaults for the gateway, persisted to ~/.tronbridge/config.json.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProxyConfig(BaseModel):
    """Listener and destination configuration."""
    host: str = "0.0.0.0"
    # Listen port. Required at startup (CLI --port, env or file).
    port: int | None = None
    # Destination JSON-RPC base URL, e.g. "https://nile.trongrid.io/jsonrpc". Required at startup.
    destination: str = ""
    # Timeout for one forwarded call (None = wait forever). The engine itself never times out.
    timeout_seconds: float | None = 30.0
    # Extra headers added to every forwarded request (e.g. {"TRON-PRO-API-KEY": "..."}).
    extra_headers: dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Loguru sink configuration."""
    level: str = "INFO"
    # Write a rotating file under ~/.tronbridge/logs in addition to stderr.
    file_enabled: bool = True


class Config(BaseSettings):
    """Root configuration for tronbridge."""
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def destination_url(self) -> str:
        """Destination with surrounding whitespace removed."""
        return self.proxy.destination.strip()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment wins over values read from config.json (passed as init kwargs).
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    model_config = SettingsConfigDict(
        env_prefix="TRONBRIDGE_",
        env_nested_delimiter="__"
    )
