import os

from pathlib import Path
from typing import Any, Dict

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if not self.bungee_api_key:
            fallback = os.getenv("SOCKET_API_KEY")
            if fallback:
                object.__setattr__(self, "bungee_api_key", fallback)

    log_level: str = Field(default="INFO", description="Logging level")

    # Aggregation
    aggregator_timeout_ms: int = Field(
        default=15000,
        ge=1,
        description="Per-adapter timeout applied to every route request (milliseconds)",
    )
    provider_http_timeout_seconds: int = Field(
        default=20,
        ge=1,
        description="HTTP client timeout used by the provider adapters",
    )
    flag_partial_fees: bool = Field(
        default=False,
        description="Mark normalized routes whose fee total skipped an unparseable hop fee",
    )

    # Provider Toggles
    enable_relay: bool = Field(default=True, description="Enable Relay bridge adapter")
    enable_bungee: bool = Field(default=True, description="Enable Bungee (Socket) bridge adapter")
    enable_lifi: bool = Field(default=True, description="Enable LI.FI bridge adapter")

    relay_base_url: str = Field(
        default="",
        description="Override the default Relay API base URL",
    )
    bungee_base_url: str = Field(
        default="",
        description="Override the default Bungee API base URL",
    )
    bungee_api_key: str = Field(
        default="",
        description="Bungee API key",
        validation_alias=AliasChoices("bungee_api_key", "BUNGEE_API_KEY"),
    )
    lifi_base_url: str = Field(
        default="",
        description="Override the default LI.FI API base URL",
    )
    lifi_api_key: str = Field(default="", description="LI.FI API key (optional, raises rate limits)")
    lifi_integrator: str = Field(default="bridge-aggregator", description="Integrator tag sent to LI.FI")

    @property
    def has_bungee_key(self) -> bool:
        return bool(self.bungee_api_key)

    @property
    def has_lifi_key(self) -> bool:
        return bool(self.lifi_api_key)

    @property
    def provider_toggles(self) -> Dict[str, bool]:
        return {
            "relay": self.enable_relay,
            "bungee": self.enable_bungee,
            "lifi": self.enable_lifi,
        }

    @property
    def provider_api_keys(self) -> Dict[str, str]:
        keys = {"bungee": self.bungee_api_key, "lifi": self.lifi_api_key}
        return {name: key for name, key in keys.items() if key}


# Global settings instance
settings = Settings()
