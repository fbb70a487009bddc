import os

from decimal import Decimal
from pathlib import Path
from typing import Any

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
        """Pick up the legacy SERVER_PORT variable used by older deployments."""

        super().model_post_init(__context)

        if "PORT" not in os.environ:
            fallback = os.getenv("SERVER_PORT")
            if fallback and fallback.isdigit():
                object.__setattr__(self, "port", int(fallback))

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="auto", description="console, json, or auto (console only at DEBUG)")
    signing_base_url: str = Field(
        default="",
        description="Base URL of the signing frontend (defaults to http://localhost:{port})",
        validation_alias=AliasChoices("signing_base_url", "SIGNING_URL"),
    )

    # Planning Defaults
    default_slippage_percent: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        lt=100,
        description="Slippage applied to minimum amounts when the caller gives no tolerance",
    )
    quote_slippage_percent: Decimal = Field(
        default=Decimal("0.5"),
        ge=0,
        lt=100,
        description="Slippage used for the suggested minimum in read-only swap quotes",
    )
    router_deadline_seconds: int = Field(
        default=600,
        gt=0,
        description="Seconds added to plan creation time for router call deadlines",
    )
    swap_fee_bps: int = Field(default=30, ge=0, lt=10_000, description="Pool swap fee in basis points")
    price_display_places: int = Field(default=6, ge=0, le=36, description="Decimal places for price display")
    native_token_symbol: str = Field(default="ETH", description="Display symbol of the native currency")

    # Bootstrap Chain (seeds the in-memory registries of the HTTP app)
    chain_network_id: str = Field(default="", description="EVM chain id of the active chain; empty disables seeding")
    chain_name: str = Field(default="", description="Display name of the active chain")
    rpc_url: str = Field(default="", description="RPC endpoint of the active chain")
    uniswap_factory_address: str = Field(default="", description="UniswapV2Factory address")
    uniswap_router_address: str = Field(default="", description="UniswapV2Router02 address")
    weth_address: str = Field(default="", description="Wrapped native token address")

    @property
    def resolved_signing_base_url(self) -> str:
        base = self.signing_base_url or f"http://localhost:{self.port}"
        return base.rstrip("/")


# Global settings instance
settings = Settings()
