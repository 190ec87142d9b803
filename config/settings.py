from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database: no default, commands that touch the store fail fast without it
    DATABASE_URL: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DATABASE"),
    )

    # Chain
    RPC_URL: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RPC_URL", "BASE_RPC_URL"),
    )
    CHAIN_NETWORK: str | None = None  # explicit label for stored holdings, e.g. "base"
    PIECES_CONTRACT: str | None = None
    LIQUIDITY_POOL_ADDRESS: str | None = None
    RECONCILE_BATCH_SIZE: int = 5000

    # Fees (basis points)
    CREATOR_FEE_BPS: int = 250
    BUYER_FEE_BPS: int = 150

    # App
    APP_NAME: str = "Marketplace Ledger"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"


settings = Settings()
