"""Configuration management for the price relay bot.

Handles all application configuration including environment variables, the
YAML pricing file, and default settings. Provides structured configuration
classes for the relay transport, the pricing formula and the extraction
thresholds.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class EnvFirstSettings(BaseSettings):
    """Settings whose environment variables override values passed at init.

    ``Config`` passes the ``pricing.yml`` sections as init values, so the file
    acts as the deployment default and the environment can still tune it.
    """

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings, dotenv_settings, file_secret_settings


class PricingConfig(EnvFirstSettings):
    """Markup formula parameters (USD listing price to PEN sale price).

    Attributes:
        tax_percent: Tax/cost percentage applied to the unit price.
        shopper_fee_percent: Shopper commission applied after tax.
        profit_percent: Profit margin applied after the shopper fee.
        shipping_fixed_amount: Fixed shipping charge in USD.
        fx_rate: Local currency units per USD.
    """

    tax_percent: float = Field(default=6.5, ge=0)
    shopper_fee_percent: float = Field(default=20.0, ge=0)
    profit_percent: float = Field(default=15.0, ge=0)
    shipping_fixed_amount: float = Field(default=10.0, ge=0)
    fx_rate: float = Field(default=3.75, gt=0)


class ExtractionConfig(EnvFirstSettings):
    """Thresholds of the size/price heuristics.

    Attributes:
        size_min: Lowest value that can be a size.
        size_max: Highest value that can be a size.
        size_step: Fraction granularity of sizes (6, 6.5, 7...).
        price_threshold: Values above this are always prices.
        price_decimals: Literals with exactly this many decimals are prices.
    """

    model_config = SettingsConfigDict(env_prefix="EXTRACTION_", frozen=True)

    size_min: Decimal = Decimal("2")
    size_max: Decimal = Decimal("15")
    size_step: Decimal = Field(default=Decimal("0.5"), gt=0)
    price_threshold: Decimal = Decimal("20")
    price_decimals: int = 2


class RelayConfig(BaseSettings):
    """Telegram relay configuration.

    Attributes:
        bot_token: Telegram bot API token from environment.
        source_chat_id: Group whose listings are read.
        target_chat_id: Group where priced listings are posted.
        admin_chat_id: Telegram chat ID for failure notifications.
        port: Server port for webhook mode.
        public_domain: Public domain for webhooks, polling when unset.
        listen_host: Interface the webhook server binds to.
        caption_limit: Maximum photo caption length accepted by Telegram.
    """

    bot_token: str = Field(default="", validation_alias="BOT_TOKEN")
    source_chat_id: int | None = Field(default=None, validation_alias="SOURCE_CHAT_ID")
    target_chat_id: int | None = Field(default=None, validation_alias="TARGET_CHAT_ID")
    admin_chat_id: int | None = Field(default=None, validation_alias="ADMIN_CHAT_ID")
    port: int = Field(default=8000, validation_alias="PORT")
    public_domain: str | None = Field(default=None, validation_alias="PUBLIC_DOMAIN")
    listen_host: str = Field(default="127.0.0.1", validation_alias="BOT_LISTEN_HOST")
    caption_limit: int = 1024

    @property
    def use_webhook(self) -> bool:
        """Determine if webhook mode should be used.

        Returns:
            True if a public domain is configured, False for polling mode.
        """
        return bool(self.public_domain)

    @property
    def groups_configured(self) -> bool:
        """Whether both source and target groups are known."""
        return self.source_chat_id is not None and self.target_chat_id is not None


class Config:
    """Application configuration manager.

    Centralizes loading of the relay settings from the environment and of the
    pricing and extraction parameters from ``pricing.yml``. Environment
    variables take precedence over the YAML file, which takes precedence over
    the defaults.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to price_relay/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.relay = RelayConfig()

        pricing_data = self._load_pricing_file()
        self.pricing = PricingConfig(**pricing_data.get("pricing", {}))
        self.extraction = ExtractionConfig(**pricing_data.get("extraction", {}))

    def _load_pricing_file(self) -> dict[str, Any]:
        """Load pricing and extraction sections from YAML configuration.

        Returns:
            Parsed YAML mapping, empty if the file does not exist.
        """
        pricing_path = self.config_dir / "pricing.yml"
        if not pricing_path.exists():
            return {}

        with open(pricing_path) as f:
            data = yaml.safe_load(f)

        return data or {}


# Global configuration instance
config = Config()
