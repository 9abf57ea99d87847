"""Global test configuration and fixtures.

Provides shared fixtures for all test levels including pricing and extraction
settings, Telegram update builders and environment setup. Ensures test
isolation and consistency.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from price_relay.bot.response_formatter import ResponseFormatter
from price_relay.config import ExtractionConfig, PricingConfig, config

# Test constants
TEST_BOT_TOKEN = os.getenv("TEST_BOT_TOKEN", "test_bot_token_placeholder")
TEST_ADMIN_CHAT_ID = int(os.getenv("TEST_ADMIN_CHAT_ID", "12345"))
TEST_SOURCE_CHAT_ID = -1001111111111
TEST_TARGET_CHAT_ID = -1002222222222

PRICING_ENV_VARS = (
    "TAX_PERCENT",
    "SHOPPER_FEE_PERCENT",
    "PROFIT_PERCENT",
    "SHIPPING_FIXED_AMOUNT",
    "FX_RATE",
)


@pytest.fixture(autouse=True)
def test_environment():
    """Setup test environment variables for all tests."""
    test_env = {
        "BOT_TOKEN": TEST_BOT_TOKEN,
        "ADMIN_CHAT_ID": str(TEST_ADMIN_CHAT_ID),
    }

    # Store original values
    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    # Formula values come from defaults unless a test sets them
    for key in PRICING_ENV_VARS:
        original_env[key] = os.environ.pop(key, None)

    yield

    # Restore original values
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


@pytest.fixture
def pricing_config() -> PricingConfig:
    """Default markup formula: 6.5% tax, 20% shopper, 15% profit, $10 shipping, 3.75."""
    return PricingConfig(
        tax_percent=6.5,
        shopper_fee_percent=20.0,
        profit_percent=15.0,
        shipping_fixed_amount=10.0,
        fx_rate=3.75,
    )


@pytest.fixture
def extraction_rules() -> ExtractionConfig:
    return ExtractionConfig(
        size_min="2",
        size_max="15",
        size_step="0.5",
        price_threshold="20",
        price_decimals=2,
    )


@pytest.fixture
def formatter(pricing_config, extraction_rules) -> ResponseFormatter:
    return ResponseFormatter(pricing=pricing_config, extraction=extraction_rules)


@pytest.fixture
def relay_groups(monkeypatch):
    """Configure source, target and admin chats on the global configuration."""
    monkeypatch.setattr(config.relay, "source_chat_id", TEST_SOURCE_CHAT_ID)
    monkeypatch.setattr(config.relay, "target_chat_id", TEST_TARGET_CHAT_ID)
    monkeypatch.setattr(config.relay, "admin_chat_id", TEST_ADMIN_CHAT_ID)
    monkeypatch.setattr(config.relay, "caption_limit", 1024)
    monkeypatch.setattr(config, "pricing", PricingConfig())
    monkeypatch.setattr(config, "extraction", ExtractionConfig())
    return config.relay


@pytest.fixture
def make_update():
    """Build a mocked Telegram update for a group message."""

    def _make_update(
        text: str | None = None,
        caption: str | None = None,
        photo_ids: list[str] | None = None,
        chat_id: int = TEST_SOURCE_CHAT_ID,
        chat_type: str = "supergroup",
        title: str = "Proveedor USA",
    ) -> MagicMock:
        update = MagicMock()
        update.message.text = text
        update.message.caption = caption
        update.message.message_id = 42
        update.message.photo = [MagicMock(file_id=file_id) for file_id in photo_ids or []]
        update.message.reply_text = AsyncMock()
        update.effective_chat = MagicMock(id=chat_id, type=chat_type)
        update.effective_chat.title = title
        return update

    return _make_update


@pytest.fixture
def bot_context() -> MagicMock:
    """Mocked handler context with an async bot."""
    context = MagicMock()
    context.bot.send_message = AsyncMock()
    context.bot.send_photo = AsyncMock()
    context.application.bot.send_message = AsyncMock()
    return context
