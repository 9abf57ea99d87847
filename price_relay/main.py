"""Application entry point.

Main module that initializes and runs the price relay bot. Handles both
webhook mode (when a public domain is configured) and polling mode (for local
development). Configures logging and registers bot handlers for commands and
group listings.
"""

import logging

from telegram.ext import Application, CommandHandler, MessageHandler, filters

from .bot.handlers import chat_id, relay_listing, start
from .bot.messages import LOG_GROUPS_NOT_CONFIGURED
from .config import config

# Logging
logging.basicConfig(
    format="%(asctime)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main application entry point.

    Initializes the Telegram bot application, registers command and listing
    handlers, and starts the bot in either webhook mode or polling mode.

    Raises:
        RuntimeError: If BOT_TOKEN environment variable is not set.
    """
    if not config.relay.bot_token:
        raise RuntimeError("Set BOT_TOKEN environment variable")

    if not config.relay.groups_configured:
        logger.warning(LOG_GROUPS_NOT_CONFIGURED)
    else:
        logger.info(
            f"Relaying listings from {config.relay.source_chat_id} "
            f"to {config.relay.target_chat_id}"
        )

    # Create application
    app = Application.builder().token(config.relay.bot_token).build()

    # Add handlers
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("chatid", chat_id))
    app.add_handler(
        MessageHandler((filters.TEXT | filters.PHOTO) & ~filters.COMMAND, relay_listing)
    )

    # Run in webhook or polling mode
    if config.relay.use_webhook:
        path = f"/{config.relay.bot_token}"
        webhook_url = f"https://{config.relay.public_domain}{path}"
        logger.info(f"Starting webhook on {config.relay.listen_host}:{config.relay.port}")

        app.run_webhook(
            listen=config.relay.listen_host,
            port=config.relay.port,
            url_path=path,
            webhook_url=webhook_url,
        )
    else:
        logger.warning("No public domain found; falling back to long-polling")
        app.run_polling()


if __name__ == "__main__":
    main()
