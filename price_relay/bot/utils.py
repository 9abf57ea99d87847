"""Bot utility functions.

Provides helpers shared by the Telegram handlers: admin notifications and
the photo caption length check.
"""

import logging

from telegram.ext import Application

from ..config import config
from .messages import ADMIN_NOTIFICATION

logger = logging.getLogger(__name__)


async def notify_admin(application: Application, message: str) -> None:
    """Send notification to admin about relay issues.

    Args:
        application: Telegram Application instance for sending messages.
        message: Alert message to send to admin.
    """
    if not config.relay.admin_chat_id:
        logger.warning("Admin chat id is not configured; skipping admin notification")
        return

    try:
        await application.bot.send_message(
            chat_id=config.relay.admin_chat_id, text=ADMIN_NOTIFICATION.format(message=message)
        )
        logger.info(f"Admin notification sent: {message}")
    except Exception as e:
        logger.error(f"Failed to send admin notification: {e}")


def fits_caption(text: str) -> bool:
    """Check whether text can be sent as a photo caption.

    Args:
        text: Rendered listing text.

    Returns:
        True if the text is within Telegram's caption limit.
    """
    return len(text) <= config.relay.caption_limit
