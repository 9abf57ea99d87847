"""Telegram bot handlers for the price relay.

Reads listings posted in the source group, prices them with the extraction
engine and the markup formula, and posts the result in the target group.
Photos are resent by file id so the target group sees the same picture with
the priced text as caption.
"""

import logging

from telegram import Update
from telegram.constants import ChatType
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from ..config import config
from .messages import CHAT_ID_MESSAGE, LOG_GROUP_DISCOVERY, RELAY_FAILED_NOTIFICATION
from .response_formatter import response_formatter
from .types import RenderedListing
from .utils import fits_caption, notify_admin

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = (ChatType.GROUP, ChatType.SUPERGROUP)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command.

    Sends usage instructions with the configured pricing formula.

    Args:
        update: Telegram update object containing message data.
        context: Bot context for accessing application instance.
    """
    if update.message:
        await update.message.reply_text(response_formatter.format_start_message())


async def chat_id(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /chatid command by replying with the current chat id."""
    if update.message and update.effective_chat:
        await update.message.reply_text(CHAT_ID_MESSAGE.format(chat_id=update.effective_chat.id))


async def relay_listing(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Relay a source group listing to the target group with its sale price.

    Text messages without a price are ignored. Photos are always relayed,
    with the price lines as caption when the caption has a price.

    Args:
        update: Telegram update object containing message data.
        context: Bot context for accessing application instance.
    """
    message = update.message
    chat = update.effective_chat
    if not message or not chat or chat.type not in GROUP_CHAT_TYPES:
        return

    relay = config.relay
    if not relay.groups_configured:
        logger.info(LOG_GROUP_DISCOVERY.format(title=chat.title, chat_id=chat.id))
        return

    if chat.id != relay.source_chat_id:
        return

    body = message.text or message.caption or ""
    photo_id = message.photo[-1].file_id if message.photo else None

    listing = response_formatter.format_listing(body)
    if not listing["has_price"] and photo_id is None:
        logger.debug(f"No price found in message {message.message_id}")
        return

    try:
        await _send_listing(context, relay.target_chat_id, listing, photo_id)
        logger.info(
            f"Relayed message {message.message_id} "
            f"({len(listing['priced'])} price(s), photo={photo_id is not None})"
        )
    except TelegramError as e:
        logger.error(f"Failed to relay message {message.message_id}: {e}")
        await notify_admin(context.application, RELAY_FAILED_NOTIFICATION.format(error=e))


async def _send_listing(
    context: ContextTypes.DEFAULT_TYPE,
    target_chat_id: int,
    listing: RenderedListing,
    photo_id: str | None,
) -> None:
    """Post a rendered listing in the target group.

    Args:
        context: Bot context for accessing the bot instance.
        target_chat_id: Chat id of the target group.
        listing: Rendered price lines.
        photo_id: File id of the largest photo size, if the message had one.
    """
    bot = context.bot
    text = listing["text"]

    if photo_id is None:
        await bot.send_message(chat_id=target_chat_id, text=text)
        return

    if not listing["has_price"]:
        await bot.send_photo(chat_id=target_chat_id, photo=photo_id)
        return

    if fits_caption(text):
        await bot.send_photo(chat_id=target_chat_id, photo=photo_id, caption=text)
        return

    # Caption too long: photo first, then the price lines as a message
    await bot.send_photo(chat_id=target_chat_id, photo=photo_id)
    await bot.send_message(chat_id=target_chat_id, text=text)
