"""
Administrator commands
/authorize and /deauthorize toggle whether the current chat may use the bot
"""
import logging

from telegram import Update
from telegram.ext import ContextTypes

from .gates import admin_only
from ..state import get_state
from ..storage import StoreError


logger = logging.getLogger(__name__)

ALREADY_AUTHORIZED_TEXT = "⚠️ This chat is already authorized (っ º - º ς)"
AUTHORIZED_TEXT = "✅ Chat authorized! ImmutableBot is now your buddy ദ്ദി ˉ͈̀꒳ˉ͈́ )✧"
NOT_AUTHORIZED_TEXT = "⚠️ This chat is not currently authorized (  •̀ω  •́  )"
DEAUTHORIZED_TEXT = "⛔ Chat de-authorized! ImmutableBot will no longer respond here (っ◞‸◟ c)"
UPDATE_FAILED_TEXT = "❌ Failed to update chat authorization (⊙ _ ⊙ )"


@admin_only
async def authorize_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /authorize"""
    state = get_state(context)
    chat_id = update.effective_chat.id

    # Read before write: authorized_chats.chat_id is a primary key
    if await state.db.is_chat_authorized(chat_id):
        await update.effective_message.reply_text(ALREADY_AUTHORIZED_TEXT)
        return

    try:
        await state.db.authorize_chat(chat_id)
    except StoreError as e:
        logger.error(f"Failed to authorize chat {chat_id}: {e}")
        await update.effective_message.reply_text(UPDATE_FAILED_TEXT)
        return

    await update.effective_message.reply_text(AUTHORIZED_TEXT)


@admin_only
async def deauthorize_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /deauthorize"""
    state = get_state(context)
    chat_id = update.effective_chat.id

    if not await state.db.is_chat_authorized(chat_id):
        await update.effective_message.reply_text(NOT_AUTHORIZED_TEXT)
        return

    try:
        await state.db.deauthorize_chat(chat_id)
    except StoreError as e:
        logger.error(f"Failed to deauthorize chat {chat_id}: {e}")
        await update.effective_message.reply_text(UPDATE_FAILED_TEXT)
        return

    await update.effective_message.reply_text(DEAUTHORIZED_TEXT)
