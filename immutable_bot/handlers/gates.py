"""
Authorization gates
Decorators that stop a command before it runs in an unauthorized chat or for a non-admin user
"""
import logging
from functools import wraps
from typing import Callable, Optional

from telegram import Update, User
from telegram.ext import ContextTypes

from ..state import get_state


logger = logging.getLogger(__name__)

NOT_AUTHORIZED_TEXT = "❌ This chat is not authorized to talk to me (╭ರ_•́)"
ADMIN_ONLY_TEXT = "❌ This command can only be used by the bot admin ᕦ(ò_óˇ)ᕤ"


def is_admin(user: Optional[User], admin_id: int) -> bool:
    """A message without a sender counts as user 0, which is never the admin"""
    user_id = user.id if user else 0
    return user_id == admin_id


def authorized_chat_only(func: Callable) -> Callable:
    """Command decorator: only run in chats present in the authorized set"""
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        state = get_state(context)
        chat_id = update.effective_chat.id
        if not await state.db.is_chat_authorized(chat_id):
            logger.info(f"Rejected {func.__name__} in unauthorized chat {chat_id}")
            await update.effective_message.reply_text(NOT_AUTHORIZED_TEXT)
            return
        return await func(update, context)
    return wrapper


def admin_only(func: Callable) -> Callable:
    """Command decorator: only the configured administrator may run it"""
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        state = get_state(context)
        if not is_admin(update.effective_user, state.config.admin_id):
            await update.effective_message.reply_text(ADMIN_ONLY_TEXT)
            return
        return await func(update, context)
    return wrapper
