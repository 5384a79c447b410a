"""
Command handlers
"""

from .admin import authorize_command, deauthorize_command
from .gates import admin_only, authorized_chat_only, is_admin
from .hug import hug_command
from .quotes import build_guesswho_poll, guesswho_command, quote_command
from .router import BOT_COMMANDS, COMMANDS, help_command, help_text, register_handlers

__all__ = [
    "authorize_command",
    "deauthorize_command",
    "admin_only",
    "authorized_chat_only",
    "is_admin",
    "hug_command",
    "build_guesswho_poll",
    "guesswho_command",
    "quote_command",
    "BOT_COMMANDS",
    "COMMANDS",
    "help_command",
    "help_text",
    "register_handlers",
]
