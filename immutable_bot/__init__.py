"""
immutable_bot - Telegram quote bot

Saves quotes from replied-to messages and quizzes the chat about who said them.

- python-telegram-bot (Bot API) receives commands
- quotes and authorized chats live in a local SQLite database (aiosqlite)
- one administrator decides which chats may use the bot
"""

__version__ = "1.0.0"

from .bot import ImmutableBot
from .config import BotConfig, load_bot_config

__all__ = [
    "ImmutableBot",
    "BotConfig",
    "load_bot_config",
]
