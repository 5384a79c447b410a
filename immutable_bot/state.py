"""
Application context shared by every handler

Built once at startup and stored in ``Application.bot_data``; handlers read it
back through :func:`get_state`.
"""
import random
from dataclasses import dataclass
from typing import Callable

from telegram.ext import ContextTypes

from .config import BotConfig
from .storage import QuoteDatabase


STATE_KEY = "immutable_bot.state"


@dataclass(frozen=True)
class BotState:
    """Configuration, database and random source for one running bot"""
    config: BotConfig
    db: QuoteDatabase
    # Called once per handler invocation; the default seeds from OS entropy
    rng_factory: Callable[[], random.Random] = random.Random

    def new_rng(self) -> random.Random:
        return self.rng_factory()


def get_state(context: ContextTypes.DEFAULT_TYPE) -> BotState:
    """Fetch the application context stored on the Application"""
    return context.bot_data[STATE_KEY]
