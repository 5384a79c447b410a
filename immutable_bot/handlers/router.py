"""
Command routing
The command table drives /help, the BotFather command list and handler registration.
Every command except /authorize and /deauthorize requires an authorized chat.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List

from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from .admin import authorize_command, deauthorize_command
from .gates import authorized_chat_only
from .hug import hug_command
from .quotes import guesswho_command, quote_command


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
    name: str
    description: str
    callback: Callable
    # False for admin commands, which carry their own gate
    requires_authorized_chat: bool = True


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help"""
    await context.bot.send_message(chat_id=update.effective_chat.id, text=help_text())


COMMANDS: List[CommandSpec] = [
    CommandSpec("help", "Display help message", help_command),
    CommandSpec("quote", "Save a quote (reply to a message)", quote_command),
    CommandSpec("guesswho", "Create a 'guess who said this' poll", guesswho_command),
    CommandSpec("hug", "Send a group hug to everyone!", hug_command),
    CommandSpec("authorize", "Admin: Authorize this chat for bot use", authorize_command,
                requires_authorized_chat=False),
    CommandSpec("deauthorize", "Admin: Deauthorize this chat", deauthorize_command,
                requires_authorized_chat=False),
]

BOT_COMMANDS = [BotCommand(spec.name, spec.description) for spec in COMMANDS]


def help_text() -> str:
    lines = ["Commands:"]
    lines.extend(f"/{spec.name} — {spec.description}" for spec in COMMANDS)
    return "\n".join(lines)


def build_command_handlers() -> List[CommandHandler]:
    """One CommandHandler per table entry, with the chat gate applied where required"""
    handlers = []
    for spec in COMMANDS:
        callback = spec.callback
        if spec.requires_authorized_chat:
            callback = authorized_chat_only(callback)
        handlers.append(CommandHandler(spec.name, callback))
    return handlers


def register_handlers(app: Application) -> None:
    """Register every command handler"""
    for handler in build_command_handlers():
        app.add_handler(handler)
    logger.debug(f"Registered {len(COMMANDS)} commands")
