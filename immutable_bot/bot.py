"""
Immutable Bot main class
Wires the configuration, the quote database and the command handlers into one
python-telegram-bot Application
"""
import asyncio
import logging
import random
import signal
import sys
from typing import Callable, Optional

from telegram import Bot, Update
from telegram.ext import Application, ContextTypes

from .config import BotConfig
from .handlers import BOT_COMMANDS, register_handlers
from .state import STATE_KEY, BotState
from .storage import QuoteDatabase


logger = logging.getLogger(__name__)


class ImmutableBot:
    """Quote bot"""

    def __init__(self, config: BotConfig, rng_factory: Callable[[], random.Random] = random.Random):
        """
        Args:
            config: bot configuration, loaded once at startup
            rng_factory: random source for polls and hugs
        """
        self.config = config
        self.db = QuoteDatabase(self.config.db_path)
        self.state = BotState(config=self.config, db=self.db, rng_factory=rng_factory)

        self._app: Optional[Application] = None
        self._bot: Optional[Bot] = None

        logger.info(f"Bot initialized: {self.config}")

    def build_application(self) -> Application:
        """Create the Application and register the handlers"""
        app = Application.builder().token(self.config.bot_token).build()
        app.bot_data[STATE_KEY] = self.state
        register_handlers(app)
        app.add_error_handler(self._on_error)
        return app

    async def start(self) -> None:
        """Start the bot"""
        # Fatal if the database cannot be opened or the schema created
        await self.db.connect()

        self._app = self.build_application()
        self._bot = self._app.bot

        logger.info("Starting bot...")
        await self._app.initialize()
        await self._app.start()
        await self._app.updater.start_polling(allowed_updates=Update.ALL_TYPES)

        await self._setup_bot_commands()

        logger.info("Bot started successfully!")

    async def _setup_bot_commands(self) -> None:
        """Publish the command list to BotFather"""
        try:
            await self._bot.set_my_commands(BOT_COMMANDS)
            logger.info("Command list published")
        except Exception as e:
            logger.warning(f"Failed to publish command list: {e}")

    async def stop(self) -> None:
        """Stop the bot"""
        logger.info("Stopping bot...")

        # start() may have failed part way through
        if self._app:
            if self._app.updater and self._app.updater.running:
                await self._app.updater.stop()
            if self._app.running:
                await self._app.stop()
            await self._app.shutdown()

        await self.db.close()

        logger.info("Bot shutdown complete.")

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log errors that escaped a handler"""
        logger.error(f"Error while handling update {update}", exc_info=context.error)

    async def run_forever(self) -> None:
        """Run until SIGINT/SIGTERM"""
        stop_event = asyncio.Event()

        def signal_handler():
            stop_event.set()

        if sys.platform != 'win32':
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, signal_handler)
                except NotImplementedError:
                    pass

        try:
            await self.start()
            if sys.platform == 'win32':
                # No add_signal_handler on Windows, rely on KeyboardInterrupt
                while True:
                    await asyncio.sleep(1)
            else:
                await stop_event.wait()
        except KeyboardInterrupt:
            pass
        finally:
            await self.stop()
