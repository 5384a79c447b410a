"""
Bot entry point
  python -m immutable_bot
"""
import asyncio
import logging
import sys

from .bot import ImmutableBot
from .config import load_bot_config


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )

    # Quieter third-party loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('telegram').setLevel(logging.WARNING)


async def main() -> None:
    """Main function"""
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        config = load_bot_config()
        logging.getLogger().setLevel(config.log_level)
        logger.info("Starting Immutable Bot...")

        bot = ImmutableBot(config)
        await bot.run_forever()

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting...")
    except Exception as e:
        logger.exception(f"Bot failed: {e}")
        sys.exit(1)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
