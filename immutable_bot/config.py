"""
Bot configuration
Reads the bot settings from environment variables (optionally from a .env file)
"""
import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv


DEFAULT_TIMEZONE = "Europe/Paris"


@dataclass
class BotConfig:
    """Bot configuration"""

    # Bot basics
    bot_token: str = ""
    admin_id: int = 0

    # Zone used when rendering quote timestamps
    timezone: str = DEFAULT_TIMEZONE

    # Database
    db_path: Path = field(default_factory=lambda: Path("data/quotes.db"))

    log_level: str = "INFO"

    # Project base directory
    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    def __repr__(self) -> str:
        return (
            f"BotConfig(admin_id={self.admin_id}, "
            f"timezone={self.timezone}, "
            f"db_path={self.db_path})"
        )


def _parse_admin_id(value: Optional[str]) -> int:
    """Parse the administrator's Telegram user id (a positive integer)"""
    if not value or not value.strip():
        raise ValueError(
            "ADMIN_ID is not set. Set it in the environment or the .env file "
            "to the bot owner's Telegram User ID"
        )
    try:
        admin_id = int(value.strip())
    except ValueError:
        raise ValueError("Failed to parse ADMIN_ID as a positive integer")
    if admin_id <= 0:
        raise ValueError("Failed to parse ADMIN_ID as a positive integer")
    return admin_id


def load_bot_config(env_file: Optional[str] = None) -> BotConfig:
    """
    Load the bot configuration from environment variables

    Args:
        env_file: path of a .env file

    Returns:
        BotConfig instance

    Raises:
        ValueError: the token or the administrator id is missing or malformed
    """
    # Look for .env next to the package first, then in the project root
    current_dir = Path(__file__).resolve().parent
    parent_dir = current_dir.parent

    if env_file is None:
        if (current_dir / '.env').exists():
            env_file = current_dir / '.env'
        else:
            env_file = parent_dir / '.env'
        base_dir = parent_dir
    else:
        env_file = Path(env_file)
        base_dir = env_file.parent

    if env_file.exists():
        load_dotenv(env_file)

    bot_token = os.getenv('TG_BOT_TOKEN', '')
    if not bot_token:
        raise ValueError(
            "TG_BOT_TOKEN is not set. Set it in the environment or the .env file.\n"
            "Create a bot with @BotFather to get one"
        )

    admin_id = _parse_admin_id(os.getenv('ADMIN_ID'))

    db_path = Path(os.getenv('QUOTES_DB_PATH', str(base_dir / 'data' / 'quotes.db')))

    return BotConfig(
        bot_token=bot_token,
        admin_id=admin_id,
        timezone=os.getenv('QUOTES_TIMEZONE', DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE,
        db_path=db_path,
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        base_dir=base_dir,
    )
