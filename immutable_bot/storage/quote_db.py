"""
Quote database
SQLite storage for saved quotes and the set of authorized chats
"""
import logging
import aiosqlite
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Union
from dataclasses import dataclass

from ..utils import format_user_display


logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A database operation failed"""


def fail_closed(lookup: Union[bool, BaseException]) -> bool:
    """
    Authorization policy for a chat lookup

    Only a lookup that succeeded and found the chat grants access. A lookup
    that raised is treated the same as "not found".
    """
    if isinstance(lookup, BaseException):
        return False
    return bool(lookup)


@dataclass(frozen=True)
class Quote:
    """A saved quote"""
    id: int
    chat_id: int
    user_id: int
    username: Optional[str]
    message_text: str
    message_date: datetime

    @property
    def author_display(self) -> str:
        return format_user_display(self.user_id, self.username)


@dataclass(frozen=True)
class QuoteAuthor:
    """A distinct (user id, username) pair with at least one quote in a chat"""
    user_id: int
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        return format_user_display(self.user_id, self.username)


def _parse_message_date(value: Any) -> datetime:
    """Read a stored timestamp back as an aware UTC datetime"""
    if isinstance(value, datetime):
        moment = value
    else:
        moment = datetime.fromisoformat(str(value))
    if moment.tzinfo is None:
        # CURRENT_TIMESTAMP defaults are written in UTC without an offset
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class QuoteDatabase:
    """Quote storage"""

    def __init__(self, db_path: Path):
        """
        Args:
            db_path: SQLite database file
        """
        self.db_path = Path(db_path)
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Open the database and make sure the schema exists"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(str(self.db_path))
        self._connection.row_factory = aiosqlite.Row
        await self.initialize()
        logger.info(f"Database connected: {self.db_path}")

    async def close(self) -> None:
        """Close the database connection"""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("Database connection closed")

    async def initialize(self) -> None:
        """Create the tables if they do not exist yet"""
        await self._execute('''
            CREATE TABLE IF NOT EXISTS quotes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                chat_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                username TEXT,
                message_text TEXT NOT NULL,
                message_date DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        await self._execute('''
            CREATE TABLE IF NOT EXISTS authorized_chats (
                chat_id INTEGER PRIMARY KEY
            )
        ''')

    # ==================== low level ====================

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StoreError("Database is not connected")
        return self._connection

    async def _execute(self, sql: str, params: Iterable[Any] = ()) -> aiosqlite.Cursor:
        """Run one statement and commit it"""
        connection = self._require_connection()
        try:
            cursor = await connection.execute(sql, tuple(params))
            await connection.commit()
            return cursor
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(str(e)) from e

    async def _fetchall(self, sql: str, params: Iterable[Any] = ()) -> List[aiosqlite.Row]:
        connection = self._require_connection()
        try:
            async with connection.execute(sql, tuple(params)) as cursor:
                return list(await cursor.fetchall())
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(str(e)) from e

    async def _fetchone(self, sql: str, params: Iterable[Any] = ()) -> Optional[aiosqlite.Row]:
        connection = self._require_connection()
        try:
            async with connection.execute(sql, tuple(params)) as cursor:
                return await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(str(e)) from e

    # ==================== authorized chats ====================

    async def is_chat_authorized(self, chat_id: int) -> bool:
        """
        Check whether a chat may use the bot

        Never raises: a failed lookup is logged and denies access.
        """
        lookup: Union[bool, BaseException]
        try:
            row = await self._fetchone(
                'SELECT 1 FROM authorized_chats WHERE chat_id = ?', (chat_id,)
            )
            lookup = row is not None
        except StoreError as e:
            logger.warning(f"Authorization lookup for chat {chat_id} failed: {e}")
            lookup = e
        return fail_closed(lookup)

    async def authorize_chat(self, chat_id: int) -> None:
        """
        Add a chat to the authorized set

        Raises:
            StoreError: including when the chat is already authorized
        """
        await self._execute('INSERT INTO authorized_chats (chat_id) VALUES (?)', (chat_id,))
        logger.info(f"Chat {chat_id} authorized")

    async def deauthorize_chat(self, chat_id: int) -> bool:
        """Remove a chat from the authorized set, returns whether a row was deleted"""
        cursor = await self._execute('DELETE FROM authorized_chats WHERE chat_id = ?', (chat_id,))
        logger.info(f"Chat {chat_id} deauthorized")
        return cursor.rowcount > 0

    # ==================== quotes ====================

    async def insert_quote(
        self,
        chat_id: int,
        user_id: int,
        username: Optional[str],
        text: str,
        timestamp: datetime,
    ) -> int:
        """
        Save a quote

        Args:
            chat_id: chat the quote belongs to
            user_id: author's user id (0 when unknown)
            username: author's handle, if any
            text: quoted text
            timestamp: when the quoted message was originally sent

        Returns:
            id of the new row
        """
        if not text:
            raise ValueError("Quote text must not be empty")
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        cursor = await self._execute('''
            INSERT INTO quotes (chat_id, user_id, username, message_text, message_date)
            VALUES (?, ?, ?, ?, ?)
        ''', (
            chat_id, user_id, username, text,
            timestamp.astimezone(timezone.utc).isoformat(),
        ))
        return cursor.lastrowid

    async def distinct_quote_authors(self, chat_id: int) -> List[QuoteAuthor]:
        """Every distinct (user id, username) pair with a quote in the chat"""
        rows = await self._fetchall(
            'SELECT DISTINCT user_id, username FROM quotes WHERE chat_id = ?',
            (chat_id,)
        )
        return [QuoteAuthor(user_id=row['user_id'], username=row['username']) for row in rows]

    async def random_quote(self, chat_id: int) -> Optional[Quote]:
        """Pick one quote of the chat uniformly at random, None if there are none"""
        row = await self._fetchone(
            '''SELECT id, chat_id, user_id, username, message_text, message_date
               FROM quotes WHERE chat_id = ?
               ORDER BY RANDOM() LIMIT 1''',
            (chat_id,)
        )
        if row is None:
            return None
        return self._row_to_quote(row)

    async def count_quotes(self, chat_id: int) -> int:
        """Number of quotes saved in a chat"""
        row = await self._fetchone('SELECT COUNT(*) FROM quotes WHERE chat_id = ?', (chat_id,))
        return row[0] if row else 0

    def _row_to_quote(self, row: aiosqlite.Row) -> Quote:
        """Convert a database row into a Quote"""
        return Quote(
            id=row['id'],
            chat_id=row['chat_id'],
            user_id=row['user_id'],
            username=row['username'],
            message_text=row['message_text'],
            message_date=_parse_message_date(row['message_date']),
        )
