from __future__ import annotations

import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from immutable_bot.storage import QuoteAuthor, QuoteDatabase, StoreError, fail_closed


class FailClosedPolicyTests(unittest.TestCase):
    def test_found_grants(self):
        self.assertTrue(fail_closed(True))

    def test_not_found_denies(self):
        self.assertFalse(fail_closed(False))

    def test_error_denies(self):
        self.assertFalse(fail_closed(StoreError("disk I/O error")))


class QuoteDatabaseTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = QuoteDatabase(Path(self._tmp.name) / "nested" / "quotes.db")
        await self.db.connect()

    async def asyncTearDown(self):
        await self.db.close()
        self._tmp.cleanup()

    async def test_initialize_is_idempotent(self):
        await self.db.initialize()
        await self.db.initialize()
        self.assertEqual(await self.db.count_quotes(1), 0)

    async def test_authorization_cycle(self):
        self.assertFalse(await self.db.is_chat_authorized(-100))
        await self.db.authorize_chat(-100)
        self.assertTrue(await self.db.is_chat_authorized(-100))
        self.assertTrue(await self.db.deauthorize_chat(-100))
        self.assertFalse(await self.db.is_chat_authorized(-100))

    async def test_authorization_is_per_chat(self):
        await self.db.authorize_chat(1)
        self.assertFalse(await self.db.is_chat_authorized(2))

    async def test_duplicate_authorize_raises_store_error(self):
        await self.db.authorize_chat(5)
        with self.assertRaises(StoreError):
            await self.db.authorize_chat(5)

    async def test_deauthorize_unknown_chat_deletes_nothing(self):
        self.assertFalse(await self.db.deauthorize_chat(12345))

    async def test_insert_and_read_back_quote(self):
        sent_at = datetime(2024, 3, 14, 17, 30, tzinfo=timezone.utc)
        quote_id = await self.db.insert_quote(10, 1, "alice", "hello there", sent_at)

        quote = await self.db.random_quote(10)
        self.assertIsNotNone(quote)
        self.assertEqual(quote.id, quote_id)
        self.assertEqual(quote.chat_id, 10)
        self.assertEqual(quote.user_id, 1)
        self.assertEqual(quote.username, "alice")
        self.assertEqual(quote.message_text, "hello there")
        self.assertEqual(quote.message_date, sent_at)
        self.assertEqual(quote.author_display, "@alice")

    async def test_offset_timestamps_are_stored_as_utc(self):
        cest = timezone(timedelta(hours=2))
        await self.db.insert_quote(10, 1, None, "hi", datetime(2024, 7, 1, 10, 0, tzinfo=cest))
        quote = await self.db.random_quote(10)
        self.assertEqual(quote.message_date, datetime(2024, 7, 1, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(quote.message_date.utcoffset(), timedelta(0))

    async def test_random_quote_is_scoped_to_chat(self):
        await self.db.insert_quote(10, 1, None, "in ten", datetime.now(timezone.utc))
        self.assertIsNone(await self.db.random_quote(11))
        quote = await self.db.random_quote(10)
        self.assertEqual(quote.message_text, "in ten")

    async def test_distinct_authors(self):
        now = datetime.now(timezone.utc)
        await self.db.insert_quote(10, 1, "alice", "one", now)
        await self.db.insert_quote(10, 1, "alice", "two", now)
        await self.db.insert_quote(10, 555, None, "three", now)
        await self.db.insert_quote(99, 2, "carol", "elsewhere", now)

        authors = await self.db.distinct_quote_authors(10)
        self.assertCountEqual(authors, [QuoteAuthor(1, "alice"), QuoteAuthor(555, None)])
        self.assertEqual(await self.db.count_quotes(10), 3)

    async def test_empty_text_is_rejected(self):
        with self.assertRaises(ValueError):
            await self.db.insert_quote(10, 1, None, "", datetime.now(timezone.utc))
        self.assertEqual(await self.db.count_quotes(10), 0)

    async def test_default_timestamp_rows_read_back_as_utc(self):
        # Rows written without an explicit date get SQLite's CURRENT_TIMESTAMP
        await self.db._execute(
            "INSERT INTO quotes (chat_id, user_id, message_text) VALUES (?, ?, ?)",
            (10, 1, "legacy"),
        )
        quote = await self.db.random_quote(10)
        self.assertEqual(quote.message_date.tzinfo, timezone.utc)


class DisconnectedDatabaseTests(unittest.IsolatedAsyncioTestCase):
    async def test_lookup_failure_is_not_authorized(self):
        db = QuoteDatabase(Path(tempfile.gettempdir()) / "never-opened.db")
        with self.assertLogs("immutable_bot.storage.quote_db", level="WARNING"):
            self.assertFalse(await db.is_chat_authorized(1))

    async def test_writes_raise_store_error(self):
        db = QuoteDatabase(Path(tempfile.gettempdir()) / "never-opened.db")
        with self.assertRaises(StoreError):
            await db.insert_quote(1, 1, None, "text", datetime.now(timezone.utc))

    async def test_lookup_after_close_is_not_authorized(self):
        with tempfile.TemporaryDirectory() as tmp:
            db = QuoteDatabase(Path(tmp) / "quotes.db")
            await db.connect()
            await db.authorize_chat(1)
            await db.close()
            self.assertFalse(await db.is_chat_authorized(1))


if __name__ == "__main__":
    unittest.main()
