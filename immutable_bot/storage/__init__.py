"""
Storage module
Persistence for quotes and authorized chats
"""

from .quote_db import QuoteDatabase, Quote, QuoteAuthor, StoreError, fail_closed

__all__ = [
    "QuoteDatabase",
    "Quote",
    "QuoteAuthor",
    "StoreError",
    "fail_closed",
]
