"""
Quote commands
/quote saves the replied-to message, /guesswho turns a random saved quote into a quiz poll
"""
import logging
import random
from dataclasses import dataclass
from datetime import tzinfo
from typing import List, Optional, Sequence, Tuple

from telegram import Message, Poll, Update, User
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from ..state import get_state
from ..storage import Quote, QuoteAuthor, StoreError
from ..utils import format_quote_date, format_user_display, resolve_timezone


logger = logging.getLogger(__name__)

MAX_DECOYS = 3

REPLY_REQUIRED_TEXT = "⚠️ Please reply to a message with /quote to save it ꉂ(˵˃ ᗜ ˂˵)"
TEXT_ONLY_TEXT = "⚠️ Can only save text messages (ᵕ—ᴗ—)"
SAVE_FAILED_TEXT = "❌ Failed to save quote (⊙ _ ⊙ )"
NOT_ENOUGH_AUTHORS_TEXT = "⚠️ Need at least 2 people with saved quotes to play! ٩( ᐖ )人( ᐛ )و"
NO_QUOTES_TEXT = "❌ No quotes found in database"
POLL_FAILED_TEXT = "❌ Telegram refused this poll, the quote may be too long (⊙ _ ⊙ )"


@dataclass(frozen=True)
class GuessWhoPoll:
    """Everything needed to send one quiz poll"""
    question: str
    options: List[str]
    correct_option_id: int
    explanation: str


def _forwarded_user(message: Optional[Message]) -> Optional[User]:
    """The original sender of a message forwarded from a user, if visible"""
    if not message:
        return None

    origin = getattr(message, "forward_origin", None)
    if origin:
        if getattr(origin, "type", None) == "user":
            return getattr(origin, "sender_user", None)
        # Channel, chat and hidden-user origins carry no user id
        return None

    # Older Bot API versions
    return getattr(message, "forward_from", None)


def resolve_quote_author(message: Message, replied: Message) -> Tuple[int, Optional[str]]:
    """
    Work out who a quote belongs to

    A user forward origin wins, so quoting a forwarded message credits the
    original speaker rather than the forwarder. Otherwise the replied-to
    message's sender is used, or user 0 when there is none.

    Returns:
        (user id, username)
    """
    user = _forwarded_user(replied) or _forwarded_user(message) or replied.from_user
    if user is None:
        return 0, None
    return user.id, user.username


def build_guesswho_poll(
    quote: Quote,
    authors: Sequence[QuoteAuthor],
    rng: random.Random,
    tz: tzinfo,
) -> GuessWhoPoll:
    """
    Build a "who said this" quiz around a quote

    Up to three other authors are drawn as decoys and the options are shuffled.
    If two authors render to the same display string the correct index is the
    first of them.

    Args:
        quote: the quote to ask about
        authors: distinct authors of the chat
        rng: random source for decoy choice and shuffling
        tz: zone used to print the quote's timestamp

    Raises:
        ValueError: no author other than the quoted user
    """
    correct_answer = quote.author_display

    # One decoy per person, even if they were quoted under several handles
    decoy_names = {}
    for author in authors:
        if author.user_id != quote.user_id:
            decoy_names.setdefault(author.user_id, author.display_name)
    other_users = list(decoy_names.values())
    if not other_users:
        raise ValueError(f"No decoy authors for quote {quote.id}")
    decoys = rng.sample(other_users, min(MAX_DECOYS, len(other_users)))

    options = [correct_answer] + decoys
    rng.shuffle(options)
    correct_option_id = options.index(correct_answer)

    formatted_date = format_quote_date(quote.message_date, tz)

    return GuessWhoPoll(
        question=f'Who said this? (≖_≖)\n"{quote.message_text}"',
        options=options,
        correct_option_id=correct_option_id,
        explanation=f"🗓️ Quote from {formatted_date}",
    )


async def quote_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /quote: save the replied-to text message"""
    state = get_state(context)
    message = update.effective_message
    chat_id = update.effective_chat.id

    replied = message.reply_to_message
    if replied is None:
        await message.reply_text(REPLY_REQUIRED_TEXT)
        return

    text = replied.text
    if not text:
        await message.reply_text(TEXT_ONLY_TEXT)
        return

    user_id, username = resolve_quote_author(message, replied)

    try:
        quote_id = await state.db.insert_quote(
            chat_id=chat_id,
            user_id=user_id,
            username=username,
            text=text,
            timestamp=replied.date,
        )
    except StoreError as e:
        logger.error(f"Database error while saving quote in chat {chat_id}: {e}")
        await message.reply_text(SAVE_FAILED_TEXT)
        return

    logger.info(f"Saved quote {quote_id} from user {user_id} in chat {chat_id}")
    await message.reply_text(f"✅ Quote saved from {format_user_display(user_id, username)}!")


async def guesswho_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /guesswho: send a quiz poll about a random saved quote"""
    state = get_state(context)
    message = update.effective_message
    chat_id = update.effective_chat.id

    try:
        authors = await state.db.distinct_quote_authors(chat_id)
    except StoreError as e:
        logger.error(f"Failed to load quote authors for chat {chat_id}: {e}")
        authors = []

    # One user quoted under several handles is still one person
    if len({author.user_id for author in authors}) < 2:
        await message.reply_text(NOT_ENOUGH_AUTHORS_TEXT)
        return

    try:
        quote = await state.db.random_quote(chat_id)
    except StoreError as e:
        logger.error(f"Failed to load a random quote for chat {chat_id}: {e}")
        quote = None

    if quote is None:
        await message.reply_text(NO_QUOTES_TEXT)
        return

    poll = build_guesswho_poll(
        quote,
        authors,
        rng=state.new_rng(),
        tz=resolve_timezone(state.config.timezone),
    )

    try:
        await context.bot.send_poll(
            chat_id=chat_id,
            question=poll.question,
            options=poll.options,
            is_anonymous=False,
            type=Poll.QUIZ,
            correct_option_id=poll.correct_option_id,
            explanation=poll.explanation,
        )
    except BadRequest as e:
        logger.error(f"Failed to send poll for quote {quote.id} in chat {chat_id}: {e}")
        await message.reply_text(POLL_FAILED_TEXT)
        return

    try:
        total = await state.db.count_quotes(chat_id)
    except StoreError:
        total = "?"
    logger.info(
        f"Sent guess-who poll for quote {quote.id} in chat {chat_id} "
        f"({len(poll.options)} options, {total} quotes saved)"
    )
