"""/hug: send a random kaomoji hug"""
from telegram import Update
from telegram.ext import ContextTypes

from ..state import get_state


HUG_MESSAGES = [
    "( っ˶´ ˘ `)っ",
    "♡⸜(ˆᗜˆ˵ )⸝♡",
    "(っᵔ◡ᵔ)っ",
    "(づ> v <)づ♡",
    "ʕっ•ᴥ•ʔっ ♡",
    "◝(ᵔᗜᵔ)◜",
    "(૭ ｡•̀ ᵕ •́｡ )૭",
    "(⊙ _ ⊙ )",
    "(◍•ᴗ•◍)♡",
    "≽^•⩊•^≼",
    "ᕙ(  •̀ ᗜ •́  )ᕗ",
    "( ⊃ ◕ _ ◕)⊃",
    "༼つ◕_◕༽つ",
    "(ㅅ´ ˘ `)",
    "(˵ •̀ ᴗ - ˵ ) ✧",
    "(❀❛ ֊ ❛„)♡",
]


async def hug_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    rng = get_state(context).new_rng()
    await context.bot.send_message(
        chat_id=update.effective_chat.id,
        text=rng.choice(HUG_MESSAGES),
    )
