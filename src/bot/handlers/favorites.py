import logging
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.constants import FAVORITES_DISPLAY_LIMIT
from src.bot.utils import escape_markdown, session_manager, reply_target

logger = logging.getLogger(__name__)


async def favorite_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /favorite - save or remove the last result"""
    chat_id = update.effective_chat.id
    owner = session_manager.get_session(chat_id)
    history = owner.randomizer.session.history
    target = reply_target(update)

    record = history[0] if history else None
    if not record or not record.get('class') or not record.get('skill'):
        await target.reply_text("ℹ️ Spin first, then save the result with `/favorite`\\.", parse_mode='MarkdownV2')
        return

    cls, skill = record['class'], record['skill']
    added = owner.preferences.toggle_favorite(
        record['game_id'], cls['id'], skill['id'],
        class_name=cls['name'], skill_name=skill['name'],
    )
    session_manager.persist_preferences(chat_id)
    logger.info(f"Chat {chat_id}: favorite {cls['id']}/{skill['id']} {'added' if added else 'removed'}")

    name = f"{escape_markdown(cls['name'])} / {escape_markdown(skill['name'])}"
    if added:
        await target.reply_text(f"⭐ Saved *{name}* to favorites\\.", parse_mode='MarkdownV2')
    else:
        await target.reply_text(f"🗑️ Removed *{name}* from favorites\\.", parse_mode='MarkdownV2')


async def favorites_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /favorites - list saved builds of the current game"""
    owner = session_manager.get_session(update.effective_chat.id)
    randomizer = owner.randomizer
    favorites = owner.preferences.favorites_for_game(randomizer.game_id)[:FAVORITES_DISPLAY_LIMIT]
    target = reply_target(update)

    if not favorites:
        await target.reply_text(
            f"ℹ️ No favorites for *{escape_markdown(randomizer.game['name'])}* yet\\.",
            parse_mode='MarkdownV2',
        )
        return

    lines = [
        f"{idx}\\. *{escape_markdown(fav['class_name'])}* / {escape_markdown(fav['skill_name'])}"
        for idx, fav in enumerate(favorites, start=1)
    ]
    await target.reply_text(
        f"⭐ *Favorites \\- {escape_markdown(randomizer.game['name'])}:*\n\n" + "\n".join(lines),
        parse_mode='MarkdownV2',
    )


async def sound_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /sound - toggle the tick sound of the web page"""
    chat_id = update.effective_chat.id
    owner = session_manager.get_session(chat_id)
    enabled = owner.preferences.toggle_sound()
    session_manager.persist_preferences(chat_id)
    await reply_target(update).reply_text(
        f"{'🔊' if enabled else '🔇'} Tick sound is now *{'on' if enabled else 'off'}*\\.",
        parse_mode='MarkdownV2',
    )
