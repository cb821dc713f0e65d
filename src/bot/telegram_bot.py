"""
Telegram bot: handler registration
"""
import logging
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
)

from src.bot.handlers.base import start_command, help_command, menu_command, generic_command_callback
from src.bot.handlers.spin import spin_command, reset_command, forget_command, status_command, history_command
from src.bot.handlers.filters import (
    games_command,
    game_command,
    classes_command,
    builds_command,
    toggle_class_command,
    toggle_build_command,
    difficulty_command,
    playstyle_command,
    lock_class_command,
    lock_build_command,
    unlock_command,
)
from src.bot.handlers.favorites import favorite_command, favorites_command, sound_command

logger = logging.getLogger(__name__)


def setup_bot(token: str) -> Application:
    """Setup and return the Application instance"""
    # Spins wait for the wheels to stop; other updates must not queue behind them
    application = Application.builder().token(token).concurrent_updates(True).build()

    # Basic
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("menu", menu_command))

    # Spinning
    application.add_handler(CommandHandler("spin", spin_command))
    application.add_handler(CommandHandler("reset", reset_command))
    application.add_handler(CommandHandler("status", status_command))
    application.add_handler(CommandHandler("history", history_command))

    # Catalog & filters
    application.add_handler(CommandHandler("games", games_command))
    application.add_handler(CommandHandler("game", game_command))
    application.add_handler(CommandHandler("classes", classes_command))
    application.add_handler(CommandHandler("builds", builds_command))
    application.add_handler(CommandHandler("toggle_class", toggle_class_command))
    application.add_handler(CommandHandler("toggle_build", toggle_build_command))
    application.add_handler(CommandHandler("difficulty", difficulty_command))
    application.add_handler(CommandHandler("playstyle", playstyle_command))

    # Locks
    application.add_handler(CommandHandler("lock_class", lock_class_command))
    application.add_handler(CommandHandler("lock_build", lock_build_command))
    application.add_handler(CommandHandler("unlock", unlock_command))

    # Preferences
    application.add_handler(CommandHandler("favorite", favorite_command))
    application.add_handler(CommandHandler("favorites", favorites_command))
    application.add_handler(CommandHandler("sound", sound_command))
    application.add_handler(CommandHandler("forget", forget_command))

    # Menu buttons
    application.add_handler(CallbackQueryHandler(generic_command_callback, pattern="^cmd:"))

    logger.info("Bot handlers registered")
    return application
