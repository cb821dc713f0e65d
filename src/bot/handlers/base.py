import logging
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes
from config.config import WELCOME_MESSAGE, HELP_MESSAGE
from src.bot.utils import reply_target

logger = logging.getLogger(__name__)

async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /start - short overview"""
    await reply_target(update).reply_text(
        WELCOME_MESSAGE,
        parse_mode='MarkdownV2',
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton("📜 Help", callback_data="cmd:help"),
             InlineKeyboardButton("📋 Menu", callback_data="cmd:menu")]
        ])
    )

async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /help"""
    await reply_target(update).reply_text(
        HELP_MESSAGE,
        parse_mode='MarkdownV2',
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton("📋 Menu", callback_data="cmd:menu"),
             InlineKeyboardButton("🎲 Spin", callback_data="cmd:spin")]
        ])
    )

async def menu_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /menu - quick action buttons"""
    text = (
        "📋 *Build Wheel*\n\n"
        "🎲 *Spinning*\n"
        "• `/spin` \\- Spin both wheels\n"
        "• `/reset` \\- Stop and clear\n"
        "• `/status` \\- Current state\n"
        "• `/history` \\- Recent results\n\n"
        "🎮 *Catalog*\n"
        "• `/games` \\- Available games\n"
        "• `/classes` \\- Classes of the game\n"
        "• `/builds` \\- Builds of the game\n\n"
        "⭐ *Favorites*\n"
        "• `/favorite` \\- Save the last result\n"
        "• `/favorites` \\- Saved builds"
    )

    # The chat id goes into the buttons so they keep driving the same session
    suffix = f":{update.effective_chat.id}"
    keyboard = [
        [
            InlineKeyboardButton("🎲 Spin", callback_data=f"cmd:spin{suffix}"),
            InlineKeyboardButton("🔄 Reset", callback_data=f"cmd:reset{suffix}"),
        ],
        [
            InlineKeyboardButton("📊 Status", callback_data=f"cmd:status{suffix}"),
            InlineKeyboardButton("📜 History", callback_data=f"cmd:history{suffix}"),
        ],
        [
            InlineKeyboardButton("🎮 Games", callback_data=f"cmd:games{suffix}"),
            InlineKeyboardButton("⭐ Favorites", callback_data=f"cmd:favorites{suffix}"),
        ],
        [
            InlineKeyboardButton("❓ Help", callback_data=f"cmd:help{suffix}"),
        ]
    ]

    await reply_target(update).reply_text(
        text,
        reply_markup=InlineKeyboardMarkup(keyboard),
        parse_mode='MarkdownV2'
    )

async def generic_command_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Run the command behind a menu button (data format: "cmd:action[:chat_id]")"""
    query = update.callback_query
    data = query.data

    if not data.startswith("cmd:"):
        return

    parts = data.split(":")
    command = parts[1]
    target_chat_id = int(parts[2]) if len(parts) > 2 else query.message.chat_id

    class ProxyUpdate:
        def __init__(self, original, chat):
            self.message = None
            self.effective_message = original.callback_query.message
            self.effective_chat = chat
            self.effective_user = original.effective_user
            self.callback_query = original.callback_query

    mock_chat = type('MockChat', (), {'id': target_chat_id, 'type': query.message.chat.type})()
    mock_update = ProxyUpdate(update, mock_chat)
    # Buttons carry no arguments
    context.args = []

    # Import handlers here to avoid circular dependencies
    from src.bot.handlers.spin import spin_command, reset_command, status_command, history_command
    from src.bot.handlers.filters import games_command
    from src.bot.handlers.favorites import favorite_command, favorites_command

    handlers = {
        "spin": spin_command,
        "reset": reset_command,
        "status": status_command,
        "history": history_command,
        "games": games_command,
        "favorite": favorite_command,
        "favorites": favorites_command,
        "help": help_command,
        "menu": menu_command,
    }
    handler = handlers.get(command)
    if handler is None:
        logger.warning(f"Unknown menu command: {command}")
        await query.answer()
        return

    # Answer first; a spin keeps the handler busy until the wheels stop
    await query.answer()
    try:
        await handler(mock_update, context)
    except Exception as e:
        logger.error(f"Error in generic_command_callback ({command}): {e}")
        await query.message.reply_text("❌ Something went wrong while running that command.")
