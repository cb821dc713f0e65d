import asyncio
import logging
from datetime import datetime
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes
from config.config import SPIN_RESULT_TIMEOUT_SECONDS
from src.bot.constants import COOLDOWN_SPIN_SECONDS, HISTORY_DISPLAY_LIMIT, SPINNING_MESSAGE, SPIN_REJECT_ICONS
from src.bot.utils import escape_markdown, session_manager, reply_target, item_name, origin_note, format_result, result_keyboard
from src.wheel.errors import InvalidSpinRequest

logger = logging.getLogger(__name__)

# Runtime state
last_spin_time: dict[int, datetime] = {}
# Future of the running spin per chat, resolved with None when the spin is reset
pending_results: dict[int, asyncio.Future] = {}


def _set_result(future: asyncio.Future, record) -> None:
    if not future.done():
        future.set_result(record)


def _resolve_pending(chat_id: int, record) -> None:
    future = pending_results.get(chat_id)
    if future is not None:
        _set_result(future, record)


async def spin_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /spin"""
    chat_id = update.effective_chat.id
    target = reply_target(update)
    randomizer = session_manager.get_randomizer(chat_id)

    now = datetime.now()
    last = last_spin_time.get(chat_id)
    if last and (now - last).total_seconds() < COOLDOWN_SPIN_SECONDS:
        return

    future = asyncio.get_running_loop().create_future()
    try:
        randomizer.request_spin(on_finished=lambda record: _set_result(future, record))
    except InvalidSpinRequest as e:
        icon = SPIN_REJECT_ICONS.get(e.reason, "❌")
        await target.reply_text(f"{icon} {escape_markdown(e.message)}", parse_mode='MarkdownV2')
        return

    last_spin_time[chat_id] = now
    pending_results[chat_id] = future
    message = await target.reply_text(SPINNING_MESSAGE, parse_mode='MarkdownV2')
    try:
        record = await asyncio.wait_for(future, timeout=SPIN_RESULT_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning("Spin in chat %s did not finish in time", chat_id)
        await message.edit_text("⏱️ The wheel got stuck\\. Use `/reset` and spin again\\.", parse_mode='MarkdownV2')
        return
    finally:
        if pending_results.get(chat_id) is future:
            del pending_results[chat_id]

    if record is None:
        await message.edit_text("🛑 *Spin stopped\\.*", parse_mode='MarkdownV2')
        return

    await message.edit_text(
        format_result(record),
        parse_mode='MarkdownV2',
        reply_markup=result_keyboard(chat_id, record),
    )


async def reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /reset - stop both wheels and clear the result"""
    chat_id = update.effective_chat.id
    randomizer = session_manager.get_randomizer(chat_id)
    randomizer.reset()
    _resolve_pending(chat_id, None)

    await reply_target(update).reply_text(
        "🔄 *Wheels reset\\!*\n\nUse `/spin` to start again\\.",
        parse_mode='MarkdownV2',
    )


async def forget_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /forget - drop history, favorites, filters and locks of this chat"""
    chat_id = update.effective_chat.id
    session_manager.delete_session(chat_id)
    _resolve_pending(chat_id, None)
    last_spin_time.pop(chat_id, None)

    await reply_target(update).reply_text(
        "🧹 *Everything was forgotten\\.*\n\nHistory, favorites, filters and locks are back to defaults\\.",
        parse_mode='MarkdownV2',
    )


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /status"""
    chat_id = update.effective_chat.id
    owner = session_manager.get_session(chat_id)
    randomizer = owner.randomizer
    snapshot = randomizer.snapshot()
    filters = snapshot['filters']

    msg = (
        f"📊 *Current status:*\n\n"
        f"🎮 Game: `{escape_markdown(snapshot['game']['name'])}`\n"
        f"🛡️ Classes on the wheel: `{snapshot['wheels']['class']['item_count']}`\n"
        f"⚔️ Builds on the wheel: `{snapshot['wheels']['build']['item_count']}`\n"
        f"🚫 Excluded: `{len(filters['excluded_classes'])}` classes, `{len(filters['excluded_skills'])}` builds\n"
        f"📈 Difficulty: `{escape_markdown(filters['difficulty'] or 'all')}`\n"
        f"🎭 Playstyle: `{escape_markdown(filters['playstyle'] or 'all')}`\n"
        f"🔒 Locked class: {item_name(snapshot['locked_class'])}\n"
        f"🔒 Locked build: {item_name(snapshot['locked_skill'])}\n"
        f"🔊 Sound: `{'on' if owner.preferences.sound_enabled else 'off'}`\n\n"
    )
    if snapshot['is_spinning']:
        msg += "🎡 _Spinning\\.\\.\\._"
    elif snapshot['selected_skill'] or snapshot['selected_class']:
        msg += f"🎯 Last result: *{item_name(snapshot['selected_class'])}* / *{item_name(snapshot['selected_skill'])}*"
    else:
        msg += "ℹ️ _Use /spin to randomize your build_"

    suffix = f":{chat_id}"
    await reply_target(update).reply_text(
        msg,
        parse_mode='MarkdownV2',
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton("🎲 Spin", callback_data=f"cmd:spin{suffix}"),
             InlineKeyboardButton("📜 History", callback_data=f"cmd:history{suffix}")]
        ])
    )


async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /history"""
    chat_id = update.effective_chat.id
    randomizer = session_manager.get_randomizer(chat_id)
    history = randomizer.session.get_recent_history(HISTORY_DISPLAY_LIMIT)
    suffix = f":{chat_id}"

    if not history:
        await reply_target(update).reply_text(
            "ℹ️ No spins yet\\.",
            parse_mode='MarkdownV2',
            reply_markup=InlineKeyboardMarkup([
                [InlineKeyboardButton("🎲 Spin now", callback_data=f"cmd:spin{suffix}")]
            ])
        )
        return

    lines = []
    for idx, record in enumerate(history, start=1):
        time_str = (record.get("time") or "").split("T")[-1]
        lines.append(
            f"{idx}\\. *{item_name(record.get('class'))}* / {item_name(record.get('skill'))}{origin_note(record)} "
            f"_\\({escape_markdown(time_str)}\\)_"
        )

    await reply_target(update).reply_text(
        f"📜 *Recent results \\({len(history)}\\):*\n\n" + "\n".join(lines),
        parse_mode='MarkdownV2',
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton("🎲 Spin again", callback_data=f"cmd:spin{suffix}")]
        ])
    )
