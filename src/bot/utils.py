from typing import Optional
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from src.bot.constants import RESULT_DETAIL_FIELDS
from src.bot.session_manager import SessionManager

session_manager = SessionManager()


def escape_markdown(text: str) -> str:
    """Escape MarkdownV2 special characters"""
    special_chars = ['\\', '*', '_', '[', ']', '(', ')', '~', '`', '>', '#', '+', '-', '=', '|', '{', '}', '.', '!']
    for char in special_chars:
        text = text.replace(char, f'\\{char}')
    return text


def reply_target(update: Update):
    """Message to reply to, for both commands and button presses"""
    return update.message if update.message else update.callback_query.message


def item_name(item: Optional[dict]) -> str:
    if not item:
        return "_none_"
    return escape_markdown(str(item.get("name") or item.get("id")))


def origin_note(record: dict) -> str:
    """Class suffix for a locked build that belongs to another class than the one spun"""
    if not record.get("skill_class"):
        return ""
    return f" \\(from {item_name(record['skill_class'])}\\)"


def format_result(record: dict) -> str:
    """Result message of a finished session (history record)"""
    cls = record.get("class")
    skill = record.get("skill")

    lines = ["🎯 *Your build*", ""]
    class_line = f"🛡️ Class: *{item_name(cls)}*"
    if record.get("locked_class"):
        class_line += " 🔒"
    lines.append(class_line)

    skill_line = f"⚔️ Build: *{item_name(skill)}*{origin_note(record)}"
    if record.get("locked_skill"):
        skill_line += " 🔒"
    lines.append(skill_line)

    payload = (skill or {}).get("payload") or {}
    details = [
        f"{label}: `{escape_markdown(str(payload[key]))}`"
        for key, label in RESULT_DETAIL_FIELDS
        if payload.get(key)
    ]
    if details:
        lines.append("")
        lines.extend(details)

    if payload.get("description"):
        lines.append("")
        lines.append(f"_{escape_markdown(str(payload['description']))}_")

    return "\n".join(lines)


def result_keyboard(chat_id: int, record: Optional[dict] = None) -> InlineKeyboardMarkup:
    suffix = f":{chat_id}"
    rows = [
        [InlineKeyboardButton("🎲 Spin again", callback_data=f"cmd:spin{suffix}"),
         InlineKeyboardButton("⭐ Favorite", callback_data=f"cmd:favorite{suffix}")],
    ]
    skill = (record or {}).get("skill") or {}
    guide = (skill.get("payload") or {}).get("guideUrl")
    if guide:
        rows.append([InlineKeyboardButton("📖 Guide", url=guide)])
    rows.append([InlineKeyboardButton("📊 Status", callback_data=f"cmd:status{suffix}"),
                 InlineKeyboardButton("📜 History", callback_data=f"cmd:history{suffix}")])
    return InlineKeyboardMarkup(rows)
