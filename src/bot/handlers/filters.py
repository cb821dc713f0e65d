import logging
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.utils import escape_markdown, session_manager, reply_target
from src.catalog.filters import difficulty_options, eligible_skills, playstyle_options
from src.utils.validators import validate_identifier
from src.wheel.errors import SpinInProgressError

logger = logging.getLogger(__name__)


async def _reply(update: Update, text: str):
    await reply_target(update).reply_text(text, parse_mode='MarkdownV2')


async def _run_change(update: Update, change, *args):
    """Apply a filter/lock change, reporting the errors a user can cause"""
    try:
        return True, change(*args)
    except SpinInProgressError as e:
        await _reply(update, f"⏱️ {escape_markdown(str(e))}")
    except ValueError as e:
        await _reply(update, f"❌ {escape_markdown(str(e))}")
    return False, None


async def _require_id(update: Update, context: ContextTypes.DEFAULT_TYPE, usage: str):
    is_valid, value, error = validate_identifier(context.args[0] if context.args else None)
    if not is_valid:
        await _reply(update, f"❌ {escape_markdown(error)}\n\nUsage: `{escape_markdown(usage)}`")
        return None
    return value


async def games_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /games"""
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    lines = []
    for game in session_manager.catalog.game_list():
        marker = "▶️" if game['id'] == randomizer.game_id else "•"
        lines.append(
            f"{marker} `{escape_markdown(game['id'])}` \\- *{escape_markdown(game['name'])}* "
            f"\\({game['classes']} classes, {game['builds']} builds\\)"
        )
    await _reply(update, "🎮 *Games:*\n\n" + "\n".join(lines) + "\n\nSwitch with `/game <id>`")


async def game_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /game <id> - switch game (filters and locks are reset)"""
    game_id = await _require_id(update, context, "/game <id>")
    if game_id is None:
        return
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    ok, _ = await _run_change(update, randomizer.set_game, game_id)
    if ok:
        await _reply(update, f"✅ Game switched to *{escape_markdown(randomizer.game['name'])}*\\.")


async def classes_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /classes"""
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    filters = randomizer.filters
    locked = randomizer.session.locked_class
    lines = []
    for cls in randomizer.game['classes']:
        if cls['id'] in filters.excluded_classes:
            marker = "🚫"
        elif locked and locked.id == cls['id']:
            marker = "🔒"
        else:
            marker = "✅"
        count = len(eligible_skills(cls, filters))
        lines.append(f"{marker} `{escape_markdown(cls['id'])}` \\- {escape_markdown(cls['name'])} \\({count}\\)")

    await _reply(
        update,
        f"🛡️ *Classes of {escape_markdown(randomizer.game['name'])}:*\n\n" + "\n".join(lines),
    )


async def builds_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /builds [class_id]"""
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    filters = randomizer.filters
    locked = randomizer.session.locked_skill
    class_filter = context.args[0] if context.args else None

    classes = randomizer.game['classes']
    if class_filter:
        classes = [cls for cls in classes if cls['id'] == class_filter]
        if not classes:
            await _reply(update, f"❌ Unknown class: `{escape_markdown(class_filter)}`")
            return

    eligible = set()
    for cls in classes:
        eligible.update(skill['id'] for skill in eligible_skills(cls, filters))

    blocks = []
    for cls in classes:
        lines = [f"*{escape_markdown(cls['name'])}*"]
        for skill in cls['skills']:
            if skill['id'] in filters.excluded_skills:
                marker = "🚫"
            elif locked and locked.id == skill['id']:
                marker = "🔒"
            elif skill['id'] in eligible:
                marker = "✅"
            else:
                marker = "▫️"
            lines.append(f"{marker} `{escape_markdown(skill['id'])}` \\- {escape_markdown(skill['name'])}")
        blocks.append("\n".join(lines))

    await _reply(update, "⚔️ *Builds:*\n\n" + "\n\n".join(blocks))


async def toggle_class_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /toggle_class <id>"""
    class_id = await _require_id(update, context, "/toggle_class <id>")
    if class_id is None:
        return
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    ok, excluded = await _run_change(update, randomizer.toggle_class, class_id)
    if ok:
        state = "excluded 🚫" if excluded else "included ✅"
        await _reply(update, f"Class `{escape_markdown(class_id)}` is now {state}")


async def toggle_build_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /toggle_build <id>"""
    skill_id = await _require_id(update, context, "/toggle_build <id>")
    if skill_id is None:
        return
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    ok, excluded = await _run_change(update, randomizer.toggle_skill, skill_id)
    if ok:
        state = "excluded 🚫" if excluded else "included ✅"
        await _reply(update, f"Build `{escape_markdown(skill_id)}` is now {state}")


async def _metadata_filter(update: Update, context: ContextTypes.DEFAULT_TYPE, label: str, setter, options):
    if not context.args:
        known = ", ".join(options) or "none"
        await _reply(
            update,
            f"ℹ️ Known {label} values: `{escape_markdown(known)}`\n\nUse `all` to clear the filter\\.",
        )
        return

    ok, value = await _run_change(update, setter, " ".join(context.args))
    if ok:
        shown = value or "all"
        await _reply(update, f"✅ {label.capitalize()} filter: `{escape_markdown(shown)}`")


async def difficulty_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /difficulty <value|all>"""
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    await _metadata_filter(
        update, context, "difficulty", randomizer.set_difficulty,
        difficulty_options(randomizer.game),
    )


async def playstyle_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /playstyle <value|all>"""
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    await _metadata_filter(
        update, context, "playstyle", randomizer.set_playstyle,
        playstyle_options(randomizer.game),
    )


async def lock_class_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /lock_class <id>"""
    class_id = await _require_id(update, context, "/lock_class <id>")
    if class_id is None:
        return
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    ok, item = await _run_change(update, randomizer.lock_class, class_id)
    if ok:
        await _reply(update, f"🔒 Class locked: *{escape_markdown(item.name)}*")


async def lock_build_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /lock_build <id>"""
    skill_id = await _require_id(update, context, "/lock_build <id>")
    if skill_id is None:
        return
    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    ok, item = await _run_change(update, randomizer.lock_skill, skill_id)
    if ok:
        await _reply(update, f"🔒 Build locked: *{escape_markdown(item.name)}*")


async def unlock_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handler for /unlock [class|build|all]"""
    target = (context.args[0].lower() if context.args else "all")
    if target not in ("class", "build", "all"):
        await _reply(update, "❌ Usage: `/unlock [class|build|all]`")
        return

    randomizer = session_manager.get_randomizer(update.effective_chat.id)
    if target in ("class", "all"):
        ok, _ = await _run_change(update, randomizer.unlock_class)
        if not ok:
            return
    if target in ("build", "all"):
        ok, _ = await _run_change(update, randomizer.unlock_skill)
        if not ok:
            return

    await _reply(update, f"🔓 Unlocked: `{target}`")
