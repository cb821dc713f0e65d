"""
Configuration for the build wheel (Telegram bot + web page)
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).parent.parent

# Telegram Bot Token
TELEGRAM_BOT_TOKEN = os.getenv('TELEGRAM_BOT_TOKEN', '')

# Data files
CATALOG_PATH = Path(os.getenv('CATALOG_PATH', str(ROOT_DIR / 'data' / 'catalog.json')))
DB_PATH = Path(os.getenv('DB_PATH', str(ROOT_DIR / 'src' / 'build_wheel.db')))
DEFAULT_GAME_ID = os.getenv('DEFAULT_GAME_ID', 'diablo4')

# Web server
WEB_HOST = os.getenv('WEB_HOST', '0.0.0.0')
WEB_PORT = int(os.getenv('WEB_PORT', '8000'))
WEB_OWNER_ID = int(os.getenv('WEB_OWNER_ID', '0'))  # owner_id used for the browser session

# Wheel timing (seconds)
SPIN_DURATION_SECONDS = float(os.getenv('SPIN_DURATION_SECONDS', '4.0'))
SPIN_EASING = 'cubic-bezier(0.17, 0.67, 0.12, 0.99)'
INTER_WHEEL_DELAY_SECONDS = float(os.getenv('INTER_WHEEL_DELAY_SECONDS', '0.1'))
SPIN_RESULT_TIMEOUT_SECONDS = 30.0

# Resolver
FULL_TURNS_MIN = 3
FULL_TURNS_MAX = 5
JITTER_FRACTION = 0.4  # total jitter span, in sector widths

# Tick schedule
TICK_COUNT_MIN = 20
TICK_COUNT_MAX = 30
TICK_LEAD_IN_SECONDS = 0.05
TICK_SLOWDOWN = 6.0
TICK_TAIL_FRACTION = 0.1

# Session
HISTORY_LIMIT = int(os.getenv('HISTORY_LIMIT', '10'))

# Messages
WELCOME_MESSAGE = """
🎡 *Welcome to Build Wheel\\!*
Spin a random class, then a random build for that class\\.

📖 *Basic flow:*
1️⃣ Pick a game: `/games` then `/game <id>`
2️⃣ Optionally narrow the pool: `/toggle_class`, `/toggle_build`, `/difficulty`, `/playstyle`
3️⃣ Spin: `/spin`
4️⃣ Keep the good ones: `/favorite`

ℹ️ `/help` lists every command\\.
"""

HELP_MESSAGE = """
📖 *Build Wheel commands:*

🎲 *Spinning*
   • `/spin` \\- spin the class wheel, then the build wheel
   • `/reset` \\- stop the wheels and clear the result
   • `/status` \\- current game, filters, locks and result
   • `/history` \\- recent results

🎮 *Catalog*
   • `/games` \\- list games, `/game <id>` \\- switch game \\(resets filters\\)
   • `/classes`, `/builds` \\- list ids of the current game

🧹 *Filters*
   • `/toggle_class <id>` \\- exclude / include a class
   • `/toggle_build <id>` \\- exclude / include a build
   • `/difficulty <value|all>`, `/playstyle <value|all>`

🔒 *Locks*
   • `/lock_class <id>` \\- always use this class
   • `/lock_build <id>` \\- always use this build
   • `/unlock [class|build|all]`

⭐ *Preferences*
   • `/favorite` \\- save / remove the last result
   • `/favorites` \\- list saved builds
   • `/sound` \\- toggle tick sound \\(web page\\)
   • `/forget` \\- delete history, favorites and settings of this chat
"""
