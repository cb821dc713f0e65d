"""
Main entry point for the Telegram bot
"""
import sys
from pathlib import Path

# Add the project root to PYTHONPATH
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import logging
from config.config import TELEGRAM_BOT_TOKEN
from src.bot.telegram_bot import setup_bot
from src.bot.utils import session_manager
from src.db.sqlite_store import init_db

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)


def main():
    """Main function"""
    if not TELEGRAM_BOT_TOKEN:
        logger.error("TELEGRAM_BOT_TOKEN not found!")
        logger.error("Create a .env file containing TELEGRAM_BOT_TOKEN=your_token")
        return

    logger.info("Starting bot...")

    # Create the database tables if needed
    init_db()

    # Fail fast on a broken catalog instead of on the first command
    catalog = session_manager.catalog
    logger.info(f"Catalog ready: {', '.join(game['id'] for game in catalog.games)}")

    application = setup_bot(TELEGRAM_BOT_TOKEN)

    logger.info("Bot is ready!")
    application.run_polling()


if __name__ == "__main__":
    main()
