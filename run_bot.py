"""
Run the bot from the project root

    python run_bot.py [--debug]
"""
import argparse
import logging
import sys
from pathlib import Path

# Make sure the project root is on PYTHONPATH
root_dir = Path(__file__).parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from src.main import main

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Build Wheel Telegram bot")
    parser.add_argument("--debug", action="store_true", help="Log stale timer callbacks and other debug output")
    args = parser.parse_args()
    if args.debug:
        logging.getLogger("src").setLevel(logging.DEBUG)
    main()
