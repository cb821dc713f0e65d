from .telegram_bot import setup_bot

__all__ = [
    'setup_bot'
]
