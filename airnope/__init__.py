# airnope/__init__.py
"""
AirNope: защита Telegram-чатов от крипто-спама (airdrop, кошельки, токены).
"""

__version__ = "1.0.0"
