"""
Mercosur / LATAM trade agreements data server.

Read-only access to trade agreement text and derived bilateral tables
(data transfer rules, mutual recognition, digital trade obligations).
"""

from mercosur_trade.config import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION
