"""
Ingestion adapters translating external message formats into StoredMessage records.

Adapters know nothing about layers or navigation; they only feed the message log.
"""

from .generic import parse_records
from .telegram import TelegramAdapter

__all__ = ["TelegramAdapter", "parse_records"]
