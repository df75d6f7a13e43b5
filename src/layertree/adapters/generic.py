import logging
from typing import Any

import msgspec

from layertree.exceptions import InvalidInputError
from layertree.messagelog import StoredMessage
from layertree.serialization import convert

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "source", "channel", "senderId", "content", "timestamp")
ID_FIELDS = frozenset({"id", "channel", "senderId", "chatId", "topicId", "replyToId"})


def _stringify_ids(record: dict[str, Any]) -> dict[str, Any]:
    # Platforms often send numeric user and chat ids; the log stores them as text.
    return {
        name: str(value) if name in ID_FIELDS and isinstance(value, int) and not isinstance(value, bool) else value
        for name, value in record.items()
    }


def parse_records(payload: dict[str, Any] | list[dict[str, Any]]) -> list[StoredMessage]:
    """
    Converts generic canonical records (camelCase keys) into StoredMessages.

    Records missing any required field, or with an empty one, are skipped.
    A record that has all fields but the wrong types is an input error.
    """
    records = payload if isinstance(payload, list) else [payload]

    messages: list[StoredMessage] = []
    for record in records:
        if any(not record.get(name) for name in REQUIRED_FIELDS):
            logger.warning("Skipping record without required fields: %r", record.get("id"))
            continue
        try:
            messages.append(convert(_stringify_ids(record), StoredMessage))
        except msgspec.ValidationError as e:
            raise InvalidInputError(f"Invalid message record {record.get('id')!r}: {e}") from e
    return messages
