"""
Telegram Bot API message ingestion.

Converts Telegram's message objects into source-agnostic StoredMessage records
and writes them to the message log.
"""

import logging
from typing import Any

from layertree.messagelog import MessageLog, StoredMessage

logger = logging.getLogger(__name__)

SOURCE = "telegram"

type TelegramMessage = dict[str, Any]


def _message_key(chat_id: str, message_id: object) -> str:
    return f"tg:{chat_id}:{message_id}"


class TelegramAdapter:
    log: MessageLog
    self_user_id: str | None

    def __init__(self, log: MessageLog, self_user_id: str | None = None) -> None:
        self.log = log
        self.self_user_id = str(self_user_id) if self_user_id else None

    def ingest(self, tg_message: TelegramMessage, channel_override: str | None = None) -> StoredMessage | None:
        """
        Stores a single Telegram message.

        When Telegram embeds the replied-to message, it is stored first so the
        reply can be linked even if its parent never arrived as an update of its own.
        """
        if parent := tg_message.get("reply_to_message"):
            if parent_msg := self.transform(parent, channel_override):
                _ = self.log.insert(parent_msg)

        message = self.transform(tg_message, channel_override)
        if message is not None:
            _ = self.log.insert(message)
        return message

    def ingest_batch(
        self, tg_messages: list[TelegramMessage], channel_override: str | None = None
    ) -> list[StoredMessage]:
        messages = [m for m in (self.transform(tg, channel_override) for tg in tg_messages) if m is not None]
        if messages:
            stored = self.log.insert_many(messages)
            logger.info("Ingested %d Telegram messages (%d new)", len(messages), stored)
        return messages

    def transform(self, tg_message: TelegramMessage, channel_override: str | None = None) -> StoredMessage | None:
        """
        Maps a Telegram message object to a StoredMessage, or None if it has no message_id.
        """
        message_id = tg_message.get("message_id")
        if not message_id:
            return None

        chat_id = str((tg_message.get("chat") or {}).get("id") or "")
        thread_id = tg_message.get("message_thread_id")
        topic_id = str(thread_id) if thread_id else None
        channel = channel_override or topic_id or chat_id

        sender = tg_message.get("from") or {}
        sender_id = str(sender.get("id") or "")
        sender_name = " ".join(p for p in (sender.get("first_name"), sender.get("last_name")) if p) or None
        sender_role = "self" if self.self_user_id and sender_id == self.self_user_id else "user"

        replied_id = (tg_message.get("reply_to_message") or {}).get("message_id")
        reply_to_id = _message_key(chat_id, replied_id) if replied_id else None

        text = tg_message.get("text")
        content = text or tg_message.get("caption") or "[media]"
        if text:
            content_type = "text"
        elif tg_message.get("photo"):
            content_type = "image"
        else:
            content_type = "other"

        return StoredMessage(
            id=_message_key(chat_id, message_id),
            source=SOURCE,
            channel=channel,
            chat_id=chat_id,
            topic_id=topic_id,
            sender_id=sender_id,
            sender_name=sender_name,
            sender_role=sender_role,
            reply_to_id=reply_to_id,
            content=content,
            content_type=content_type,
            timestamp=int(tg_message.get("date") or 0) * 1000,
            raw_meta={
                "chat_id": chat_id,
                "message_id": message_id,
                "message_thread_id": thread_id or None,
                "reply_to_msg_id": replied_id or None,
            },
        )
