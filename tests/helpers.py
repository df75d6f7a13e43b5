# pyright: standard

from pathlib import Path
from typing import Any

from layertree.messagelog import MessageLog, StoredMessage
from layertree.models import Message
from layertree.navigator import TreeNavigator


def msg(id: str, sender: str, reply_to: str | None = None, content: Any = None, timestamp: int | None = None) -> Message:
    """Test helper building a Message with sensible defaults."""
    return Message(
        id=id,
        sender=sender,
        content=content if content is not None else f"content {id}",
        timestamp=timestamp if timestamp is not None else int(id) if id.isdigit() else 0,
        reply_to_id=reply_to,
    )


def feed(nav: TreeNavigator, *messages: Message) -> None:
    for m in messages:
        _ = nav.process_message(m)


def stored(
    id: str,
    sender_id: str,
    timestamp: int,
    reply_to: str | None = None,
    source: str = "test",
    channel: str = "general",
) -> StoredMessage:
    return StoredMessage(
        id=id,
        source=source,
        channel=channel,
        sender_id=sender_id,
        content=f"content {id}",
        timestamp=timestamp,
        reply_to_id=reply_to,
    )


def init_message_log(data_dir: Path, messages: list[StoredMessage]) -> MessageLog:
    """
    Test helper creating the message log layout used by the CLI under data_dir.
    """
    log = MessageLog(data_dir / "messages")
    _ = log.insert_many(messages)
    return log
