from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator
from contextlib import suppress
from pathlib import Path
from typing import Any, ClassVar

import msgspec
from msgspec import Struct, structs

from layertree.exceptions import InvalidInputError, StorageError
from layertree.serialization import from_json, to_json

logger = logging.getLogger(__name__)


class StoredMessage(Struct, frozen=True, rename="camel"):
    """
    Source-agnostic raw message as persisted in the message log.

    `channel` is the scope used for querying; it defaults to the topic id or
    chat id when not given explicitly.
    """

    id: str
    source: str
    sender_id: str
    content: str
    timestamp: int
    channel: str | None = None
    chat_id: str | None = None
    topic_id: str | None = None
    sender_name: str | None = None
    sender_role: str = "user"
    reply_to_id: str | None = None
    content_type: str = "text"
    raw_meta: dict[str, Any] | None = None

    @property
    def scope(self) -> str | None:
        return self.channel or self.topic_id or self.chat_id


def dumps_stored_message(message: StoredMessage) -> str:
    """
    Compact single-line JSON for a StoredMessage.
    """
    return to_json(message).decode("utf-8")


def load_stored_message(line: str | bytes) -> StoredMessage:
    return from_json(StoredMessage, line)


class MessageLog:
    """
    Append-only JSONL log of raw messages, one file per source.

    - <root>/<source>.jsonl holds one StoredMessage per line.
    - Inserts are idempotent by message id; the first stored copy wins.
    - Reads return messages ordered by timestamp (stable for equal timestamps).
    """

    _SOURCE_RE: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_.-]+$")
    _LOG_SUFFIX: ClassVar[str] = ".jsonl"

    root: Path
    _known_ids: dict[str, set[str]]

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self._known_ids = {}

    # ---------- Public API ----------

    def insert(self, message: StoredMessage) -> bool:
        """
        Appends a message unless its id is already stored. Returns True if it was written.
        """
        known = self._ids_for(message.source)
        if message.id in known:
            logger.debug("Skipping already stored message %s", message.id)
            return False

        if message.channel is None and message.scope is not None:
            message = structs.replace(message, channel=message.scope)

        self._append_line(self._log_path(message.source), dumps_stored_message(message))
        known.add(message.id)
        return True

    def insert_many(self, messages: Iterable[StoredMessage]) -> int:
        """
        Inserts several messages, returning how many were newly stored.

        Every source name is checked before anything is written, so an
        invalid record rejects the whole batch.
        """
        batch = list(messages)
        for m in batch:
            _ = self._log_path(m.source)
        return sum(1 for m in batch if self.insert(m))

    def get_messages(self, source: str, scope: str) -> list[StoredMessage]:
        """
        All messages of a source whose channel, topic id or chat id equals scope, by timestamp.
        """
        scope = str(scope)
        matching = [
            m for m in self._read_source(source) if scope in (m.channel, m.topic_id, m.chat_id)
        ]
        # sorted() is stable, so equal timestamps keep log order.
        return sorted(matching, key=lambda m: m.timestamp)

    def get_message(self, message_id: str) -> StoredMessage | None:
        for source in self.get_sources():
            for message in self._read_source(source):
                if message.id == message_id:
                    return message
        return None

    def get_channels(self, source: str) -> list[str]:
        scopes = {m.topic_id or m.chat_id or m.channel for m in self._read_source(source)}
        return sorted(s for s in scopes if s)

    def get_sources(self) -> list[str]:
        return sorted(
            entry.name.removesuffix(self._LOG_SUFFIX)
            for entry in self.root.iterdir()
            if entry.is_file() and entry.name.endswith(self._LOG_SUFFIX)
        )

    # ---------- Internal ----------

    def _log_path(self, source: str) -> Path:
        if not self._SOURCE_RE.match(source):
            raise InvalidInputError(f"Invalid source name: {source!r}")
        return self.root / f"{source}{self._LOG_SUFFIX}"

    def _ids_for(self, source: str) -> set[str]:
        if source not in self._known_ids:
            self._known_ids[source] = {m.id for m in self._read_source(source)}
        return self._known_ids[source]

    def _read_source(self, source: str) -> Iterator[StoredMessage]:
        path = self._log_path(source)
        if not path.is_file():
            return

        seen: set[str] = set()
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    message = load_stored_message(line)
                except (msgspec.DecodeError, msgspec.ValidationError) as e:
                    raise StorageError(f"Corrupt record in {path} at line {line_no}: {e}") from e
                if message.id in seen:
                    continue
                seen.add(message.id)
                yield message

    def _append_line(self, path: Path, line: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            _ = f.write(line)
            _ = f.write("\n")
            f.flush()
            with suppress(OSError):
                os.fsync(f.fileno())
