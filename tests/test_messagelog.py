# pyright: standard

from pathlib import Path

import pytest

from layertree.exceptions import InvalidInputError, StorageError
from layertree.messagelog import MessageLog, StoredMessage
from tests.helpers import stored


def test_insert_is_idempotent_by_id(tmp_path: Path) -> None:
    # GIVEN a log with one message
    log = MessageLog(tmp_path / "messages")
    assert log.insert(stored("m1", "u1", 10)) is True

    # WHEN the same id is inserted again with different content
    again = log.insert(stored("m1", "u2", 99))

    # THEN it is ignored and the file holds a single line
    assert again is False
    assert (tmp_path / "messages" / "test.jsonl").read_text(encoding="utf-8").count("\n") == 1
    found = log.get_message("m1")
    assert found is not None and found.sender_id == "u1"


def test_idempotency_survives_reopening(tmp_path: Path) -> None:
    _ = MessageLog(tmp_path).insert(stored("m1", "u1", 10))

    reopened = MessageLog(tmp_path)

    assert reopened.insert_many([stored("m1", "u1", 10), stored("m2", "u1", 11)]) == 1


def test_get_messages_orders_by_timestamp_and_filters_scope(tmp_path: Path) -> None:
    log = MessageLog(tmp_path)
    _ = log.insert_many(
        [
            stored("m3", "u1", 30),
            stored("m1", "u1", 10),
            stored("x1", "u1", 5, channel="elsewhere"),
            stored("m2a", "u2", 20),
            stored("m2b", "u2", 20),
        ]
    )

    messages = log.get_messages("test", "general")

    assert [m.id for m in messages] == ["m1", "m2a", "m2b", "m3"]


def test_scope_matches_topic_and_chat_ids(tmp_path: Path) -> None:
    # GIVEN a message stored without explicit channel
    log = MessageLog(tmp_path)
    message = StoredMessage(
        id="t1", source="telegram", sender_id="u1", content="hi", timestamp=1, chat_id="-100", topic_id="7"
    )
    _ = log.insert(message)

    # THEN its channel defaults to the topic id and it is found by topic or chat
    found = log.get_message("t1")
    assert found is not None and found.channel == "7"
    assert [m.id for m in log.get_messages("telegram", "7")] == ["t1"]
    assert [m.id for m in log.get_messages("telegram", "-100")] == ["t1"]
    assert log.get_channels("telegram") == ["7"]


def test_sources_and_channels_are_sorted(tmp_path: Path) -> None:
    log = MessageLog(tmp_path)
    _ = log.insert_many(
        [
            stored("a", "u", 1, source="slack", channel="zeta"),
            stored("b", "u", 2, source="slack", channel="alpha"),
            stored("c", "u", 3, source="irc", channel="main"),
        ]
    )

    assert log.get_sources() == ["irc", "slack"]
    assert log.get_channels("slack") == ["alpha", "zeta"]
    assert log.get_channels("unknown") == []
    assert log.get_message("missing") is None


def test_invalid_source_name_is_rejected(tmp_path: Path) -> None:
    log = MessageLog(tmp_path)

    with pytest.raises(InvalidInputError):
        _ = log.insert(stored("a", "u", 1, source="../escape"))


def test_corrupt_line_raises_storage_error(tmp_path: Path) -> None:
    log = MessageLog(tmp_path)
    _ = log.insert(stored("a", "u", 1))
    with (tmp_path / "test.jsonl").open("a", encoding="utf-8") as f:
        _ = f.write("{broken\n")

    with pytest.raises(StorageError):
        _ = log.get_messages("test", "general")


def test_batch_with_invalid_source_stores_nothing(tmp_path: Path) -> None:
    # GIVEN a batch whose second record has an unusable source name
    log = MessageLog(tmp_path)
    batch = [stored("m1", "u1", 10, source="slack"), stored("m2", "u1", 11, source="my team")]

    # WHEN it is inserted
    with pytest.raises(InvalidInputError):
        _ = log.insert_many(batch)

    # THEN not even the valid record was written
    assert log.get_sources() == []
