from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from layertree.config import Settings, load_settings
from layertree.exceptions import InvalidInputError
from layertree.messagelog import MessageLog
from layertree.navigator import TreeNavigator
from layertree.replay import build_navigator

type JsonPayload = dict[str, Any] | list[dict[str, Any]]  # pyright: ignore[reportExplicitAny]

_PAYLOAD_ADAPTER: TypeAdapter[JsonPayload] = TypeAdapter(dict[str, Any] | list[dict[str, Any]])


def open_message_log(settings: Settings | None = None) -> MessageLog:
    settings = settings or load_settings()
    return MessageLog(settings.log_dir)


def read_json_payload(path: Path) -> JsonPayload:
    """
    Reads a JSON file holding either one object or a list of objects.
    """
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidInputError(f"Cannot read {path}: {e}") from e

    try:
        return _PAYLOAD_ADAPTER.validate_json(raw_text)
    except ValidationError as e:
        raise InvalidInputError(f"{path} must contain a JSON object or a list of objects") from e


def load_scope_navigator(source: str, scope: str, viewer: str | None = None) -> TreeNavigator:
    """
    Rebuilds the tree of one source/scope from the message log.
    """
    settings = load_settings()
    log = open_message_log(settings)
    return build_navigator(
        log.get_messages(source, scope),
        viewer_id=viewer or settings.viewer_id,
        bot_ids=settings.bot_ids,
    )
