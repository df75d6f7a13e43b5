from __future__ import annotations

from enum import Enum
from typing import Any

from msgspec import Struct, field

SNAPSHOT_VERSION = 1
ROOT_LAYER_ID = "A"


class Sender(str, Enum):
    SELF = "self"
    OTHER = "other"
    BOT = "bot"


class ActionKind(str, Enum):
    APPEND = "append"
    BRANCH = "branch"
    JUMP = "jump"


class Message(Struct, frozen=True, rename="camel"):
    """
    A single chat message as consumed by the navigator.

    `sender` is one of the Sender values or a custom tag understood by a
    custom strategy. `content` is opaque and carried through untouched.
    """

    id: str
    sender: str
    content: Any = None
    timestamp: int = 0
    reply_to_id: str | None = None


class MessageLocation(Struct, frozen=True, rename="camel"):
    layer_id: str
    position: int


class ChildRef(Struct, frozen=True, rename="camel"):
    layer_id: str
    branch_from_message_id: str | None


class Layer(Struct, rename="camel"):
    """
    A linear sub-conversation.

    messages is append-only; children records where each child layer departs
    from this one, in branch creation order.
    """

    id: str
    parent_layer_id: str | None = None
    branch_from_message_id: str | None = None
    messages: list[Message] = field(default_factory=list)
    children: list[ChildRef] = field(default_factory=list)


class Append(Struct, frozen=True, tag=ActionKind.APPEND.value, tag_field="kind"):
    pass


class Branch(Struct, frozen=True, tag=ActionKind.BRANCH.value, tag_field="kind", rename="camel"):
    from_layer_id: str


class Jump(Struct, frozen=True, tag=ActionKind.JUMP.value, tag_field="kind", rename="camel"):
    to_layer_id: str


type Action = Append | Branch | Jump


class Placement(Struct, frozen=True, rename="camel"):
    layer_id: str
    action: ActionKind


class TreeNode(Struct, frozen=True, rename="camel"):
    id: str
    message_count: int
    branch_from_message_id: str | None = None
    children: list[TreeNode] = field(default_factory=list)


class Snapshot(Struct, rename="camel"):
    """
    Versioned, serializable copy of a navigator's state.

    layers are listed in creation order. The message index is intentionally
    absent; it is always re-derived from the layers on import.
    """

    layers: list[Layer]
    current_layer_id: str
    layer_counter: int
    version: int = SNAPSHOT_VERSION
