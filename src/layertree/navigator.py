"""
TreeNavigator: organizes a flat, reply-linked stream of chat messages into a tree of layers.

Messages are processed one at a time in arrival order. For each message the
navigation strategy decides whether it continues the current layer (append),
opens a new sub-layer (branch) or returns to an existing one (jump). The
navigator applies that decision and reports where the message landed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from layertree.exceptions import DuplicateMessageError, UnrecognizedActionError
from layertree.models import (
    ActionKind,
    Append,
    Branch,
    Jump,
    Layer,
    Message,
    MessageLocation,
    Placement,
    Snapshot,
    TreeNode,
)
from layertree.store import LayerStore
from layertree.strategy import DefaultNavigationStrategy, NavigationStrategy, StoreView

logger = logging.getLogger(__name__)


class TreeNavigator:
    strategy: NavigationStrategy
    _store: LayerStore

    def __init__(self, strategy: NavigationStrategy | None = None) -> None:
        self.strategy = strategy or DefaultNavigationStrategy()
        self._store = LayerStore()
        _ = self._store.create_layer(None, None)

    # ---------- Ingestion ----------

    def process_message(self, message: Message) -> Placement:
        """
        Places a message in the tree and returns the target layer and the action taken.

        Raises:
            DuplicateMessageError: if the message id was already placed.
            UnrecognizedActionError: if the strategy returns an unknown action.
            UnknownLayerError: if the strategy targets a layer that does not exist.
        """
        store = self._store
        if store.has_message(message.id):
            raise DuplicateMessageError(message.id)

        action = self.strategy.decide(StoreView(store), message)

        match action:
            case Append():
                kind = ActionKind.APPEND
                target_layer_id = store.current_layer_id
            case Branch(from_layer_id=from_layer_id):
                kind = ActionKind.BRANCH
                target_layer_id = store.create_layer(from_layer_id, message.reply_to_id).id
                store.move_cursor(target_layer_id)
                logger.debug("Message %s opened layer %s from %s", message.id, target_layer_id, from_layer_id)
            case Jump(to_layer_id=to_layer_id):
                kind = ActionKind.JUMP
                store.move_cursor(to_layer_id)
                target_layer_id = to_layer_id
            case _:
                raise UnrecognizedActionError(action)

        assert target_layer_id is not None
        _ = store.append_message(target_layer_id, message)
        return Placement(layer_id=target_layer_id, action=kind)

    def process_messages(self, messages: Iterable[Message]) -> list[Placement]:
        return [self.process_message(m) for m in messages]

    # ---------- Read accessors ----------

    def get_layer(self, layer_id: str) -> Layer | None:
        return self._store.get_layer(layer_id)

    def get_current_layer_id(self) -> str:
        current = self._store.current_layer_id
        assert current is not None, "The root layer is created on construction."
        return current

    def get_message_location(self, message_id: str) -> MessageLocation | None:
        return self._store.get_message_location(message_id)

    def layer_ids(self) -> list[str]:
        return self._store.layer_ids()

    def render_tree(self) -> TreeNode:
        tree = self._store.render_tree()
        assert tree is not None, "The root layer is created on construction."
        return tree

    # ---------- State ----------

    def export_state(self) -> Snapshot:
        return self._store.to_snapshot()

    def import_state(self, snapshot: Snapshot) -> TreeNavigator:
        """
        Replaces this navigator's state with the snapshot's.

        The new store is fully built before it is swapped in, so a malformed
        snapshot leaves the current state untouched.
        """
        self._store = LayerStore.from_snapshot(snapshot)
        return self

    @classmethod
    def from_state(cls, snapshot: Snapshot, strategy: NavigationStrategy | None = None) -> TreeNavigator:
        return cls(strategy).import_state(snapshot)
