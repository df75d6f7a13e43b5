from __future__ import annotations

import logging
from collections.abc import Iterator

from layertree.exceptions import DuplicateMessageError, UnknownLayerError
from layertree.labels import layer_label
from layertree.models import (
    ROOT_LAYER_ID,
    ChildRef,
    Layer,
    Message,
    MessageLocation,
    Snapshot,
    TreeNode,
)
from layertree.snapshot import validate_snapshot

logger = logging.getLogger(__name__)


def _copy_layer(layer: Layer) -> Layer:
    return Layer(
        id=layer.id,
        parent_layer_id=layer.parent_layer_id,
        branch_from_message_id=layer.branch_from_message_id,
        messages=list(layer.messages),
        children=list(layer.children),
    )


class LayerStore:
    """
    Owns all layers, the message index and the current layer cursor.

    - Layers are registered in creation order and labelled A, B, ..., Z, AA, ...
    - Each layer's message list is append-only, so index positions never move.
    - Lookups hand out copies; the only way to mutate is through this class.
    """

    _layers: dict[str, Layer]
    _index: dict[str, MessageLocation]
    _layer_counter: int
    _current_layer_id: str | None

    def __init__(self) -> None:
        self._layers = {}
        self._index = {}
        self._layer_counter = 0
        self._current_layer_id = None

    # ---------- Mutation ----------

    def create_layer(self, parent_layer_id: str | None, branch_from_message_id: str | None) -> Layer:
        """
        Allocates the next label and registers a new layer under the given parent.

        The first layer ever created becomes the current layer.
        """
        parent = None
        if parent_layer_id is not None:
            parent = self._require_layer(parent_layer_id)

        layer = Layer(
            id=layer_label(self._layer_counter),
            parent_layer_id=parent_layer_id,
            branch_from_message_id=branch_from_message_id,
        )
        self._layer_counter += 1
        self._layers[layer.id] = layer

        if self._current_layer_id is None:
            self._current_layer_id = layer.id
        if parent is not None:
            parent.children.append(ChildRef(layer_id=layer.id, branch_from_message_id=branch_from_message_id))

        return _copy_layer(layer)

    def append_message(self, layer_id: str, message: Message) -> int:
        """
        Appends a message to the tail of a layer and indexes it. Returns its position.
        """
        layer = self._require_layer(layer_id)
        if message.id in self._index:
            raise DuplicateMessageError(message.id)

        position = len(layer.messages)
        layer.messages.append(message)
        self._index[message.id] = MessageLocation(layer_id=layer_id, position=position)
        return position

    def move_cursor(self, layer_id: str) -> None:
        _ = self._require_layer(layer_id)
        self._current_layer_id = layer_id

    # ---------- Lookups ----------

    @property
    def current_layer_id(self) -> str | None:
        return self._current_layer_id

    @property
    def layer_counter(self) -> int:
        return self._layer_counter

    @property
    def message_count(self) -> int:
        return len(self._index)

    def get_layer(self, layer_id: str) -> Layer | None:
        layer = self._layers.get(layer_id)
        return _copy_layer(layer) if layer is not None else None

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self._layers

    def layer_ids(self) -> list[str]:
        return list(self._layers)

    def get_message_location(self, message_id: str) -> MessageLocation | None:
        return self._index.get(message_id)

    def has_message(self, message_id: str) -> bool:
        return message_id in self._index

    def get_message(self, message_id: str) -> Message | None:
        loc = self._index.get(message_id)
        if loc is None:
            return None
        return self._layers[loc.layer_id].messages[loc.position]

    # ---------- Projection ----------

    def render_tree(self) -> TreeNode | None:
        """
        Nested view of the layer tree starting at the root.

        Children keep branch creation order, which is also arrival order of
        the replies that opened them.
        """
        root = self._layers.get(ROOT_LAYER_ID)
        if root is None:
            return None
        return self._build_subtree(root, None)

    def _build_subtree(self, layer: Layer, branch_from_message_id: str | None) -> TreeNode:
        return TreeNode(
            id=layer.id,
            message_count=len(layer.messages),
            branch_from_message_id=branch_from_message_id,
            children=[
                self._build_subtree(self._layers[child.layer_id], child.branch_from_message_id)
                for child in layer.children
            ],
        )

    def iter_layers(self) -> Iterator[Layer]:
        """Yields copies of all layers in creation order."""
        for layer in self._layers.values():
            yield _copy_layer(layer)

    def to_snapshot(self) -> Snapshot:
        if self._current_layer_id is None:
            raise UnknownLayerError(ROOT_LAYER_ID)
        return Snapshot(
            layers=list(self.iter_layers()),
            current_layer_id=self._current_layer_id,
            layer_counter=self._layer_counter,
        )

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> LayerStore:
        """
        Builds a store from a validated snapshot, re-deriving the message index
        by scanning layers in creation order, then messages by position.
        """
        validate_snapshot(snapshot)

        store = cls()
        for layer in snapshot.layers:
            copied = _copy_layer(layer)
            store._layers[copied.id] = copied
            for position, message in enumerate(copied.messages):
                store._index[message.id] = MessageLocation(layer_id=copied.id, position=position)

        store._layer_counter = snapshot.layer_counter
        store._current_layer_id = snapshot.current_layer_id
        logger.debug(
            "Rebuilt store with %d layers and %d indexed messages", len(store._layers), len(store._index)
        )
        return store

    # ---------- Internal ----------

    def _require_layer(self, layer_id: str) -> Layer:
        layer = self._layers.get(layer_id)
        if layer is None:
            raise UnknownLayerError(layer_id)
        return layer
