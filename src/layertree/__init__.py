"""
layertree: reconstructs the branching structure of reply-linked chat conversations.

The core (models, store, strategy, navigator, snapshot) is pure, in-memory
logic. The message log, ingestion adapters and CLI build on top of it.
"""

from .exceptions import (
    DuplicateMessageError,
    LayerTreeError,
    MalformedSnapshotError,
    UnknownLayerError,
    UnrecognizedActionError,
)
from .labels import layer_label
from .models import (
    SNAPSHOT_VERSION,
    Action,
    ActionKind,
    Append,
    Branch,
    ChildRef,
    Jump,
    Layer,
    Message,
    MessageLocation,
    Placement,
    Sender,
    Snapshot,
    TreeNode,
)
from .navigator import TreeNavigator
from .snapshot import dumps_snapshot, load_snapshot, snapshot_from_builtins, validate_snapshot
from .store import LayerStore
from .strategy import DefaultNavigationStrategy, NavigationStrategy, StoreView

__all__ = [
    "SNAPSHOT_VERSION",
    "Action",
    "ActionKind",
    "Append",
    "Branch",
    "ChildRef",
    "DefaultNavigationStrategy",
    "DuplicateMessageError",
    "Jump",
    "Layer",
    "LayerStore",
    "LayerTreeError",
    "MalformedSnapshotError",
    "Message",
    "MessageLocation",
    "NavigationStrategy",
    "Placement",
    "Sender",
    "Snapshot",
    "StoreView",
    "TreeNavigator",
    "TreeNode",
    "UnknownLayerError",
    "UnrecognizedActionError",
    "dumps_snapshot",
    "layer_label",
    "load_snapshot",
    "snapshot_from_builtins",
    "validate_snapshot",
]
