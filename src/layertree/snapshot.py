"""
Snapshot I/O and structural validation.

A Snapshot is the hand-off format between a TreeNavigator and whatever
persists it. Validation is strict: a snapshot either describes a tree the
navigator could have built itself, or it is rejected as a whole.
"""

import msgspec

from layertree.exceptions import MalformedSnapshotError
from layertree.labels import layer_label
from layertree.models import SNAPSHOT_VERSION, ChildRef, Snapshot
from layertree.serialization import convert, from_json, to_json


def dumps_snapshot(snapshot: Snapshot) -> str:
    """
    Compact single-line JSON for a Snapshot.
    """
    return to_json(snapshot).decode("utf-8")


def load_snapshot(data: str | bytes) -> Snapshot:
    """
    Parse JSON into a Snapshot, mapping decode and schema errors to MalformedSnapshotError.
    """
    try:
        return from_json(Snapshot, data)
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise MalformedSnapshotError(f"Cannot decode snapshot: {e}") from e


def snapshot_from_builtins(obj: object) -> Snapshot:
    """
    Convert plain dicts/lists (e.g. from another JSON library) into a Snapshot.
    """
    try:
        return convert(obj, Snapshot)
    except msgspec.ValidationError as e:
        raise MalformedSnapshotError(f"Invalid snapshot structure: {e}") from e


def validate_snapshot(snapshot: Snapshot) -> None:
    """
    Checks that a snapshot describes a well-formed layer tree.

    Raises:
        MalformedSnapshotError: on the first inconsistency found.
    """
    if snapshot.version != SNAPSHOT_VERSION:
        raise MalformedSnapshotError(f"Unsupported snapshot version: {snapshot.version}")
    if not snapshot.layers:
        raise MalformedSnapshotError("Snapshot contains no layers.")
    if snapshot.layer_counter != len(snapshot.layers):
        raise MalformedSnapshotError(
            f"Layer counter {snapshot.layer_counter} does not match {len(snapshot.layers)} layers."
        )

    seen: set[str] = set()
    expected_children: dict[str, list[ChildRef]] = {}
    for ordinal, layer in enumerate(snapshot.layers):
        if layer.id in seen:
            raise MalformedSnapshotError(f"Duplicate layer id: {layer.id}")
        if layer.id != layer_label(ordinal):
            raise MalformedSnapshotError(
                f"Layer at position {ordinal} has id {layer.id!r}, expected {layer_label(ordinal)!r}."
            )

        if ordinal == 0:
            if layer.parent_layer_id is not None or layer.branch_from_message_id is not None:
                raise MalformedSnapshotError(f"Root layer {layer.id} must not have a parent or branch point.")
        elif layer.parent_layer_id is None:
            raise MalformedSnapshotError(f"Layer {layer.id} has no parent.")
        elif layer.parent_layer_id not in seen:
            # Parents are always created before their children.
            raise MalformedSnapshotError(f"Layer {layer.id} references unknown parent {layer.parent_layer_id}.")
        else:
            expected_children.setdefault(layer.parent_layer_id, []).append(
                ChildRef(layer_id=layer.id, branch_from_message_id=layer.branch_from_message_id)
            )

        seen.add(layer.id)

    for layer in snapshot.layers:
        if list(layer.children) != expected_children.get(layer.id, []):
            raise MalformedSnapshotError(f"Children of layer {layer.id} do not match their parent links.")

    if snapshot.current_layer_id not in seen:
        raise MalformedSnapshotError(f"Current layer {snapshot.current_layer_id} does not exist.")

    message_ids: set[str] = set()
    for layer in snapshot.layers:
        for message in layer.messages:
            if message.id in message_ids:
                raise MalformedSnapshotError(f"Message {message.id} appears more than once.")
            message_ids.add(message.id)

    for layer in snapshot.layers[1:]:
        if layer.branch_from_message_id is not None and layer.branch_from_message_id not in message_ids:
            raise MalformedSnapshotError(
                f"Layer {layer.id} branches from unknown message {layer.branch_from_message_id}."
            )
