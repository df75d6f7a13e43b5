"""Terminal rendering of layer trees and layers."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from layertree.models import Layer, Sender, TreeNode

if TYPE_CHECKING:
    from rich.table import Table
    from rich.tree import Tree

    from layertree.messagelog import StoredMessage


def configure_logging(verbose: bool) -> None:
    """Routes layertree logging to stderr through rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _node_label(node: TreeNode, current_layer_id: str | None) -> str:
    plural_s = "s" if node.message_count != 1 else ""
    label = f"[bold]{node.id}[/bold] [dim]({node.message_count} message{plural_s})[/dim]"
    if node.branch_from_message_id is not None:
        label += f" [dim]from {node.branch_from_message_id}[/dim]"
    if node.id == current_layer_id:
        label += " [green]<- current[/green]"
    return label


def render_tree_to_rich(node: TreeNode, current_layer_id: str | None = None) -> "Tree":
    """Converts a TreeNode hierarchy into a Rich Tree."""
    from rich.tree import Tree

    def add_children(branch: Tree, parent: TreeNode) -> None:
        for child in parent.children:
            add_children(branch.add(_node_label(child, current_layer_id)), child)

    root = Tree(_node_label(node, current_layer_id))
    add_children(root, node)
    return root


def _snippet(content: object) -> str:
    lines = str(content).strip().splitlines() if content is not None else []
    return lines[0] if lines else ""


def render_layer_to_rich(layer: Layer) -> "Table":
    from rich.table import Table

    title = f"Layer {layer.id}"
    if layer.parent_layer_id is not None:
        title += f" (branched from {layer.parent_layer_id} at {layer.branch_from_message_id})"

    table = Table(title=title, show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Sender")
    table.add_column("Reply To")
    table.add_column("Message Snippet", overflow="ellipsis", min_width=20)

    child_starts = {c.branch_from_message_id for c in layer.children}
    for position, message in enumerate(layer.messages):
        marker = " [yellow]*[/yellow]" if message.id in child_starts else ""
        table.add_row(
            str(position),
            message.id + marker,
            _sender_markup(message.sender),
            message.reply_to_id or "",
            _snippet(message.content),
        )
    return table


def render_messages_to_rich(messages: Sequence["StoredMessage"]) -> "Table":
    from rich.table import Table

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("ID")
    table.add_column("Sender")
    table.add_column("Reply To")
    table.add_column("Timestamp", justify="right")
    table.add_column("Message Snippet", overflow="ellipsis", min_width=20)
    for message in messages:
        table.add_row(
            message.id,
            message.sender_name or message.sender_id,
            message.reply_to_id or "",
            str(message.timestamp),
            _snippet(message.content),
        )
    return table


def _sender_markup(sender: str) -> str:
    tag = sender.value if isinstance(sender, Sender) else sender
    match tag:
        case "self":
            return "[blue]self[/blue]"
        case "bot":
            return "[magenta]bot[/magenta]"
        case _:
            return f"[green]{tag}[/green]"
