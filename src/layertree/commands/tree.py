from pathlib import Path

import msgspec
import typer
from rich.console import Console

from layertree.console import render_layer_to_rich, render_tree_to_rich
from layertree.exceptions import InvalidInputError, UnknownLayerError
from layertree.models import ActionKind, Message
from layertree.navigator import TreeNavigator
from layertree.serialization import convert, to_builtins, to_json

from .common import load_scope_navigator, read_json_payload


def _print_tree(nav: TreeNavigator, json_output: bool) -> None:
    tree = nav.render_tree()
    if json_output:
        print(to_json(tree).decode("utf-8"))
        return
    Console().print(render_tree_to_rich(tree, nav.get_current_layer_id()))


def tree(source: str, scope: str, json_output: bool, viewer: str | None) -> None:
    _print_tree(load_scope_navigator(source, scope, viewer), json_output)


def layer(source: str, scope: str, layer_id: str, json_output: bool, viewer: str | None) -> None:
    nav = load_scope_navigator(source, scope, viewer)
    found = nav.get_layer(layer_id)
    if found is None:
        raise UnknownLayerError(layer_id)

    if json_output:
        print(to_json(found).decode("utf-8"))
        return
    Console().print(render_layer_to_rich(found))


def view(source: str, scope: str, viewer: str | None) -> None:
    nav = load_scope_navigator(source, scope, viewer)
    response = {
        "tree": to_builtins(nav.render_tree()),
        "currentLayerId": nav.get_current_layer_id(),
        "state": to_builtins(nav.export_state()),
    }
    print(to_json(response).decode("utf-8"))


def replay(file: Path, json_output: bool) -> None:
    payload = read_json_payload(file)
    records = payload if isinstance(payload, list) else [payload]
    try:
        messages = convert(records, list[Message])
    except msgspec.ValidationError as e:
        raise InvalidInputError(f"Invalid message in {file}: {e}") from e

    nav = TreeNavigator()
    placements = nav.process_messages(messages)
    if not json_output:
        branches = sum(1 for p in placements if p.action == ActionKind.BRANCH)
        typer.echo(f"Placed {len(placements)} messages, opened {branches} branches.", err=True)
    _print_tree(nav, json_output)
