from rich.console import Console

from layertree.console import render_messages_to_rich
from layertree.serialization import to_json

from .common import open_message_log


def sources() -> None:
    names = open_message_log().get_sources()
    if not names:
        print("No sources found.")
        return
    for name in names:
        print(name)


def channels(source: str) -> None:
    scopes = open_message_log().get_channels(source)
    if not scopes:
        print(f"No channels found for source '{source}'.")
        return
    for scope in scopes:
        print(scope)


def messages(source: str, scope: str, json_output: bool) -> None:
    stored = open_message_log().get_messages(source, scope)
    if json_output:
        print(to_json(stored).decode("utf-8"))
        return

    if not stored:
        print(f"No messages found in {source}/{scope}.")
        return
    Console().print(render_messages_to_rich(stored))
