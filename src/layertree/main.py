from collections.abc import Sequence
from pathlib import Path
from sys import exit
from typing import Annotated, Any, final, override

import typer
from typer.core import TyperGroup

from layertree.exceptions import LayerTreeError


@final
class LayerTreeGroup(TyperGroup):
    @override
    def main(  # pyright: ignore[reportAny]
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        windows_expand_args: bool = True,
        **extra: Any,  # pyright: ignore[reportAny, reportExplicitAny]
    ) -> Any:  # pyright: ignore[reportExplicitAny]
        try:
            return super().main(args, prog_name, complete_var, standalone_mode, windows_expand_args, **extra)  # pyright: ignore[reportAny]
        except LayerTreeError as e:
            typer.secho(f"Error: {e.message}", err=True, fg=typer.colors.RED)
            exit(e.exit_code)
        except Exception as e:
            typer.secho("Unexpected Internal Error", err=True, fg=typer.colors.RED)
            typer.echo(str(e), err=True)
            exit(1)


app = typer.Typer(cls=LayerTreeGroup, no_args_is_help=True, pretty_exceptions_enable=False)

JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON.")]
ViewerOption = Annotated[
    str | None,
    typer.Option("--viewer", help="Sender id whose messages count as 'self'. Defaults to LAYERTREE_VIEWER_ID."),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """
    Organize reply-linked chat messages into a tree of conversation layers.
    """
    from layertree.console import configure_logging

    configure_logging(verbose)


@app.command("ingest")
def ingest(
    file: Annotated[Path, typer.Argument(help="JSON file with one message record or a list of records.")],
) -> None:
    """
    Store generic message records in the message log.
    """
    from layertree.commands import ingest

    ingest.ingest(file)


@app.command("ingest-telegram")
def ingest_telegram(
    file: Annotated[Path, typer.Argument(help="JSON file with Telegram Bot API message objects.")],
    self_user_id: Annotated[str | None, typer.Option(help="Your own Telegram user id.")] = None,
    channel: Annotated[str | None, typer.Option(help="Override the channel scope for all messages.")] = None,
) -> None:
    """
    Store Telegram messages in the message log.
    """
    from layertree.commands import ingest

    ingest.ingest_telegram(file, self_user_id, channel)


@app.command("sources")
def sources() -> None:
    """
    List message sources.
    """
    from layertree.commands import browse

    browse.sources()


@app.command("channels")
def channels(source: Annotated[str, typer.Argument(help="Message source, e.g. telegram.")]) -> None:
    """
    List channel scopes of a source.
    """
    from layertree.commands import browse

    browse.channels(source)


@app.command("messages")
def messages(
    source: Annotated[str, typer.Argument(help="Message source.")],
    scope: Annotated[str, typer.Argument(help="Channel, topic or chat id.")],
    json_output: JsonOption = False,
) -> None:
    """
    Show the raw messages of a channel in timestamp order.
    """
    from layertree.commands import browse

    browse.messages(source, scope, json_output)


@app.command("tree")
def tree(
    source: Annotated[str, typer.Argument(help="Message source.")],
    scope: Annotated[str, typer.Argument(help="Channel, topic or chat id.")],
    json_output: JsonOption = False,
    viewer: ViewerOption = None,
) -> None:
    """
    Show the layer tree of a channel.
    """
    from layertree.commands import tree

    tree.tree(source, scope, json_output, viewer)


@app.command("layer")
def layer(
    source: Annotated[str, typer.Argument(help="Message source.")],
    scope: Annotated[str, typer.Argument(help="Channel, topic or chat id.")],
    layer_id: Annotated[str, typer.Argument(help="Layer label, e.g. A or B.")],
    json_output: JsonOption = False,
    viewer: ViewerOption = None,
) -> None:
    """
    Show the messages of one layer.
    """
    from layertree.commands import tree

    tree.layer(source, scope, layer_id, json_output, viewer)


@app.command("view")
def view(
    source: Annotated[str, typer.Argument(help="Message source.")],
    scope: Annotated[str, typer.Argument(help="Channel, topic or chat id.")],
    viewer: ViewerOption = None,
) -> None:
    """
    Export tree, current layer and full state of a channel as JSON.
    """
    from layertree.commands import tree

    tree.view(source, scope, viewer)


@app.command("replay")
def replay(
    file: Annotated[Path, typer.Argument(help="JSON list of messages with id, sender and replyToId.")],
    json_output: JsonOption = False,
) -> None:
    """
    Build a tree from a message file without storing anything.
    """
    from layertree.commands import tree

    tree.replay(file, json_output)
