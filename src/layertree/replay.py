"""
Rebuilds a navigator from stored messages, as seen by one viewer.

Stored messages carry raw sender ids; the navigator needs self / other / bot
tags. The viewer's own messages become "self", configured bot ids become
"bot" and everyone else is "other".
"""

from collections import Counter
from collections.abc import Collection, Iterable, Sequence

from layertree.messagelog import StoredMessage
from layertree.models import Message, Sender
from layertree.navigator import TreeNavigator
from layertree.strategy import NavigationStrategy


def resolve_viewer(messages: Sequence[StoredMessage], configured: str | None = None) -> str | None:
    """
    Returns the configured viewer id, else the most frequent sender (first seen wins ties).
    """
    if configured:
        return configured
    if not messages:
        return None
    counts = Counter(m.sender_id for m in messages)
    return counts.most_common(1)[0][0]


def classify_sender(sender_id: str, viewer_id: str | None, bot_ids: Collection[str]) -> Sender:
    if viewer_id is not None and sender_id == str(viewer_id):
        return Sender.SELF
    if sender_id in bot_ids:
        return Sender.BOT
    return Sender.OTHER


def to_message(stored: StoredMessage, viewer_id: str | None, bot_ids: Collection[str]) -> Message:
    return Message(
        id=stored.id,
        sender=classify_sender(stored.sender_id, viewer_id, bot_ids).value,
        content=stored.content,
        timestamp=stored.timestamp,
        reply_to_id=stored.reply_to_id or None,
    )


def build_navigator(
    messages: Iterable[StoredMessage],
    viewer_id: str | None = None,
    bot_ids: Collection[str] = (),
    strategy: NavigationStrategy | None = None,
) -> TreeNavigator:
    """
    Replays messages in the given order into a fresh navigator.

    When no viewer is given, the most frequent sender is taken as "self".
    """
    ordered = list(messages)
    viewer = resolve_viewer(ordered, viewer_id)
    bots = frozenset(str(b) for b in bot_ids)

    nav = TreeNavigator(strategy)
    for stored in ordered:
        _ = nav.process_message(to_message(stored, viewer, bots))
    return nav
