from abc import ABC, abstractmethod
from typing import final

from layertree.models import Action, Append, Branch, Jump, Layer, Message, MessageLocation, Sender
from layertree.store import LayerStore


@final
class StoreView:
    """Read-only window onto a LayerStore, handed to navigation strategies."""

    def __init__(self, store: LayerStore) -> None:
        self._store = store

    @property
    def current_layer_id(self) -> str | None:
        return self._store.current_layer_id

    def get_layer(self, layer_id: str) -> Layer | None:
        return self._store.get_layer(layer_id)

    def get_message_location(self, message_id: str) -> MessageLocation | None:
        return self._store.get_message_location(message_id)

    def get_message(self, message_id: str) -> Message | None:
        return self._store.get_message(message_id)


class NavigationStrategy(ABC):
    @abstractmethod
    def decide(self, view: StoreView, message: Message) -> Action:
        """Classifies an incoming message as Append, Branch or Jump."""
        ...


class DefaultNavigationStrategy(NavigationStrategy):
    """
    Default conversation-shaping rules:

    1. No reply -> append to the current layer.
    2. Reply to an unknown message -> append (see resolve_unknown_reply).
    3. Bot reply -> jump to the layer of the message it answers.
    4. Reply to someone else's message -> branch from that message's layer.
    5. Reply to your own message -> jump back to that layer, append at its end.
    """

    def decide(self, view: StoreView, message: Message) -> Action:
        if not message.reply_to_id:
            return Append()

        loc = view.get_message_location(message.reply_to_id)
        replied = view.get_message(message.reply_to_id)
        if loc is None or replied is None:
            return self.resolve_unknown_reply(view, message)

        if message.sender == Sender.BOT:
            return Jump(to_layer_id=loc.layer_id)

        if replied.sender != message.sender:
            return Branch(from_layer_id=loc.layer_id)
        return Jump(to_layer_id=loc.layer_id)

    def resolve_unknown_reply(self, view: StoreView, message: Message) -> Action:  # pyright: ignore[reportUnusedParameter]
        """
        Action for a reply whose target has not been seen.

        Processing is single-pass, so the reply is kept where the conversation
        currently is instead of being held back for a target that may never arrive.
        """
        return Append()
