# pyright: standard

from pytest_mock import MockerFixture

from layertree.models import Append, Branch, Jump, MessageLocation, Sender
from layertree.store import LayerStore
from layertree.strategy import DefaultNavigationStrategy, StoreView
from tests.helpers import msg


def _view_with(*placements: tuple[str, str, str]) -> StoreView:
    """Builds a store where each (layer, id, sender) is appended in order; layers A..n are created as needed."""
    store = LayerStore()
    _ = store.create_layer(None, None)
    for layer_id, message_id, sender in placements:
        while not store.has_layer(layer_id):
            _ = store.create_layer("A", None)
        _ = store.append_message(layer_id, msg(message_id, sender))
    return StoreView(store)


def test_message_without_reply_appends() -> None:
    view = _view_with(("A", "1", "other"))
    assert DefaultNavigationStrategy().decide(view, msg("2", "self")) == Append()


def test_reply_to_unknown_message_appends() -> None:
    view = _view_with(("A", "1", "other"))
    assert DefaultNavigationStrategy().decide(view, msg("2", "self", reply_to="404")) == Append()


def test_reply_to_other_sender_branches_from_replied_layer() -> None:
    view = _view_with(("A", "1", "self"), ("B", "2", "other"))
    assert DefaultNavigationStrategy().decide(view, msg("3", "self", reply_to="2")) == Branch(from_layer_id="B")


def test_reply_to_own_message_jumps_to_its_layer() -> None:
    view = _view_with(("A", "1", "self"), ("B", "2", "other"))
    assert DefaultNavigationStrategy().decide(view, msg("3", "self", reply_to="1")) == Jump(to_layer_id="A")


def test_bot_reply_jumps_regardless_of_who_asked() -> None:
    view = _view_with(("A", "1", "self"), ("B", "2", "other"))
    strategy = DefaultNavigationStrategy()

    assert strategy.decide(view, msg("3", "bot", reply_to="2")) == Jump(to_layer_id="B")
    assert strategy.decide(view, msg("4", "bot", reply_to="1")) == Jump(to_layer_id="A")


def test_bot_replying_to_bot_jumps() -> None:
    view = _view_with(("A", "1", "bot"))
    assert DefaultNavigationStrategy().decide(view, msg("2", "bot", reply_to="1")) == Jump(to_layer_id="A")


def test_sender_enum_and_plain_tag_compare_equal() -> None:
    # GIVEN a stored message sent with the enum value
    view = _view_with(("A", "1", Sender.SELF))

    # WHEN the same sender replies using the plain string tag
    action = DefaultNavigationStrategy().decide(view, msg("2", "self", reply_to="1"))

    # THEN it is recognized as the same sender
    assert action == Jump(to_layer_id="A")


def test_custom_sender_tags_branch_when_different() -> None:
    view = _view_with(("A", "1", "alice"))
    assert DefaultNavigationStrategy().decide(view, msg("2", "bob", reply_to="1")) == Branch(from_layer_id="A")


def test_unknown_reply_hook_is_overridable(mocker: MockerFixture) -> None:
    # GIVEN a strategy whose unknown-reply policy is replaced
    strategy = DefaultNavigationStrategy()
    hook = mocker.patch.object(strategy, "resolve_unknown_reply", return_value=Jump(to_layer_id="A"))
    view = _view_with(("A", "1", "other"))
    incoming = msg("2", "self", reply_to="missing")

    # WHEN a reply to an unseen message is decided
    action = strategy.decide(view, incoming)

    # THEN the hook decides
    assert action == Jump(to_layer_id="A")
    hook.assert_called_once_with(view, incoming)


def test_strategy_only_reads_through_the_view(mocker: MockerFixture) -> None:
    # GIVEN a mocked view resolving the replied message
    view = mocker.create_autospec(StoreView, instance=True)
    view.get_message_location.return_value = MessageLocation(layer_id="C", position=0)
    view.get_message.return_value = msg("1", "other")

    # WHEN deciding a reply
    action = DefaultNavigationStrategy().decide(view, msg("2", "self", reply_to="1"))

    # THEN the decision is based on the lookups
    assert action == Branch(from_layer_id="C")
    view.get_message_location.assert_called_once_with("1")
