class LayerTreeError(Exception):
    """Base exception for all expected layertree errors."""

    message: str
    exit_code: int

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class UnknownLayerError(LayerTreeError):
    """An action or lookup referenced a layer id that does not exist."""

    layer_id: str

    def __init__(self, layer_id: str):
        super().__init__(f"Unknown layer: {layer_id}")
        self.layer_id = layer_id


class MalformedSnapshotError(LayerTreeError):
    """A snapshot is missing required fields or describes an inconsistent tree."""


class UnrecognizedActionError(LayerTreeError):
    """A navigation strategy returned something that is not an Append, Branch or Jump."""

    action: object

    def __init__(self, action: object):
        super().__init__(f"Unrecognized navigation action: {action!r}")
        self.action = action


class DuplicateMessageError(LayerTreeError):
    """A message id was submitted that is already placed in the tree."""

    message_id: str

    def __init__(self, message_id: str):
        super().__init__(f"Message already placed: {message_id}")
        self.message_id = message_id


class ConfigurationError(LayerTreeError):
    """Configuration related errors (env vars)."""


class InvalidInputError(LayerTreeError):
    """User input validation errors."""


class StorageError(LayerTreeError):
    """Message log corruption or unreadable storage."""
