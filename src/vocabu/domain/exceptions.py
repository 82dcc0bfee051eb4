"""Exception hierarchy shared by every layer."""


class VocabuError(Exception):
    """Base class for all errors raised by vocabu."""


class ValidationError(VocabuError):
    """Input rejected at a boundary (bad grade, malformed plan)."""


class NotFoundError(VocabuError):
    """An operation referenced an item that has no scheduling state."""

    def __init__(self, item_id: str):
        super().__init__(f"No card state for item '{item_id}'. Seed it before grading.")
        self.item_id = item_id


class StorageError(VocabuError):
    """The durable store failed to read or write a key."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Storage failure on '{key}': {reason}")
        self.key = key


class CorruptDataError(VocabuError):
    """A stored payload could not be decoded into its entity."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt data under '{key}': {reason}")
        self.key = key
