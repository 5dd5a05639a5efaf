class EdifactError(Exception):
    """Base class for errors raised by the EDIFACT engine."""


class UnsupportedMessageType(EdifactError, ValueError):
    """The dispatcher has no parser for the declared message type."""

    def __init__(self, message_type):
        self.message_type = message_type
        super().__init__(f"Unsupported message type: {message_type}")


class MessageTooLarge(EdifactError):
    """A message holds more segments than the configured limit."""

    def __init__(self, segment_count: int, limit: int):
        self.segment_count = segment_count
        self.limit = limit
        super().__init__(f"Message has {segment_count} segments, limit is {limit}")
