"""Exceptions raised by the Telegram notifier."""


class NotificationError(Exception):
    """A message could not be delivered to the channel.

    Attributes:
        message: Description of the error
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)
