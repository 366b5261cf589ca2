"""Exceptions for the Pinata publisher."""


class PublishError(Exception):
    """Raised when the content-addressed store rejects or fails an upload.

    Nothing irreversible has happened when this is raised; publishing the
    same content again is safe and yields the same identifier.

    Attributes:
        message: Description of the failure
        transient: True when the failure looks retryable (timeouts, 5xx)
    """

    def __init__(self, message: str, transient: bool = False) -> None:
        self.message = message
        self.transient = transient
        super().__init__(self.message)
