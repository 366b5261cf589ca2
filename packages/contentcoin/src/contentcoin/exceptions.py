"""Exceptions raised by the coin-creation pipeline."""

from typing import TYPE_CHECKING

from pinata.exceptions import PublishError
from zora.exceptions import DeploymentError

if TYPE_CHECKING:
    from contentcoin.pipeline import PipelineStage


class ValidationError(Exception):
    """Bad or missing input. Raised before any external call is made.

    Attributes:
        message: Description of the error
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ScrapeError(Exception):
    """The scrape service could not extract the article."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class PipelineFailure(Exception):
    """The pipeline stopped before the point of no return.

    Nothing irreversible happened. `cause` is the typed error that stopped it
    (also chained as `__cause__`).

    Attributes:
        stage: Stage that failed
        cause: The underlying error
    """

    def __init__(self, stage: "PipelineStage", cause: Exception) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"Coin creation failed at {stage.value}: {cause}")

    @property
    def retryable(self) -> bool:
        """Whether rerunning the same request may succeed without user action.

        Validation and chain-mismatch failures need the user to change
        something first. A deployment that was broadcast is never retried
        automatically.
        """
        if isinstance(self.cause, (PublishError, ScrapeError)):
            return True
        if isinstance(self.cause, DeploymentError):
            return not self.cause.broadcast
        return False
