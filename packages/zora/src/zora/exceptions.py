"""Exceptions raised by the Zora deployer and stats client."""


class ZoraError(Exception):
    """Base exception for Zora operations.

    Attributes:
        message: Description of the error
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ChainMismatchError(ZoraError):
    """The signing session is bound to a different chain than requested.

    Not retryable without user action: the caller must switch networks
    (or reconfigure the RPC endpoint) first.

    Attributes:
        expected_chain_id: Chain the deployment targets
        actual_chain_id: Chain the session is connected to
    """

    def __init__(self, expected_chain_id: int, actual_chain_id: int) -> None:
        self.expected_chain_id = expected_chain_id
        self.actual_chain_id = actual_chain_id
        super().__init__(
            f"Signing session is on chain {actual_chain_id}, "
            f"deployment targets chain {expected_chain_id}"
        )

    @property
    def remediation(self) -> str:
        return f"Switch the wallet network to chain {self.expected_chain_id} and retry"


class DeploymentError(ZoraError):
    """The deployment transaction was rejected, reverted or never confirmed.

    Attributes:
        tx_hash: Hash of the broadcast transaction, when one exists. A set
            hash means the transaction left this process and may still land.
    """

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        self.tx_hash = tx_hash
        super().__init__(message)

    @property
    def broadcast(self) -> bool:
        return self.tx_hash is not None


class StatsUnavailableError(ZoraError):
    """Live stats for a coin could not be fetched."""

    pass
