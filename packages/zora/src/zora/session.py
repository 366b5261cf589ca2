"""
Signing session bound to one EVM chain.

Wraps an AsyncWeb3 connection and the local account that signs deployment
transactions. Pre-broadcast reads (chain id, nonce) are retried on
transport errors; broadcasting is never retried here.
"""

import asyncio
import logging
from typing import Any

import aiohttp
import backoff
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from shared_lib.baseclient.exceptions import ConfigurationError

from zora.exceptions import DeploymentError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError)


class SigningSession:
    """An authenticated signer connected to an RPC endpoint.

    Attributes:
        w3: The AsyncWeb3 connection
        account: The local signing account
    """

    def __init__(self, w3: AsyncWeb3, account: LocalAccount):
        self.w3 = w3
        self.account = account

    @classmethod
    def from_private_key(cls, rpc_url: str | None, private_key: str | None) -> "SigningSession":
        """Build a session from configuration.

        Raises:
            ConfigurationError: If the RPC URL or key is missing or invalid.
        """
        if not rpc_url:
            raise ConfigurationError("RPC URL is required for a signing session")
        if not private_key:
            raise ConfigurationError("Deployer private key is required for a signing session")
        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid deployer private key: {e}") from e

        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        logger.info(f"Signing session ready for {account.address}")
        return cls(w3, account)

    @property
    def address(self) -> str:
        return self.account.address

    @backoff.on_exception(backoff.expo, TRANSIENT_ERRORS, max_tries=3)
    async def chain_id(self) -> int:
        """Chain the RPC endpoint is connected to."""
        return await self.w3.eth.chain_id

    @backoff.on_exception(backoff.expo, TRANSIENT_ERRORS, max_tries=3)
    async def _build(self, call: Any, chain_id: int, value: int) -> dict[str, Any]:
        nonce = await self.w3.eth.get_transaction_count(self.address, "pending")
        return await call.build_transaction(
            {
                "from": self.address,
                "nonce": nonce,
                "chainId": chain_id,
                "value": value,
            }
        )

    async def transact(self, call: Any, chain_id: int, value: int = 0) -> str:
        """Build, sign and broadcast a contract call; returns the tx hash.

        Gas estimation happens while building, so a call that would revert
        raises before anything is broadcast.

        Raises:
            DeploymentError: The connection failed while sending. The signed
                transaction may have reached the node, so its hash is attached.
        """
        tx = await self._build(call, chain_id, value)
        signed = self.account.sign_transaction(tx)
        try:
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except TRANSIENT_ERRORS as e:
            raise DeploymentError(
                f"Connection lost while broadcasting: {e!r}", tx_hash=Web3.to_hex(signed.hash)
            ) from e
        return Web3.to_hex(tx_hash)

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 180.0) -> Any:
        return await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)

    async def close(self) -> None:
        provider = self.w3.provider
        if hasattr(provider, "disconnect"):
            await provider.disconnect()
