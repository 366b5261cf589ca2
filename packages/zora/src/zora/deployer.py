"""
Coin deployment through the Zora coin factory.

A successful `deploy` is irreversible: the returned address is the single
source of truth for everything that follows. Callers must not retry a
deployment whose transaction was broadcast (`DeploymentError.broadcast`).
"""

import logging
from typing import Any

from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.logs import DISCARD

from zora.exceptions import ChainMismatchError, DeploymentError
from zora.models import DeployParams, DeployResult
from zora.session import TRANSIENT_ERRORS, SigningSession

logger = logging.getLogger(__name__)

WETH_BASE = "0x4200000000000000000000000000000000000006"
DEFAULT_TICK_LOWER = -199200

ZORA_FACTORY_ABI = [
    {
        "type": "function",
        "name": "deploy",
        "stateMutability": "payable",
        "inputs": [
            {"name": "payoutRecipient", "type": "address"},
            {"name": "owners", "type": "address[]"},
            {"name": "uri", "type": "string"},
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
            {"name": "platformReferrer", "type": "address"},
            {"name": "currency", "type": "address"},
            {"name": "tickLower", "type": "int24"},
            {"name": "orderSize", "type": "uint256"},
        ],
        "outputs": [
            {"name": "", "type": "address"},
            {"name": "", "type": "uint256"},
        ],
    },
    {
        "type": "event",
        "name": "CoinCreated",
        "anonymous": False,
        "inputs": [
            {"name": "caller", "type": "address", "indexed": True},
            {"name": "payoutRecipient", "type": "address", "indexed": True},
            {"name": "platformReferrer", "type": "address", "indexed": True},
            {"name": "currency", "type": "address", "indexed": False},
            {"name": "uri", "type": "string", "indexed": False},
            {"name": "name", "type": "string", "indexed": False},
            {"name": "symbol", "type": "string", "indexed": False},
            {"name": "coin", "type": "address", "indexed": False},
            {"name": "pool", "type": "address", "indexed": False},
            {"name": "version", "type": "string", "indexed": False},
        ],
    },
]


class TokenDeployer:
    """Deploys coins from a signing session.

    Attributes:
        session: Signer bound to a chain
        factory_address: Zora factory contract address
        receipt_timeout: Seconds to wait for the deployment to be mined
    """

    def __init__(
        self,
        session: SigningSession,
        factory_address: str,
        currency: str = WETH_BASE,
        receipt_timeout: float = 180.0,
    ):
        self.session = session
        self.factory_address = Web3.to_checksum_address(factory_address)
        self.currency = Web3.to_checksum_address(currency)
        self.receipt_timeout = receipt_timeout

    def _factory(self) -> Any:
        return self.session.w3.eth.contract(
            address=self.factory_address, abi=ZORA_FACTORY_ABI
        )

    async def ensure_chain(self, chain_id: int) -> None:
        """Raise ChainMismatchError unless the session is on `chain_id`."""
        actual = await self.session.chain_id()
        if actual != chain_id:
            raise ChainMismatchError(expected_chain_id=chain_id, actual_chain_id=actual)

    async def deploy(self, params: DeployParams) -> DeployResult:
        """
        Deploy a coin and wait for it to be mined.

        ## Returns
        - `DeployResult` with the new coin's contract address and tx hash.

        ## Raises
        - `ChainMismatchError`: session on another chain; nothing was sent.
        - `DeploymentError`: rejected or RPC unreachable before broadcast
          (`tx_hash` unset), or reverted / unconfirmed / RPC lost after
          broadcast (`tx_hash` set).
        """
        try:
            await self.ensure_chain(params.chain_id)
        except TRANSIENT_ERRORS as e:
            raise DeploymentError(f"RPC unavailable, nothing was sent: {e!r}") from e

        factory = self._factory()
        payout = Web3.to_checksum_address(params.payout_recipient)
        referrer = Web3.to_checksum_address(params.platform_referrer)
        call = factory.functions.deploy(
            payout,
            [payout],
            params.uri,
            params.name,
            params.symbol,
            referrer,
            self.currency,
            DEFAULT_TICK_LOWER,
            0,
        )

        logger.info(f"Deploying {params.symbol} ({params.uri}) on chain {params.chain_id}")
        try:
            tx_hash = await self.session.transact(call, params.chain_id)
        except ContractLogicError as e:
            raise DeploymentError(f"Deployment would revert: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise DeploymentError(f"Deployment rejected: {e}") from e
        except TRANSIENT_ERRORS as e:
            raise DeploymentError(f"RPC unavailable, nothing was sent: {e!r}") from e

        logger.info(f"Deployment broadcast: {tx_hash}")
        try:
            receipt = await self.session.wait_for_receipt(tx_hash, timeout=self.receipt_timeout)
        except TimeExhausted as e:
            raise DeploymentError(
                f"Deployment not confirmed within {self.receipt_timeout}s", tx_hash=tx_hash
            ) from e
        except (Web3Exception, *TRANSIENT_ERRORS) as e:
            raise DeploymentError(
                f"Lost track of deployment receipt: {e!r}", tx_hash=tx_hash
            ) from e

        if receipt.get("status") != 1:
            raise DeploymentError("Deployment transaction reverted", tx_hash=tx_hash)

        try:
            events = factory.events.CoinCreated().process_receipt(receipt, errors=DISCARD)
            coin = events[0]["args"]["coin"] if events else None
            address = Web3.to_checksum_address(coin) if coin else None
        except (Web3Exception, ValueError, KeyError, TypeError) as e:
            raise DeploymentError(
                f"Unreadable CoinCreated event in deployment receipt: {e}", tx_hash=tx_hash
            ) from e
        if address is None:
            raise DeploymentError("No CoinCreated event in deployment receipt", tx_hash=tx_hash)

        logger.info(f"Coin {params.symbol} deployed at {address}")
        return DeployResult(address=address, tx_hash=tx_hash, chain_id=params.chain_id)
