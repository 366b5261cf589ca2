from zora.client import ZoraClient, parse_coin_stats
from zora.deployer import TokenDeployer, ZORA_FACTORY_ABI
from zora.exceptions import (
    ChainMismatchError,
    DeploymentError,
    StatsUnavailableError,
    ZoraError,
)
from zora.models import CoinStats, DeployParams, DeployResult
from zora.session import SigningSession

__version__ = "0.1.0"

__all__ = [
    # Clients
    "ZoraClient",
    "TokenDeployer",
    "SigningSession",
    "parse_coin_stats",
    "ZORA_FACTORY_ABI",
    # Exceptions
    "ZoraError",
    "ChainMismatchError",
    "DeploymentError",
    "StatsUnavailableError",
    # Models
    "CoinStats",
    "DeployParams",
    "DeployResult",
]
