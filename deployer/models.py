"""
Deployment Models
Per-invocation request and terminal result of a deployment attempt
"""

from dataclasses import dataclass
from typing import Tuple

from blockchain.network_profiles import NetworkProfile


@dataclass(frozen=True)
class DeploymentRequest:
    """Contract to deploy, the account paying for it, and the target network"""

    contract_name: str
    deployer_account: str
    profile: NetworkProfile
    constructor_args: Tuple = ()

    def __post_init__(self):
        if not self.contract_name:
            raise ValueError("contract_name must be non-empty")
        if not self.deployer_account:
            raise ValueError("deployer_account must be non-empty")


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a deployment that reached its confirmation threshold"""

    contract_name: str
    contract_address: str
    transaction_hash: str
    network: str
    deployer: str
    confirmed_block_count: int
    block_number: int
    gas_used: int
