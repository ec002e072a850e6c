"""
Network Profiles
Immutable network connection and gas parameters, plus the profile registry
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional


PROJECT_ID_PLACEHOLDER = "{project_id}"


class CredentialRequirement(Enum):
    """Secrets that must be present before a profile is usable"""
    MNEMONIC_ONLY = "mnemonic_only"
    MNEMONIC_AND_PROJECT_ID = "mnemonic_and_project_id"
    NONE = "none"


class PricingMode(Enum):
    LEGACY_GAS_PRICE = "legacy_gas_price"
    EIP1559 = "eip1559"


@dataclass(frozen=True)
class GasSettings:
    """
    Gas parameters for a deployment transaction

    Exactly one pricing branch is populated: ``legacy_gas_price`` for
    LEGACY_GAS_PRICE, ``max_fee_per_gas`` + ``max_priority_fee_per_gas``
    for EIP1559.
    """

    limit: int
    pricing_mode: PricingMode
    legacy_gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError(f"Gas limit must be positive, got {self.limit}")

        if self.pricing_mode is PricingMode.LEGACY_GAS_PRICE:
            if self.legacy_gas_price is None:
                raise ValueError("Legacy pricing requires legacy_gas_price")
            if self.max_fee_per_gas is not None or self.max_priority_fee_per_gas is not None:
                raise ValueError("Legacy pricing must not set EIP-1559 fee fields")
            _require_positive("legacy_gas_price", self.legacy_gas_price)
        else:
            if self.max_fee_per_gas is None or self.max_priority_fee_per_gas is None:
                raise ValueError(
                    "EIP-1559 pricing requires max_fee_per_gas and max_priority_fee_per_gas"
                )
            if self.legacy_gas_price is not None:
                raise ValueError("EIP-1559 pricing must not set legacy_gas_price")
            _require_positive("max_fee_per_gas", self.max_fee_per_gas)
            _require_positive("max_priority_fee_per_gas", self.max_priority_fee_per_gas)
            if self.max_priority_fee_per_gas > self.max_fee_per_gas:
                raise ValueError("max_priority_fee_per_gas cannot exceed max_fee_per_gas")

    def as_tx_fields(self) -> Dict[str, int]:
        """Transaction fields for this pricing branch"""
        if self.pricing_mode is PricingMode.LEGACY_GAS_PRICE:
            return {
                'gas': self.limit,
                'gasPrice': self.legacy_gas_price,
            }
        return {
            'gas': self.limit,
            'maxFeePerGas': self.max_fee_per_gas,
            'maxPriorityFeePerGas': self.max_priority_fee_per_gas,
        }


@dataclass(frozen=True)
class NetworkProfile:
    """
    Named, immutable bundle of network connection and gas parameters

    Built once at startup from the static registry plus environment
    overrides, then shared read-only by the deployment executor.
    """

    name: str
    chain_id: int
    endpoint: str
    credential_requirement: CredentialRequirement
    gas: GasSettings
    timeout_blocks: int
    confirmations_required: int = 2
    env_prefix: str = ""
    strict_chain_id: bool = True
    poll_interval: float = 4.0
    polling_timeout: float = 750.0

    def __post_init__(self):
        if not self.name:
            raise ValueError("Network profile name must be non-empty")
        if self.chain_id <= 0:
            raise ValueError(f"{self.name}: chain id must be positive, got {self.chain_id}")
        if not self.endpoint:
            raise ValueError(f"{self.name}: endpoint must be non-empty")
        if self.confirmations_required < 0:
            raise ValueError(f"{self.name}: confirmations_required must be >= 0")
        if self.timeout_blocks <= 0:
            raise ValueError(f"{self.name}: timeout_blocks must be positive")
        if self.poll_interval < 0 or self.polling_timeout <= 0:
            raise ValueError(f"{self.name}: invalid polling configuration")
        if self.requires_project_id and PROJECT_ID_PLACEHOLDER not in self.endpoint:
            raise ValueError(
                f"{self.name}: endpoint must contain {PROJECT_ID_PLACEHOLDER} "
                f"when a project id is required"
            )

    @property
    def requires_project_id(self) -> bool:
        return self.credential_requirement is CredentialRequirement.MNEMONIC_AND_PROJECT_ID

    def render_endpoint(self, project_id: Optional[str] = None) -> str:
        """
        Build the provider URL, substituting the project id placeholder

        Args:
            project_id: Third-party RPC project identifier

        Returns:
            Endpoint URL
        """
        if PROJECT_ID_PLACEHOLDER not in self.endpoint:
            return self.endpoint
        if not project_id:
            raise ValueError(f"{self.name}: endpoint requires a project id")
        return self.endpoint.replace(PROJECT_ID_PLACEHOLDER, project_id)


def build_registry(profiles: Iterable[NetworkProfile]) -> Dict[str, NetworkProfile]:
    """
    Index profiles by name, rejecting duplicate names and chain ids

    Args:
        profiles: Profiles to register

    Returns:
        Mapping of profile name to profile
    """
    registry: Dict[str, NetworkProfile] = {}
    chain_ids: Dict[int, str] = {}

    for profile in profiles:
        if profile.name in registry:
            raise ValueError(f"Duplicate network profile: {profile.name}")
        if profile.chain_id in chain_ids:
            raise ValueError(
                f"Chain id {profile.chain_id} used by both "
                f"{chain_ids[profile.chain_id]} and {profile.name}"
            )
        registry[profile.name] = profile
        chain_ids[profile.chain_id] = profile.name

    return registry


def _require_positive(name: str, value: int):
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


#
# Defaults
#

DEFAULT_GAS_LIMIT = 4_500_000
DEFAULT_GAS_PRICE = 10_000_000_000  # 10 gwei

MONAD_GAS_LIMIT = 30_000_000
MONAD_MAX_FEE_PER_GAS = 50_000_000_000
MONAD_MAX_PRIORITY_FEE_PER_GAS = 10_000_000_000

_LEGACY_DEFAULT_GAS = GasSettings(
    limit=DEFAULT_GAS_LIMIT,
    pricing_mode=PricingMode.LEGACY_GAS_PRICE,
    legacy_gas_price=DEFAULT_GAS_PRICE,
)

SEPOLIA = NetworkProfile(
    name="sepolia",
    chain_id=11155111,
    endpoint="https://sepolia.infura.io/v3/{project_id}",
    credential_requirement=CredentialRequirement.MNEMONIC_AND_PROJECT_ID,
    gas=_LEGACY_DEFAULT_GAS,
    confirmations_required=2,
    timeout_blocks=200,
)

MAINNET = NetworkProfile(
    name="mainnet",
    chain_id=1,
    endpoint="https://mainnet.infura.io/v3/{project_id}",
    credential_requirement=CredentialRequirement.MNEMONIC_AND_PROJECT_ID,
    gas=_LEGACY_DEFAULT_GAS,
    confirmations_required=2,
    timeout_blocks=200,
)

MONAD_TESTNET = NetworkProfile(
    name="monad_testnet",
    chain_id=10143,
    endpoint="https://testnet-rpc.monad.xyz",
    credential_requirement=CredentialRequirement.MNEMONIC_ONLY,
    gas=GasSettings(
        limit=MONAD_GAS_LIMIT,
        pricing_mode=PricingMode.EIP1559,
        max_fee_per_gas=MONAD_MAX_FEE_PER_GAS,
        max_priority_fee_per_gas=MONAD_MAX_PRIORITY_FEE_PER_GAS,
    ),
    confirmations_required=2,
    timeout_blocks=200,
    env_prefix="MONAD_",
)

# Local Ganache node; accepts whatever chain id the node reports
DEVELOPMENT = NetworkProfile(
    name="development",
    chain_id=1337,
    endpoint="http://127.0.0.1:7545",
    credential_requirement=CredentialRequirement.NONE,
    gas=_LEGACY_DEFAULT_GAS,
    confirmations_required=0,
    timeout_blocks=50,
    strict_chain_id=False,
    poll_interval=1.0,
)

NETWORK_PROFILES = build_registry([SEPOLIA, MAINNET, MONAD_TESTNET, DEVELOPMENT])
