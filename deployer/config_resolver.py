"""
Config Resolver
Validates credentials and resolves a network profile with environment overrides
"""

import os
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from blockchain.network_profiles import (
    NETWORK_PROFILES,
    GasSettings,
    NetworkProfile,
    PricingMode,
)
from deployer.exceptions import InvalidNumericConfig, MissingCredential, UnknownNetwork


MNEMONIC_VAR = 'MNEMONIC'
PROJECT_ID_VAR = 'PROJECT_ID'


def load_environment(env_file: Optional[str] = '.env') -> Dict[str, str]:
    """
    Assemble the raw environment once at startup

    Values from the env file are overlaid by the process environment,
    so exported variables win over the file.

    Args:
        env_file: Path to a dotenv file (None or missing file is skipped)

    Returns:
        Flat mapping of variable name to value
    """
    env: Dict[str, str] = {}

    if env_file and os.path.exists(env_file):
        env.update({
            key: value
            for key, value in dotenv_values(env_file).items()
            if value is not None
        })

    env.update(os.environ)
    return env


@dataclass(frozen=True)
class DeploymentCredentials:
    """Secrets handed to the deployment executor"""

    mnemonic: str
    project_id: Optional[str] = None

    @classmethod
    def from_env(cls, raw_env: Mapping[str, str]) -> 'DeploymentCredentials':
        mnemonic = _get_value(raw_env, MNEMONIC_VAR)
        if mnemonic is None:
            raise MissingCredential(MNEMONIC_VAR)
        return cls(mnemonic=mnemonic, project_id=_get_value(raw_env, PROJECT_ID_VAR))

    def __repr__(self) -> str:
        return f"DeploymentCredentials(mnemonic=<redacted>, project_id={self.project_id!r})"


def is_ethereum_family(
    network: str,
    registry: Mapping[str, NetworkProfile] = NETWORK_PROFILES
) -> bool:
    """True when the named profile needs a third-party RPC project id"""
    profile = registry.get(network)
    return profile is not None and profile.requires_project_id


class ConfigResolver:
    """
    Resolves the requested network into a usable NetworkProfile

    Resolution has no side effects; diagnostics are left to the reporter.
    """

    def __init__(self, registry: Mapping[str, NetworkProfile] = NETWORK_PROFILES):
        self.registry = registry

    def resolve(self, raw_env: Mapping[str, str], requested_network: str) -> NetworkProfile:
        """
        Resolve a profile for the requested network

        Args:
            raw_env: Environment variables
            requested_network: Exact profile name

        Returns:
            Profile with numeric overrides applied

        Raises:
            UnknownNetwork: No profile with that name
            MissingCredential: MNEMONIC absent, or PROJECT_ID absent for a
                network that needs one
            InvalidNumericConfig: A gas override is not a positive integer
        """
        profile = self.registry.get(requested_network)
        if profile is None:
            raise UnknownNetwork(requested_network, list(self.registry))

        if _get_value(raw_env, MNEMONIC_VAR) is None:
            raise MissingCredential(
                MNEMONIC_VAR,
                "MNEMONIC is not set; add your 12-word mnemonic phrase to .env"
            )

        if profile.requires_project_id and _get_value(raw_env, PROJECT_ID_VAR) is None:
            raise MissingCredential(
                PROJECT_ID_VAR,
                f"PROJECT_ID is not set; it is required for the {profile.name} network"
            )

        return replace(profile, gas=self._resolve_gas(raw_env, profile))

    def _resolve_gas(self, raw_env: Mapping[str, str], profile: NetworkProfile) -> GasSettings:
        prefix = profile.env_prefix
        gas = profile.gas

        limit = _get_int(raw_env, f"{prefix}GAS_LIMIT", gas.limit)

        if gas.pricing_mode is PricingMode.LEGACY_GAS_PRICE:
            return replace(
                gas,
                limit=limit,
                legacy_gas_price=_get_int(raw_env, f"{prefix}GAS_PRICE", gas.legacy_gas_price),
            )

        max_fee = _get_int(raw_env, f"{prefix}MAX_FEE_PER_GAS", gas.max_fee_per_gas)
        priority_fee = _get_int(
            raw_env,
            f"{prefix}MAX_PRIORITY_FEE_PER_GAS",
            gas.max_priority_fee_per_gas
        )
        if priority_fee > max_fee:
            raise InvalidNumericConfig(f"{prefix}MAX_PRIORITY_FEE_PER_GAS", str(priority_fee))

        return replace(
            gas,
            limit=limit,
            max_fee_per_gas=max_fee,
            max_priority_fee_per_gas=priority_fee,
        )


def _get_value(raw_env: Mapping[str, str], name: str) -> Optional[str]:
    """Stripped value, or None when unset or blank"""
    value = raw_env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_int(raw_env: Mapping[str, str], name: str, default: int) -> int:
    value = _get_value(raw_env, name)
    if value is None:
        return default

    try:
        number = int(value)
    except ValueError:
        raise InvalidNumericConfig(name, value) from None

    if number <= 0:
        raise InvalidNumericConfig(name, value)
    return number
