"""
Blockchain Interaction Package
Network profiles, providers, artifacts, transaction building and nonce management
"""

from .network_profiles import NETWORK_PROFILES, NetworkProfile, GasSettings
from .transaction_builder import TransactionBuilder
from .nonce_manager import NonceManager
from .artifact_store import ArtifactStore, JsonArtifactStore
from .provider import DeploymentProvider, Web3DeploymentProvider

__all__ = [
    'NETWORK_PROFILES',
    'NetworkProfile',
    'GasSettings',
    'TransactionBuilder',
    'NonceManager',
    'ArtifactStore',
    'JsonArtifactStore',
    'DeploymentProvider',
    'Web3DeploymentProvider'
]
