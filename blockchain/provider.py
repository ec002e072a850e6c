"""
Deployment Provider
Signs and submits transactions against a network endpoint
"""

from typing import Dict, List, Optional

from eth_account import Account
from loguru import logger
from web3 import AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

from blockchain.network_profiles import NetworkProfile


# HDWalletProvider's first derived address
DEFAULT_HD_PATH = "m/44'/60'/0'/0/0"

Account.enable_unaudited_hdwallet_features()


def derive_deployer_address(mnemonic: str, account_path: str = DEFAULT_HD_PATH) -> str:
    """
    Address of the account derived from a mnemonic

    Args:
        mnemonic: BIP-39 mnemonic phrase
        account_path: HD derivation path

    Returns:
        Checksummed address
    """
    return Account.from_mnemonic(mnemonic, account_path=account_path).address


class DeploymentProvider:
    """
    Capability the deployment executor depends on

    Any implementation that can sign and submit transactions, expose its
    account list and report blocks and receipts will do. One provider
    serves one deployment and is closed when it finishes.
    """

    async def accounts(self) -> List[str]:
        raise NotImplementedError

    async def chain_id(self) -> int:
        raise NotImplementedError

    async def block_number(self) -> int:
        raise NotImplementedError

    async def get_transaction_count(self, address: str) -> int:
        raise NotImplementedError

    async def send_transaction(self, transaction: Dict) -> str:
        """Sign and submit; returns the 0x transaction hash"""
        raise NotImplementedError

    async def get_receipt(self, transaction_hash: str) -> Optional[Dict]:
        """Receipt dict, or None while the transaction is not yet mined"""
        raise NotImplementedError

    async def close(self):
        pass


class Web3DeploymentProvider(DeploymentProvider):
    """
    web3.py provider with a local signer derived from a mnemonic
    """

    def __init__(self, endpoint: str, mnemonic: str, account_path: str = DEFAULT_HD_PATH):
        """
        Initialize provider

        Args:
            endpoint: HTTP RPC endpoint
            mnemonic: Mnemonic for the signing account
            account_path: HD derivation path
        """
        self.endpoint = endpoint
        self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(endpoint))
        self.account = Account.from_mnemonic(mnemonic, account_path=account_path)

        logger.debug(f"Provider bound to {_redact(endpoint)} for {self.account.address}")

    async def accounts(self) -> List[str]:
        return [self.account.address]

    async def chain_id(self) -> int:
        return await self.w3.eth.chain_id

    async def block_number(self) -> int:
        return await self.w3.eth.block_number

    async def get_transaction_count(self, address: str) -> int:
        return await self.w3.eth.get_transaction_count(
            Web3.to_checksum_address(address),
            'pending'  # Include pending transactions
        )

    async def send_transaction(self, transaction: Dict) -> str:
        unsigned = {key: value for key, value in transaction.items() if key != 'from'}

        signed_tx = self.account.sign_transaction(unsigned)
        tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        return Web3.to_hex(tx_hash)

    async def get_receipt(self, transaction_hash: str) -> Optional[Dict]:
        try:
            receipt = await self.w3.eth.get_transaction_receipt(transaction_hash)
        except TransactionNotFound:
            return None
        return dict(receipt)

    async def close(self):
        await self.w3.provider.disconnect()
        logger.debug(f"Provider for {_redact(self.endpoint)} closed")


def create_provider(profile: NetworkProfile, credentials) -> Web3DeploymentProvider:
    """
    Default provider factory

    Args:
        profile: Resolved network profile
        credentials: DeploymentCredentials with mnemonic and project id

    Returns:
        Provider bound to the profile endpoint
    """
    endpoint = profile.render_endpoint(credentials.project_id)
    return Web3DeploymentProvider(endpoint, credentials.mnemonic)


def _redact(endpoint: str) -> str:
    """Hide the trailing path segment of keyed endpoints (project ids)"""
    if '/v3/' in endpoint:
        return endpoint.rsplit('/', 1)[0] + '/***'
    return endpoint
