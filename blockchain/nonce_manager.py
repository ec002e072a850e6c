"""
Nonce Manager
Allocates transaction nonces for a single deployment's account
"""

from typing import Optional

from loguru import logger


class NonceManager:
    """
    Manages nonces for one deployer account

    Scoped to one deployment attempt; the starting nonce is synced from the
    account's pending transaction count on first use.
    """

    def __init__(self, provider, address: str):
        """
        Initialize Nonce Manager

        Args:
            provider: Deployment provider exposing get_transaction_count
            address: Deployer address
        """
        self.provider = provider
        self.address = address

        self.current_nonce: Optional[int] = None

    async def _sync_nonce(self):
        """Sync nonce with the chain, including pending transactions"""
        self.current_nonce = await self.provider.get_transaction_count(self.address)
        logger.debug(f"Nonce synced for {self.address}: {self.current_nonce}")

    async def get_nonce(self) -> int:
        """
        Get next available nonce

        Returns:
            Next nonce to use
        """
        if self.current_nonce is None:
            await self._sync_nonce()

        nonce = self.current_nonce
        self.current_nonce += 1

        logger.debug(f"Allocated nonce: {nonce}")
        return nonce
