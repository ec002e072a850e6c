"""
Deployment Executor
Submits a contract deployment and waits for the required confirmations
"""

import asyncio
from typing import Callable, Dict, Tuple

from loguru import logger

from blockchain.artifact_store import ArtifactStore
from blockchain.network_profiles import NetworkProfile
from blockchain.nonce_manager import NonceManager
from blockchain.provider import DeploymentProvider, create_provider
from blockchain.transaction_builder import TransactionBuilder
from deployer.config_resolver import DeploymentCredentials
from deployer.exceptions import DeployerError, DeploymentFailed, DeploymentTimeout
from deployer.models import DeploymentRequest, DeploymentResult


ProviderFactory = Callable[[NetworkProfile, DeploymentCredentials], DeploymentProvider]


class DeploymentExecutor:
    """
    Runs a single deployment attempt per call

    No retries: a failed or timed-out attempt is terminal, and re-deploying
    is an explicit re-invocation by the operator.
    """

    def __init__(
        self,
        credentials: DeploymentCredentials,
        artifact_store: ArtifactStore,
        provider_factory: ProviderFactory = create_provider
    ):
        """
        Initialize Deployment Executor

        Args:
            credentials: Mnemonic and project id
            artifact_store: Source of compiled bytecode and ABI
            provider_factory: Builds a provider for a profile
        """
        self.credentials = credentials
        self.artifact_store = artifact_store
        self.provider_factory = provider_factory

    async def deploy(self, request: DeploymentRequest) -> DeploymentResult:
        """
        Deploy a contract and wait for confirmations

        Args:
            request: Contract, deployer and target profile

        Returns:
            DeploymentResult once the confirmation threshold is met

        Raises:
            DeploymentTimeout: Threshold not reached within the profile's bounds
            DeploymentFailed: Artifact, provider or transaction failure
        """
        profile = request.profile

        try:
            artifact = self.artifact_store.get_artifact(request.contract_name)
        except Exception as e:
            raise DeploymentFailed(f"Cannot load artifact for {request.contract_name}", e) from e

        try:
            provider = self.provider_factory(profile, self.credentials)
        except Exception as e:
            raise DeploymentFailed(f"Cannot connect to {profile.name}", e) from e

        try:
            return await self._deploy_with(provider, request, artifact)
        except DeployerError:
            raise
        except Exception as e:
            raise DeploymentFailed(f"Deployment of {request.contract_name} failed", e) from e
        finally:
            await self._release(provider)

    async def _deploy_with(
        self,
        provider: DeploymentProvider,
        request: DeploymentRequest,
        artifact: Dict
    ) -> DeploymentResult:
        profile = request.profile

        await self._check_provider(provider, request)

        nonce_manager = NonceManager(provider, request.deployer_account)
        nonce = await nonce_manager.get_nonce()
        transaction = TransactionBuilder(profile).build_deployment_tx(
            artifact,
            request.deployer_account,
            nonce,
            request.constructor_args
        )

        start_block = await provider.block_number()

        logger.info(f"Sending {request.contract_name} deployment to {profile.name} (nonce {nonce})")
        tx_hash = await provider.send_transaction(transaction)
        logger.info(f"Transaction sent: {tx_hash}")
        logger.info(
            f"Waiting for {profile.confirmations_required} confirmation(s) "
            f"(timeout: {profile.timeout_blocks} blocks)"
        )

        try:
            receipt, confirmations = await asyncio.wait_for(
                self._await_confirmations(provider, profile, tx_hash, start_block),
                timeout=profile.polling_timeout
            )
        except asyncio.TimeoutError:
            raise DeploymentTimeout(
                f"No confirmation for {tx_hash} after {profile.polling_timeout:.0f}s",
                transaction_hash=tx_hash
            ) from None

        logger.success(f"{request.contract_name} deployed at {receipt['contractAddress']}")

        return DeploymentResult(
            contract_name=request.contract_name,
            contract_address=receipt['contractAddress'],
            transaction_hash=tx_hash,
            network=profile.name,
            deployer=request.deployer_account,
            confirmed_block_count=confirmations,
            block_number=receipt['blockNumber'],
            gas_used=receipt.get('gasUsed', 0),
        )

    async def _check_provider(self, provider: DeploymentProvider, request: DeploymentRequest):
        """Deployer must be a provider account; chain id must match strict profiles"""
        profile = request.profile

        accounts = [account.lower() for account in await provider.accounts()]
        if request.deployer_account.lower() not in accounts:
            raise DeploymentFailed(
                f"Deployer {request.deployer_account} is not an account of the {profile.name} provider"
            )

        if profile.strict_chain_id:
            chain_id = await provider.chain_id()
            if chain_id != profile.chain_id:
                raise DeploymentFailed(
                    f"Endpoint for {profile.name} reports chain id {chain_id}, "
                    f"expected {profile.chain_id}"
                )

    async def _await_confirmations(
        self,
        provider: DeploymentProvider,
        profile: NetworkProfile,
        tx_hash: str,
        start_block: int
    ) -> Tuple[Dict, int]:
        """
        Poll until the receipt has enough confirmations

        Progress is re-checked on every new block. Inclusion counts as the
        first confirmation.
        """
        receipt = None
        last_block = None

        while True:
            current_block = await provider.block_number()

            if current_block != last_block:
                last_block = current_block

                if receipt is None:
                    receipt = await provider.get_receipt(tx_hash)
                    if receipt is not None:
                        logger.info(f"Transaction included in block {receipt['blockNumber']}")
                        if receipt.get('status', 1) == 0:
                            raise DeploymentFailed(
                                f"Deployment transaction {tx_hash} reverted",
                                transaction_hash=tx_hash
                            )

                if receipt is not None:
                    confirmations = current_block - receipt['blockNumber'] + 1
                    logger.debug(f"{tx_hash}: {confirmations} confirmation(s)")
                    if confirmations >= profile.confirmations_required:
                        return receipt, confirmations

                if current_block - start_block >= profile.timeout_blocks:
                    raise DeploymentTimeout(
                        f"Required confirmations not reached within "
                        f"{profile.timeout_blocks} blocks",
                        transaction_hash=tx_hash
                    )

            await asyncio.sleep(profile.poll_interval)

    async def _release(self, provider: DeploymentProvider):
        try:
            await provider.close()
        except Exception as e:
            logger.warning(f"Error closing provider: {e}")
