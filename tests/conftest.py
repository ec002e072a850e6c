"""
Shared fixtures: a simulated chain provider and test profiles
"""

from dataclasses import replace
from unittest.mock import Mock

import pytest

from blockchain.network_profiles import MONAD_TESTNET, SEPOLIA
from blockchain.provider import DeploymentProvider
from deployer.config_resolver import DeploymentCredentials
from utils.deployment_reporter import OutputSink


DEPLOYER = '0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1'
CONTRACT_ADDRESS = '0xe78A0F7E598Cc8b0Bb87894B0F60dD2a88d6a8Ab'
TX_HASH = '0x' + 'ab' * 32
TEST_MNEMONIC = 'test test test test test test test test test test test junk'


class SimulatedChain(DeploymentProvider):
    """
    In-memory chain that mines one block per block_number() poll

    A submitted transaction is included in the block after submission
    unless ``never_confirm`` is set.
    """

    def __init__(
        self,
        start_block: int = 100,
        chain_id: int = SEPOLIA.chain_id,
        accounts=None,
        never_confirm: bool = False,
        stalled: bool = False,
        status: int = 1,
        send_error: Exception = None
    ):
        self.next_block = start_block
        self.head = start_block
        self._chain_id = chain_id
        self._accounts = accounts if accounts is not None else [DEPLOYER]
        self.never_confirm = never_confirm
        self.stalled = stalled
        self.status = status
        self.send_error = send_error

        self.sent = []
        self.included_at = None
        self.closed = False

    async def accounts(self):
        return list(self._accounts)

    async def chain_id(self):
        return self._chain_id

    async def block_number(self):
        self.head = self.next_block
        if not self.stalled:
            self.next_block += 1
        return self.head

    async def get_transaction_count(self, address):
        return 7

    async def send_transaction(self, transaction):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(transaction)
        self.included_at = self.next_block
        return TX_HASH

    async def get_receipt(self, transaction_hash):
        if self.never_confirm or self.included_at is None or self.head < self.included_at:
            return None
        return {
            'transactionHash': transaction_hash,
            'contractAddress': CONTRACT_ADDRESS,
            'blockNumber': self.included_at,
            'status': self.status,
            'gasUsed': 123456,
        }

    async def close(self):
        self.closed = True


class ListSink(OutputSink):
    """Collects report lines in memory"""

    def __init__(self):
        self.lines = []

    def write(self, line):
        self.lines.append(line)


@pytest.fixture
def profile():
    """Sepolia profile that polls without sleeping"""
    return replace(SEPOLIA, poll_interval=0, polling_timeout=5.0)


@pytest.fixture
def monad_profile():
    return replace(MONAD_TESTNET, poll_interval=0, polling_timeout=5.0)


@pytest.fixture
def credentials():
    return DeploymentCredentials(mnemonic=TEST_MNEMONIC, project_id='abc123')


@pytest.fixture
def artifact():
    return {
        'contract_name': 'DataToZeroAddress',
        'bytecode': '0x6080604052348015600f57600080fd5b50',
        'abi': [],
    }


@pytest.fixture
def artifact_store(artifact):
    store = Mock()
    store.get_artifact.return_value = artifact
    return store


@pytest.fixture
def base_env():
    return {
        'MNEMONIC': TEST_MNEMONIC,
        'PROJECT_ID': 'abc123',
    }
