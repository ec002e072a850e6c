"""
Transaction Builder
Constructs contract deployment transactions from compiled artifacts
"""

from typing import Dict, List, Sequence

from eth_abi import encode
from web3 import Web3

from blockchain.network_profiles import NetworkProfile


class TransactionBuilder:
    """
    Builds deployment transactions for a network profile

    Gas fields are copied verbatim from the profile; no estimation or
    price adjustment happens here.
    """

    def __init__(self, profile: NetworkProfile):
        """
        Initialize Transaction Builder

        Args:
            profile: Resolved network profile
        """
        self.profile = profile

    def build_deployment_tx(
        self,
        artifact: Dict,
        deployer: str,
        nonce: int,
        constructor_args: Sequence = ()
    ) -> Dict:
        """
        Build an unsigned contract creation transaction

        Args:
            artifact: Compiled artifact with 'bytecode' and 'abi'
            deployer: Sending account address
            nonce: Account nonce to use
            constructor_args: Constructor arguments, in ABI order

        Returns:
            Transaction dict
        """
        tx = {
            'from': Web3.to_checksum_address(deployer),
            'value': 0,
            'nonce': nonce,
            'data': self.encode_deployment_data(artifact, constructor_args),
            'chainId': self.profile.chain_id,
        }
        tx.update(self.profile.gas.as_tx_fields())
        return tx

    def encode_deployment_data(self, artifact: Dict, constructor_args: Sequence = ()) -> str:
        """
        Bytecode followed by ABI-encoded constructor arguments

        Args:
            artifact: Compiled artifact
            constructor_args: Constructor arguments

        Returns:
            0x-prefixed hex string
        """
        bytecode = artifact.get('bytecode') or ''
        if not bytecode.startswith('0x'):
            bytecode = '0x' + bytecode
        if bytecode == '0x':
            raise ValueError("Artifact has no deployable bytecode")

        arg_types = self._constructor_types(artifact.get('abi', []))
        if len(arg_types) != len(constructor_args):
            raise ValueError(
                f"Constructor expects {len(arg_types)} arguments, "
                f"got {len(constructor_args)}"
            )

        if not arg_types:
            return bytecode

        return bytecode + encode(arg_types, list(constructor_args)).hex()

    def _constructor_types(self, abi: List[Dict]) -> List[str]:
        for entry in abi:
            if entry.get('type') == 'constructor':
                return [_abi_type(param) for param in entry.get('inputs', [])]
        return []


def _abi_type(param: Dict) -> str:
    """Canonical type string, expanding tuple components"""
    abi_type = param['type']
    if not abi_type.startswith('tuple'):
        return abi_type

    components = ','.join(_abi_type(component) for component in param.get('components', []))
    return f"({components}){abi_type[len('tuple'):]}"
