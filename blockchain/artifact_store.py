"""
Artifact Store
Loads compiled contract artifacts (bytecode + ABI) by contract name
"""

import json
import os
from typing import Dict, List

from loguru import logger

from deployer.exceptions import ArtifactNotFound, InvalidArtifact


DEFAULT_ARTIFACTS_DIR = "build/contracts"


class ArtifactStore:
    """Resolves a contract name to its compiled bytecode and ABI"""

    def get_artifact(self, contract_name: str) -> Dict:
        raise NotImplementedError


class JsonArtifactStore(ArtifactStore):
    """
    Reads compiler build output from disk

    Supports the flat truffle layout (``build/contracts/Name.json``) and the
    hardhat layout (``artifacts/contracts/Name.sol/Name.json``).
    """

    def __init__(self, artifacts_dir: str = DEFAULT_ARTIFACTS_DIR):
        """
        Initialize Artifact Store

        Args:
            artifacts_dir: Directory holding compiled artifacts
        """
        self.artifacts_dir = artifacts_dir

    def _candidate_paths(self, contract_name: str) -> List[str]:
        return [
            os.path.join(self.artifacts_dir, f"{contract_name}.json"),
            os.path.join(self.artifacts_dir, f"{contract_name}.sol", f"{contract_name}.json"),
        ]

    def get_artifact(self, contract_name: str) -> Dict:
        """
        Load an artifact

        Args:
            contract_name: Contract name as compiled

        Returns:
            Dict with 'contract_name', 'bytecode' and 'abi'
        """
        for path in self._candidate_paths(contract_name):
            if not os.path.exists(path):
                continue

            try:
                with open(path, 'r') as f:
                    contract_json = json.load(f)
            except (OSError, ValueError) as e:
                raise InvalidArtifact(contract_name, path, str(e)) from e

            if not isinstance(contract_json, dict):
                raise InvalidArtifact(contract_name, path, "expected a JSON object")

            bytecode = contract_json.get('bytecode')
            # foundry output nests the hex under "object"
            if isinstance(bytecode, dict):
                bytecode = bytecode.get('object')

            logger.debug(f"Loaded artifact for {contract_name} from {path}")
            return {
                'contract_name': contract_json.get('contractName', contract_name),
                'bytecode': bytecode or '',
                'abi': contract_json.get('abi', []),
            }

        raise ArtifactNotFound(contract_name, self.artifacts_dir)
