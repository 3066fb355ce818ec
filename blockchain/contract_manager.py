"""
Contract Manager
Resolves compiled Hardhat artifacts into deployable contract factories
"""

import os
import json
from typing import Dict, List
from web3 import Web3
from loguru import logger

from utils.exceptions import ArtifactNotFoundError, InvalidArtifactError
from .models import ContractArtifact


class ContractManager:
    """
    Loads contract blueprints (ABI + creation bytecode) from an artifacts directory
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Contract Manager

        Args:
            artifacts_dir: Hardhat artifacts directory
        """
        self.artifacts_dir = artifacts_dir
        self._cache: Dict[str, ContractArtifact] = {}

    def load_artifact(self, name: str) -> ContractArtifact:
        """
        Resolve a contract by plain or fully qualified name

        Args:
            name: "ZeroxBin" or "contracts/ZeroxBin.sol:ZeroxBin"

        Returns:
            ContractArtifact
        """
        if name in self._cache:
            return self._cache[name]

        if ':' in name:
            path = self._fully_qualified_path(name)
        else:
            path = self._find_by_name(name)

        artifact = self._read_artifact(path)
        self._check_deployable(artifact)

        logger.debug(f"Loaded artifact {artifact.fully_qualified_name} from {path}")

        self._cache[name] = artifact
        return artifact

    def get_contract_factory(self, w3: Web3, name: str):
        """
        Build a Web3 contract factory for deployment

        Args:
            w3: Web3 instance
            name: Contract name

        Returns:
            Web3 contract class with ABI and bytecode bound
        """
        artifact = self.load_artifact(name)
        return w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

    def load_build_info(self, artifact: ContractArtifact) -> Dict:
        """
        Load the solc build-info an artifact was compiled in

        Args:
            artifact: Loaded artifact

        Returns:
            Build-info dict (solcVersion, solcLongVersion, input, output)
        """
        dbg_path = artifact.debug_path

        if not os.path.exists(dbg_path):
            raise ArtifactNotFoundError(
                f"Debug file not found for {artifact.fully_qualified_name}: {dbg_path}"
            )

        with open(dbg_path, 'r') as f:
            dbg = json.load(f)

        build_info_path = os.path.normpath(
            os.path.join(os.path.dirname(dbg_path), dbg['buildInfo'])
        )

        if not os.path.exists(build_info_path):
            raise ArtifactNotFoundError(f"Build info not found: {build_info_path}")

        with open(build_info_path, 'r') as f:
            return json.load(f)

    def _fully_qualified_path(self, name: str) -> str:
        source_name, contract_name = name.rsplit(':', 1)
        path = os.path.join(self.artifacts_dir, source_name, f"{contract_name}.json")

        if not os.path.exists(path):
            raise ArtifactNotFoundError(
                f"Artifact for {name} not found: {path}. Run 'npx hardhat compile' first"
            )

        return path

    def _find_by_name(self, name: str) -> str:
        matches = self._search(name)

        if not matches:
            raise ArtifactNotFoundError(
                f"Contract artifact not found: {name} (searched {self.artifacts_dir}). "
                "Run 'npx hardhat compile' first"
            )

        if len(matches) > 1:
            candidates = ', '.join(
                f"{os.path.relpath(os.path.dirname(p), self.artifacts_dir)}:{name}"
                for p in matches
            )
            raise InvalidArtifactError(
                f"Multiple artifacts match {name}; use a fully qualified name: {candidates}"
            )

        return matches[0]

    def _search(self, name: str) -> List[str]:
        filename = f"{name}.json"
        matches = []

        for root, dirs, files in os.walk(self.artifacts_dir):
            dirs[:] = [d for d in dirs if d != 'build-info']
            if filename in files:
                matches.append(os.path.join(root, filename))

        return sorted(matches)

    def _read_artifact(self, path: str) -> ContractArtifact:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidArtifactError(f"Artifact {path} is not valid JSON: {e}") from e

        try:
            return ContractArtifact(
                contract_name=data['contractName'],
                source_name=data['sourceName'],
                abi=data['abi'],
                bytecode=data['bytecode'],
                path=path,
                link_references=data.get('linkReferences') or {}
            )
        except KeyError as e:
            raise InvalidArtifactError(f"Artifact {path} is missing field {e}") from e

    def _check_deployable(self, artifact: ContractArtifact):
        if not artifact.bytecode or artifact.bytecode in ('0x', '0X'):
            raise InvalidArtifactError(
                f"{artifact.fully_qualified_name} has no creation bytecode "
                "(abstract contract or interface)"
            )

        if artifact.link_references:
            libraries = ', '.join(
                f"{source}:{lib}"
                for source, libs in artifact.link_references.items()
                for lib in libs
            )
            raise InvalidArtifactError(
                f"{artifact.fully_qualified_name} needs library linking: {libraries}"
            )
