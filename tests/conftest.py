"""
Shared test fixtures
"""

import os
import json
import pytest
from loguru import logger

ZEROXBIN_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "_devAddress", "type": "address"}],
        "stateMutability": "nonpayable",
        "type": "constructor"
    },
    {
        "inputs": [],
        "name": "devAddress",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]

ZEROXBIN_BYTECODE = "0x6080604052348015600f57600080fd5b50603f80601d6000396000f3fe"

# Hardhat's first default account
DEPLOYER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# EIP-55 reference vector
DEV_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def write_artifact(
    artifacts_dir,
    source_name,
    contract_name,
    abi,
    bytecode,
    link_references=None,
    build_info_id="f00dfeed",
    solc_version="0.8.27"
):
    """Write a Hardhat-style artifact, debug file and build-info"""
    contract_dir = os.path.join(artifacts_dir, source_name)
    os.makedirs(contract_dir, exist_ok=True)

    artifact_path = os.path.join(contract_dir, f"{contract_name}.json")
    with open(artifact_path, 'w') as f:
        json.dump({
            "_format": "hh-sol-artifact-1",
            "contractName": contract_name,
            "sourceName": source_name,
            "abi": abi,
            "bytecode": bytecode,
            "deployedBytecode": "0x",
            "linkReferences": link_references or {},
            "deployedLinkReferences": {}
        }, f)

    build_info_dir = os.path.join(artifacts_dir, "build-info")
    os.makedirs(build_info_dir, exist_ok=True)

    rel = os.path.relpath(os.path.join(build_info_dir, f"{build_info_id}.json"), contract_dir)
    with open(os.path.join(contract_dir, f"{contract_name}.dbg.json"), 'w') as f:
        json.dump({"_format": "hh-sol-dbg-1", "buildInfo": rel}, f)

    with open(os.path.join(build_info_dir, f"{build_info_id}.json"), 'w') as f:
        json.dump({
            "_format": "hh-sol-build-info-1",
            "id": build_info_id,
            "solcVersion": solc_version,
            "solcLongVersion": f"{solc_version}+commit.40a35a09",
            "input": {
                "language": "Solidity",
                "sources": {source_name: {"content": "// SPDX-License-Identifier: MIT"}},
                "settings": {"optimizer": {"enabled": False, "runs": 200}}
            },
            "output": {}
        }, f)

    return artifact_path


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifacts directory holding a compiled ZeroxBin"""
    path = tmp_path / "artifacts"
    write_artifact(str(path), "contracts/ZeroxBin.sol", "ZeroxBin", ZEROXBIN_ABI, ZEROXBIN_BYTECODE)
    return str(path)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks bound to a finished test's captured streams"""
    yield
    logger.remove()
