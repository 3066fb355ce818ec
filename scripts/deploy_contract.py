"""
Smart Contract Deployment Script
Deploys the ZeroxBin contract to an Arbitrum network

Usage:
    python -m scripts.deploy_contract --network arbitrumSepolia --recipient 0x<dev tip address>
"""

import os
import sys
import asyncio
import argparse
from typing import List, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain import (
    ContractDeployer,
    ContractManager,
    ContractVerifier,
    DeploymentRequest,
    DeploymentResult,
    WalletManager,
)
from blockchain.deployer import prepare_constructor_args
from utils import RPCManager, configure_logging, get_network_config, load_deploy_config
from utils.exceptions import InvalidArgumentsError, VerificationError
from utils.settings import NetworkConfig, available_networks, get_artifacts_dir

load_dotenv()

DEFAULT_CONTRACT = "ZeroxBin"
DEFAULT_LABEL = "0xBin"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deploy a compiled contract")
    parser.add_argument(
        "constructor_args",
        nargs="*",
        help="Constructor arguments (default: the --recipient tip address)"
    )
    parser.add_argument(
        "--recipient",
        default=None,
        help="Developer tip address passed to the constructor (default: DEV_ADDRESS)"
    )
    parser.add_argument("--network", required=True, help="Network name from config/deploy_config.json")
    parser.add_argument("--contract", default=DEFAULT_CONTRACT, help="Contract name or source:Name")
    parser.add_argument("--label", default=DEFAULT_LABEL, help="Name printed in the result line")
    parser.add_argument("--config", default=None, help="Path to deployment config JSON")
    parser.add_argument("--artifacts", default=None, help="Hardhat artifacts directory")
    parser.add_argument("--timeout", type=float, default=300, help="Receipt wait timeout in seconds")
    parser.add_argument("--confirm", action="store_true", help="Ask before sending the transaction")
    parser.add_argument("--verify", action="store_true", help="Verify sources on the block explorer")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", default=os.getenv('DEPLOY_LOG_FILE'))
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> DeploymentRequest:
    """Constructor arguments from the command line, falling back to DEV_ADDRESS"""
    constructor_args = list(args.constructor_args)

    if args.recipient and constructor_args:
        raise InvalidArgumentsError(
            "Give the recipient either with --recipient or as a positional argument, not both"
        )

    recipient = args.recipient or os.getenv('DEV_ADDRESS')
    if not constructor_args and recipient:
        constructor_args = [recipient]

    return DeploymentRequest(
        contract_name=args.contract,
        constructor_args=tuple(constructor_args),
        label=args.label
    )


def deploy_contract(
    network: NetworkConfig,
    contract_manager: ContractManager,
    request: DeploymentRequest,
    args: argparse.Namespace
) -> DeploymentResult:
    """
    Deploy one contract instance

    Everything that can be checked locally (artifact, constructor
    arguments, signing key) is checked before the RPC connection opens.
    """
    artifact = contract_manager.load_artifact(request.contract_name)
    prepare_constructor_args(artifact, request.constructor_args)

    wallet = WalletManager(network.private_key)
    w3 = RPCManager(network).connect()

    deployer = ContractDeployer(
        w3,
        wallet,
        contract_manager,
        network.name,
        receipt_timeout=args.timeout,
        confirm=input if args.confirm else None
    )

    return deployer.deploy(request)


def verify_deployment(
    network: NetworkConfig,
    contract_manager: ContractManager,
    request: DeploymentRequest,
    result: DeploymentResult
) -> str:
    """Publish sources for a fresh deployment"""
    if network.explorer is None:
        raise VerificationError(f"No block explorer configured for {network.name}")

    artifact = contract_manager.load_artifact(request.contract_name)
    build_info = contract_manager.load_build_info(artifact)
    constructor_args = prepare_constructor_args(artifact, request.constructor_args)

    verifier = ContractVerifier(network.explorer)
    return asyncio.run(
        verifier.verify(result.contract_address, artifact, build_info, constructor_args)
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Deploy and report

    Returns:
        Process exit code: 0 on confirmed deployment, 1 on any error
    """
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        config = load_deploy_config(args.config)
        logger.debug(f"Declared networks: {', '.join(available_networks(config))}")

        network = get_network_config(args.network, config)
        contract_manager = ContractManager(args.artifacts or get_artifacts_dir(config))
        request = build_request(args)

        result = deploy_contract(network, contract_manager, request, args)

        print(f"{request.display_name} deployed to: {result.contract_address}")

        if args.verify:
            verify_deployment(network, contract_manager, request, result)

    except Exception as e:
        logger.exception(f"Deployment failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
