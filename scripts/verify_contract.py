"""
Contract Verification Script
Publishes sources of an already deployed contract to the network's block explorer

Usage:
    python -m scripts.verify_contract --network arbitrumSepolia <address> [constructor args...]
"""

import sys
import asyncio
import argparse
from typing import List, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain import ContractManager, ContractVerifier, validate_address
from blockchain.deployer import prepare_constructor_args
from utils import configure_logging, load_deploy_config
from utils.exceptions import VerificationError
from utils.settings import get_artifacts_dir, get_explorer_config

load_dotenv()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify a deployed contract")
    parser.add_argument("address", help="Deployed contract address")
    parser.add_argument("constructor_args", nargs="*", help="Arguments the contract was deployed with")
    parser.add_argument("--network", required=True)
    parser.add_argument("--contract", default="ZeroxBin")
    parser.add_argument("--config", default=None)
    parser.add_argument("--artifacts", default=None)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_deploy_config(args.config)

        # Verification needs the explorer key only, not the deployer key
        explorer = get_explorer_config(args.network, config)
        if explorer is None:
            raise VerificationError(f"No block explorer configured for {args.network}")

        address = validate_address(args.address, "contract address")

        contract_manager = ContractManager(args.artifacts or get_artifacts_dir(config))
        artifact = contract_manager.load_artifact(args.contract)
        build_info = contract_manager.load_build_info(artifact)
        constructor_args = prepare_constructor_args(artifact, args.constructor_args)

        url = asyncio.run(
            ContractVerifier(explorer).verify(address, artifact, build_info, constructor_args)
        )
        print(url)

    except Exception as e:
        logger.exception(f"Verification failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
