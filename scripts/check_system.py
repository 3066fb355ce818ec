"""
System Check Script
Verifies configuration, credentials and connectivity before a deployment

Usage:
    python -m scripts.check_system --network arbitrumSepolia [--contract ZeroxBin]
"""

import os
import sys
import argparse
from typing import Dict, List, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain import ContractManager, WalletManager
from utils import RPCManager, configure_logging, get_network_config, load_deploy_config
from utils.settings import (
    get_artifacts_dir,
    get_explorer_config,
    get_solidity_version,
    required_env_vars,
)

load_dotenv()


def check_environment_variables(ctx: Dict) -> bool:
    """Check if the network's required environment variables are set"""
    logger.info("Checking environment variables...")

    missing = [var for var in required_env_vars(ctx['network_name'], ctx['config'])
               if not os.getenv(var)]

    if missing:
        logger.error(f"Missing environment variables: {', '.join(missing)}")
        return False

    ctx['network'] = get_network_config(ctx['network_name'], ctx['config'])
    logger.success("✓ All environment variables set")
    return True


def check_rpc_connection(ctx: Dict) -> bool:
    """Check the RPC endpoint and its chain id"""
    logger.info("Checking RPC connection...")

    if 'network' not in ctx:
        logger.warning("  Network not resolved - skipping RPC check")
        return False

    ctx['w3'] = RPCManager(ctx['network']).connect()
    logger.success(f"✓ Connected to {ctx['network_name']}")
    return True


def check_wallet_balance(ctx: Dict) -> bool:
    """Check the deployer has funds for gas"""
    logger.info("Checking deployer balance...")

    if 'w3' not in ctx:
        logger.warning("  No RPC connection - skipping balance check")
        return False

    wallet = WalletManager(ctx['network'].private_key)
    balance = wallet.get_balance(ctx['w3'])

    logger.info(f"  Deployer: {balance:.6f} ETH")

    if balance <= 0:
        logger.error("  ✗ Deployer has no funds for gas")
        return False

    logger.success("  ✓ Deployer balance available")
    return True


def check_contract_artifact(ctx: Dict) -> bool:
    """Check the contract is compiled with the pinned compiler"""
    logger.info(f"Checking artifact for {ctx['contract']}...")

    manager = ContractManager(get_artifacts_dir(ctx['config']))
    artifact = manager.load_artifact(ctx['contract'])
    logger.success(f"  ✓ {artifact.fully_qualified_name}")

    pinned = get_solidity_version(ctx['config'])
    if not pinned:
        return True

    build_info = manager.load_build_info(artifact)
    compiled_with = build_info.get('solcVersion')

    if compiled_with != pinned:
        logger.error(f"  ✗ Compiled with solc {compiled_with}, config pins {pinned}")
        return False

    logger.success(f"  ✓ Compiled with solc {compiled_with}")
    return True


def check_explorer_configuration(ctx: Dict) -> bool:
    """Check block explorer verification settings"""
    logger.info("Checking block explorer configuration...")

    explorer = get_explorer_config(ctx['network_name'], ctx['config'])

    if explorer is None:
        logger.info("  No explorer for this network - verification unavailable")
        return True

    if not explorer.api_key:
        logger.warning(f"  {explorer.api_key_env} not set - verification disabled")
        return True

    logger.success(f"  ✓ Explorer configured: {explorer.browser_url}")
    return True


def run_checks(network_name: str, contract: str, config_path: Optional[str] = None) -> List:
    """
    Run all checks in order

    Returns:
        List of (name, passed) tuples
    """
    ctx = {
        'network_name': network_name,
        'contract': contract,
        'config': load_deploy_config(config_path),
    }

    checks = [
        ("Environment Variables", check_environment_variables),
        ("RPC Connection", check_rpc_connection),
        ("Deployer Balance", check_wallet_balance),
        ("Contract Artifact", check_contract_artifact),
        ("Block Explorer", check_explorer_configuration)
    ]

    results = []

    for name, check_func in checks:
        logger.info("")
        try:
            result = check_func(ctx)
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            result = False
        results.append((name, result))

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Run all system checks"""
    parser = argparse.ArgumentParser(description="Pre-deployment system check")
    parser.add_argument("--network", required=True)
    parser.add_argument("--contract", default="ZeroxBin")
    parser.add_argument("--config", default=None)
    args = parser.parse_args(argv)

    configure_logging()

    logger.info("=" * 70)
    logger.info(f"Deployment System Check ({args.network})")
    logger.info("=" * 70)

    try:
        results = run_checks(args.network, args.contract, args.config)
    except Exception as e:
        logger.error(f"Cannot run checks: {e}")
        return 1

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy")
        logger.info(f"Deploy: python -m scripts.deploy_contract --network {args.network}")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
