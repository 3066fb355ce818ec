"""
Deployment Settings
Builds network configuration from config/deploy_config.json and the environment
"""

import os
import json
from dataclasses import dataclass
from string import Template
from typing import Dict, List, Mapping, Optional
from loguru import logger

from .exceptions import ConfigurationError, MissingCredentialError, NetworkNotFoundError

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "deploy_config.json")


@dataclass(frozen=True)
class ExplorerConfig:
    """Block explorer endpoints used for source verification"""

    api_url: str
    browser_url: str
    api_key: Optional[str] = None
    api_key_env: Optional[str] = None


@dataclass(frozen=True)
class NetworkConfig:
    """Everything the deployer needs to talk to one network"""

    name: str
    rpc_url: str
    private_key: str
    chain_id: Optional[int] = None
    explorer: Optional[ExplorerConfig] = None

    def __repr__(self):
        # Keep the signing key out of logs and tracebacks
        return (
            f"NetworkConfig(name={self.name!r}, rpc_url={self.rpc_url!r}, "
            f"chain_id={self.chain_id!r})"
        )


def load_deploy_config(config_path: Optional[str] = None) -> Dict:
    """
    Load the raw deployment config file

    Args:
        config_path: Path to JSON config (None = bundled config)

    Returns:
        Parsed config dict
    """
    path = config_path or DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        raise ConfigurationError(f"Deployment config not found: {path}")

    with open(path, 'r') as f:
        return json.load(f)


def available_networks(config: Dict) -> List[str]:
    """Names of all declared networks"""
    return sorted(config.get('networks', {}).keys())


def required_env_vars(network_name: str, config: Dict) -> List[str]:
    """
    Environment variables a network needs before it can deploy

    Args:
        network_name: Network key in the config
        config: Parsed deployment config

    Returns:
        Variable names in the order they are checked
    """
    network = _get_network_entry(network_name, config)

    names = [network.get('private_key_env', 'PRIVATE_KEY')]
    for name in _placeholders(network['url']):
        if name not in names:
            names.append(name)

    return names


def get_network_config(
    network_name: str,
    config: Optional[Dict] = None,
    environ: Optional[Mapping[str, str]] = None
) -> NetworkConfig:
    """
    Resolve a declared network against the environment

    Fails before any connection is attempted when the signing key
    or an interpolated RPC variable is missing.

    Args:
        network_name: Network key in the config (e.g. arbitrumSepolia)
        config: Parsed deployment config (None = bundled config)
        environ: Environment mapping (None = os.environ)

    Returns:
        NetworkConfig
    """
    config = config if config is not None else load_deploy_config()
    environ = environ if environ is not None else os.environ

    network = _get_network_entry(network_name, config)

    key_env = network.get('private_key_env', 'PRIVATE_KEY')
    private_key = (environ.get(key_env) or '').strip()
    if not private_key:
        raise MissingCredentialError(f"{key_env} must be set to deploy on {network_name}")

    missing = [name for name in _placeholders(network['url']) if not environ.get(name)]
    if missing:
        raise MissingCredentialError(
            f"Missing environment variables for {network_name}: {', '.join(missing)}"
        )

    rpc_url = Template(network['url']).substitute(environ)

    chain_id = network.get('chain_id')
    if chain_id is not None:
        chain_id = int(chain_id)

    explorer = get_explorer_config(network_name, config, environ)

    logger.debug(f"Resolved network {network_name} (chain id: {chain_id})")

    return NetworkConfig(
        name=network_name,
        rpc_url=rpc_url,
        private_key=private_key,
        chain_id=chain_id,
        explorer=explorer
    )


def get_explorer_config(
    network_name: str,
    config: Dict,
    environ: Optional[Mapping[str, str]] = None
) -> Optional[ExplorerConfig]:
    """
    Explorer settings for a network, without requiring the signing key

    Returns:
        ExplorerConfig, or None when the network has no explorer
    """
    environ = environ if environ is not None else os.environ

    entry = _get_network_entry(network_name, config).get('explorer')
    if not entry:
        return None

    api_key_env = entry.get('api_key_env')
    return ExplorerConfig(
        api_url=entry['api_url'],
        browser_url=entry['browser_url'],
        api_key=environ.get(api_key_env) if api_key_env else None,
        api_key_env=api_key_env
    )


def get_artifacts_dir(config: Dict) -> str:
    """Artifacts directory, relative paths resolved against the project root"""
    path = config.get('paths', {}).get('artifacts', 'artifacts')
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


def get_solidity_version(config: Dict) -> Optional[str]:
    """Pinned compiler version, if any"""
    return config.get('solidity', {}).get('version')


def _get_network_entry(network_name: str, config: Dict) -> Dict:
    networks = config.get('networks', {})

    if network_name not in networks:
        raise NetworkNotFoundError(
            f"Unknown network '{network_name}'. "
            f"Available: {', '.join(available_networks(config))}"
        )

    return networks[network_name]


def _placeholders(template: str) -> List[str]:
    names = []
    for match in Template.pattern.finditer(template):
        name = match.group('named') or match.group('braced')
        if name and name not in names:
            names.append(name)
    return names
