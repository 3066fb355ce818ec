"""
Utilities Package
Settings, logging, RPC connection and error types
"""

from .log_config import configure_logging
from .rpc_manager import RPCManager
from .settings import ExplorerConfig, NetworkConfig, get_network_config, load_deploy_config

__all__ = [
    'configure_logging',
    'RPCManager',
    'ExplorerConfig',
    'NetworkConfig',
    'get_network_config',
    'load_deploy_config'
]
