"""
RPC Manager
Opens the Web3 connection for the selected deployment network
"""

from typing import Optional
from web3 import Web3
from loguru import logger

from .exceptions import ChainMismatchError, RPCConnectionError
from .settings import NetworkConfig


class RPCManager:
    """
    Single-endpoint RPC connection

    Mirrors what Hardhat does on network selection: connect to the
    configured URL and, when the network declares a chain id, refuse
    to continue if the node reports a different one.
    """

    def __init__(self, network: NetworkConfig, request_timeout: int = 30):
        """
        Initialize RPC Manager

        Args:
            network: Resolved network configuration
            request_timeout: HTTP request timeout in seconds
        """
        self.network = network
        self.request_timeout = request_timeout
        self.w3: Optional[Web3] = None

    def connect(self) -> Web3:
        """
        Connect and check the chain id

        Returns:
            Connected Web3 instance
        """
        if self.w3 is not None:
            return self.w3

        w3 = Web3(Web3.HTTPProvider(
            self.network.rpc_url,
            request_kwargs={'timeout': self.request_timeout}
        ))

        if not w3.is_connected():
            raise RPCConnectionError(f"Failed to connect to {self.network.name} RPC endpoint")

        chain_id = w3.eth.chain_id

        if self.network.chain_id is not None and chain_id != self.network.chain_id:
            raise ChainMismatchError(
                f"Network {self.network.name} declares chain id {self.network.chain_id} "
                f"but the node reports {chain_id}"
            )

        self.w3 = w3

        logger.info(f"Connected to {self.network.name} (chain id: {chain_id}, "
                    f"block: {w3.eth.block_number})")
        return w3
