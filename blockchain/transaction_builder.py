"""
Transaction Builder
Constructs contract-creation transactions
"""

from typing import Dict, Sequence
from web3 import Web3
from loguru import logger


class TransactionBuilder:
    """
    Builds deployment transactions for a sender
    """

    GAS_BUFFER = 1.2  # 20% over the node's estimate

    def __init__(self, w3: Web3, sender: str):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            sender: Deployer address
        """
        self.w3 = w3
        self.sender = sender

    def build_deployment_tx(
        self,
        contract_factory,
        constructor_args: Sequence,
        nonce: int,
        chain_id: int
    ) -> Dict:
        """
        Build an unsigned contract-creation transaction

        Gas estimation runs the constructor on the node, so a reverting
        constructor raises here before anything is signed.

        Args:
            contract_factory: Web3 contract class with bytecode bound
            constructor_args: Ordered constructor arguments
            nonce: Sender nonce to use
            chain_id: Chain id to sign for

        Returns:
            Transaction dict
        """
        constructor = contract_factory.constructor(*constructor_args)

        gas_estimate = constructor.estimate_gas({'from': self.sender})
        gas_limit = int(gas_estimate * self.GAS_BUFFER)
        gas_price = self.w3.eth.gas_price

        logger.info(f"Gas limit: {gas_limit} (estimate: {gas_estimate})")
        logger.info(f"Gas price: {self.w3.from_wei(gas_price, 'gwei')} gwei")

        return constructor.build_transaction({
            'from': self.sender,
            'nonce': nonce,
            'gas': gas_limit,
            'gasPrice': gas_price,
            'chainId': chain_id
        })

    @staticmethod
    def max_cost_wei(transaction: Dict) -> int:
        """Upper bound on the fee the transaction can spend"""
        return transaction['gas'] * transaction['gasPrice'] + transaction.get('value', 0)
