"""
Wallet Manager
Holds the deploying account and signs its transactions
"""

from decimal import Decimal
from typing import Dict
from web3 import Web3
from eth_account import Account
from eth_utils import ValidationError
from loguru import logger

from utils.exceptions import ConfigurationError


class WalletManager:
    """
    Single signing account loaded from a private key
    """

    def __init__(self, private_key: str):
        """
        Initialize wallet manager

        Args:
            private_key: Hex private key, with or without 0x prefix
        """
        try:
            self.account = Account.from_key(private_key)
        except (ValueError, TypeError, ValidationError) as e:
            # Never echo the key itself
            raise ConfigurationError(f"Invalid private key: {type(e).__name__}") from None

        self.address = self.account.address

        logger.info(f"Deployer wallet: {self.address}")

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        return self.account.sign_transaction(transaction)

    def get_balance_wei(self, w3: Web3) -> int:
        """Native balance in wei"""
        return w3.eth.get_balance(self.address)

    def get_balance(self, w3: Web3) -> Decimal:
        """Native balance in ether"""
        return Decimal(str(w3.from_wei(self.get_balance_wei(w3), 'ether')))
