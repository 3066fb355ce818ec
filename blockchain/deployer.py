"""
Contract Deployer
Creates one contract instance and waits for it to be mined
"""

from typing import Callable, Optional, Tuple
from web3 import Web3
from loguru import logger

from utils.exceptions import (
    DeploymentCancelledError,
    DeploymentError,
    InsufficientFundsError,
    InvalidArgumentsError,
    TransactionRevertedError,
)
from .addresses import compute_contract_address, validate_address
from .contract_manager import ContractManager
from .models import ContractArtifact, DeploymentRequest, DeploymentResult
from .transaction_builder import TransactionBuilder
from .wallet_manager import WalletManager


def prepare_constructor_args(artifact: ContractArtifact, args) -> Tuple:
    """
    Check constructor arguments against the ABI

    Address inputs are validated and checksummed. Integer and bool inputs
    given as command-line strings are converted; everything else is
    passed through for web3 to encode.

    Args:
        artifact: Contract artifact
        args: Ordered constructor arguments

    Returns:
        Normalized argument tuple
    """
    inputs = artifact.constructor_inputs

    if len(args) != len(inputs):
        raise InvalidArgumentsError(
            f"{artifact.contract_name} constructor takes {len(inputs)} argument(s), "
            f"got {len(args)}"
        )

    prepared = []
    for index, (abi_input, value) in enumerate(zip(inputs, args)):
        name = abi_input.get('name') or f"argument {index}"
        prepared.append(_coerce_argument(abi_input['type'], value, name))

    return tuple(prepared)


def _coerce_argument(type_str: str, value, name: str):
    if type_str == 'address':
        return validate_address(value, name)

    if not isinstance(value, str):
        return value

    if type_str.startswith(('uint', 'int')) and '[' not in type_str:
        try:
            return int(value, 0)
        except ValueError:
            raise InvalidArgumentsError(f"{name} must be an integer, got {value!r}") from None

    if type_str == 'bool':
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        raise InvalidArgumentsError(f"{name} must be true or false, got {value!r}")

    return value


class ContractDeployer:
    """
    Deploys a contract from a compiled artifact

    One call to deploy() sends exactly one creation transaction. There is
    no retry: any failure propagates to the caller.
    """

    def __init__(
        self,
        w3: Web3,
        wallet: WalletManager,
        contract_manager: ContractManager,
        network_name: str,
        receipt_timeout: float = 300,
        poll_latency: float = 0.5,
        confirm: Optional[Callable[[str], str]] = None
    ):
        """
        Initialize Contract Deployer

        Args:
            w3: Connected Web3 instance
            wallet: Signing wallet
            contract_manager: Artifact resolver
            network_name: Network label for results and logs
            receipt_timeout: Seconds to wait for the receipt
            poll_latency: Seconds between receipt polls
            confirm: Optional prompt callable; anything but "yes" cancels
        """
        self.w3 = w3
        self.wallet = wallet
        self.contract_manager = contract_manager
        self.network_name = network_name
        self.receipt_timeout = receipt_timeout
        self.poll_latency = poll_latency
        self.confirm = confirm

        self.tx_builder = TransactionBuilder(w3, wallet.address)

    def deploy(self, request: DeploymentRequest) -> DeploymentResult:
        """
        Deploy a contract and wait for confirmation

        Args:
            request: Contract name and constructor arguments

        Returns:
            DeploymentResult for the mined creation transaction
        """
        artifact = self.contract_manager.load_artifact(request.contract_name)
        args = prepare_constructor_args(artifact, request.constructor_args)

        logger.info(f"Deploying {artifact.fully_qualified_name} to {self.network_name}")
        logger.info(f"Deploying from: {self.wallet.address}")

        factory = self.contract_manager.get_contract_factory(self.w3, request.contract_name)

        nonce = self.w3.eth.get_transaction_count(self.wallet.address)
        chain_id = self.w3.eth.chain_id

        expected_address = compute_contract_address(self.wallet.address, nonce)
        logger.info(f"Nonce: {nonce}, expected address: {expected_address}")

        transaction = self.tx_builder.build_deployment_tx(factory, args, nonce, chain_id)

        self._check_balance(transaction)
        self._confirm(request, transaction)

        signed_tx = self.wallet.sign_transaction(transaction)

        logger.info("Sending deployment transaction...")
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)

        logger.info(f"Transaction sent: {tx_hash_hex}")
        logger.info("Waiting for confirmation...")

        receipt = self.w3.eth.wait_for_transaction_receipt(
            tx_hash,
            timeout=self.receipt_timeout,
            poll_latency=self.poll_latency
        )

        if receipt['status'] != 1:
            raise TransactionRevertedError(
                f"Deployment transaction {tx_hash_hex} reverted "
                f"in block {receipt['blockNumber']}"
            )

        contract_address = receipt.get('contractAddress')
        if not contract_address:
            raise DeploymentError(f"Receipt for {tx_hash_hex} has no contract address")

        contract_address = Web3.to_checksum_address(contract_address)

        if contract_address != expected_address:
            logger.warning(
                f"Deployed address {contract_address} differs from expected {expected_address}"
            )

        result = DeploymentResult(
            contract_address=contract_address,
            transaction_hash=tx_hash_hex,
            transaction_receipt=receipt,
            network=self.network_name
        )

        logger.success(f"Contract deployed at {result.contract_address}")
        logger.success(f"Gas used: {result.gas_used}, block: {result.block_number}")

        return result

    def _check_balance(self, transaction):
        cost = TransactionBuilder.max_cost_wei(transaction)
        balance = self.wallet.get_balance_wei(self.w3)

        logger.info(f"Estimated deployment cost: {self.w3.from_wei(cost, 'ether')} ETH")
        logger.info(f"Account balance: {self.w3.from_wei(balance, 'ether')} ETH")

        if balance < cost:
            raise InsufficientFundsError(
                f"Insufficient balance for deployment: have {balance} wei, need {cost} wei"
            )

    def _confirm(self, request: DeploymentRequest, transaction):
        if self.confirm is None:
            return

        answer = self.confirm(
            f"\nDeploy {request.display_name} to {self.network_name} "
            f"(gas limit {transaction['gas']})? (yes/no): "
        )

        if answer.strip().lower() != 'yes':
            raise DeploymentCancelledError("Deployment cancelled")
