"""
Blockchain Interaction Package
Artifact loading, transaction building, deployment and source verification
"""

from .addresses import compute_contract_address, validate_address
from .contract_manager import ContractManager
from .deployer import ContractDeployer
from .models import ContractArtifact, DeploymentRequest, DeploymentResult
from .transaction_builder import TransactionBuilder
from .verifier import ContractVerifier
from .wallet_manager import WalletManager

__all__ = [
    'compute_contract_address',
    'validate_address',
    'ContractManager',
    'ContractDeployer',
    'ContractArtifact',
    'DeploymentRequest',
    'DeploymentResult',
    'TransactionBuilder',
    'ContractVerifier',
    'WalletManager'
]
