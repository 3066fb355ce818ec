"""
Deployment Exceptions
Error types raised by the deployment tooling
"""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when network or deployment configuration is invalid."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when a required environment variable is not set."""

    pass


class NetworkNotFoundError(ConfigurationError):
    """Raised when the requested network is not declared in the config."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when no compiled artifact matches the contract name."""

    pass


class InvalidArtifactError(DeploymentError, ValueError):
    """Raised when an artifact is ambiguous, abstract or needs linking."""

    pass


class InvalidAddressError(DeploymentError, ValueError):
    """Raised when a value is not a well-formed chain address."""

    pass


class InvalidArgumentsError(DeploymentError, ValueError):
    """Raised when constructor arguments do not match the contract ABI."""

    pass


class RPCConnectionError(DeploymentError, ConnectionError):
    """Raised when the RPC endpoint cannot be reached."""

    pass


class ChainMismatchError(DeploymentError):
    """Raised when the node reports a different chain id than declared."""

    pass


class InsufficientFundsError(DeploymentError):
    """Raised when the deployer cannot pay for the creation transaction."""

    pass


class TransactionRevertedError(DeploymentError):
    """Raised when the creation transaction is mined with a failed status."""

    pass


class DeploymentCancelledError(DeploymentError):
    """Raised when the operator declines the deployment prompt."""

    pass


class VerificationError(DeploymentError):
    """Raised when block explorer source verification fails."""

    pass
