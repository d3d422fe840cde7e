"""Custom exception classes for daobitat-deploy."""

from typing import Optional


class DeploymentError(Exception):
    """Base exception for deployment workflow errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when deployment settings cannot be interpreted."""

    pass


class MissingCredentialError(DeploymentError, ValueError):
    """Raised when the signing key or account address is absent."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the compiled contract artifact does not exist."""

    pass


class ArtifactParseError(DeploymentError, ValueError):
    """Raised when the compiled contract artifact is not well-formed."""

    pass


class ClassHashMismatchError(ArtifactParseError):
    """Raised when the declared class hash differs from the artifact's own."""

    pass


class NetworkError(DeploymentError, ConnectionError):
    """Raised when the node cannot be reached or does not answer in time."""

    pass


class FinalityTimeoutError(NetworkError, TimeoutError):
    """Raised when a transaction does not reach a terminal status before the deadline."""

    pass


class RejectedTransactionError(DeploymentError, RuntimeError):
    """Raised when the chain rejects or reverts a transaction."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class PersistenceError(DeploymentError, OSError):
    """Raised when the deployment record cannot be written."""

    pass
