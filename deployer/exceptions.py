"""
Deployment Exceptions
Configuration and deployment error taxonomy
"""

from typing import Optional


class DeployerError(Exception):
    """Base class for all deployer errors"""

    @property
    def kind(self) -> str:
        return type(self).__name__


#
# Configuration errors (fatal at process start)
#

class ConfigError(DeployerError):
    """Environment or network configuration could not be resolved"""


class MissingCredential(ConfigError):
    def __init__(self, variable: str, message: Optional[str] = None):
        self.variable = variable
        super().__init__(message or f"{variable} is not set")


class UnknownNetwork(ConfigError):
    def __init__(self, network: str, known: Optional[list] = None):
        self.network = network
        self.known = sorted(known or [])
        message = f"Unknown network '{network}'"
        if self.known:
            message += f" (configured: {', '.join(self.known)})"
        super().__init__(message)


class InvalidNumericConfig(ConfigError):
    def __init__(self, variable: str, value: str):
        self.variable = variable
        self.value = value
        super().__init__(f"{variable} must be a positive integer, got {value!r}")


#
# Deployment errors (fatal to the current invocation)
#

class DeploymentError(DeployerError):
    """A deployment attempt did not produce a confirmed contract"""


class DeploymentTimeout(DeploymentError):
    """
    Required confirmations were not reached in time

    The transaction's fate is unknown; it is neither retried nor cancelled.
    """

    def __init__(self, message: str, transaction_hash: Optional[str] = None):
        self.transaction_hash = transaction_hash
        super().__init__(message)


class DeploymentFailed(DeploymentError):
    """Submission or execution failed; ``cause`` holds the underlying error"""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        transaction_hash: Optional[str] = None
    ):
        self.cause = cause
        self.transaction_hash = transaction_hash
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ArtifactNotFound(DeployerError):
    def __init__(self, contract_name: str, location: str):
        self.contract_name = contract_name
        self.location = location
        super().__init__(f"No artifact for contract '{contract_name}' at {location}")


class InvalidArtifact(DeployerError):
    def __init__(self, contract_name: str, path: str, reason: str):
        self.contract_name = contract_name
        self.path = path
        super().__init__(f"Artifact for contract '{contract_name}' at {path} is unreadable: {reason}")
