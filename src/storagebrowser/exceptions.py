"""
Custom exceptions for storagebrowser.

Errors raised by collaborators (the storage client, the remote or local
filesystem) are never wrapped: they reach the caller unchanged. The classes
below cover the failures the browser itself detects.
"""


class StorageBrowserError(Exception):
    """
    Base exception for all storagebrowser errors.

    All custom exceptions in storagebrowser inherit from this class
    to allow for easy catching of all application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(StorageBrowserError):
    """
    Exception raised when configuration is invalid or missing.

    This includes:
    - Missing required configuration keys
    - Invalid configuration values
    - Configuration file parsing errors
    """

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when configuration file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class ConfigValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    pass


# =============================================================================
# Resolution Errors
# =============================================================================


class ResolutionError(StorageBrowserError):
    """Base exception for failures while mapping a path to a remote node."""

    pass


class NodeNotFoundError(ResolutionError):
    """
    Exception raised when a named node is absent from a directory listing.

    Attributes:
        kind: The kind of node that was searched for ("file", "directory" or "node").
        name: The exact name (or hash, for "node") that was searched for.
    """

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"could not find {kind}: {name}")
        self.kind = kind
        self.name = name


class EmptyPathError(ResolutionError):
    """Exception raised when an empty path is given for resolution."""

    def __init__(self) -> None:
        super().__init__("trying to find object node for an empty path")


class ObjectNodeNotFoundError(ResolutionError):
    """Exception raised when a traversal ends without reaching a file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"could not find object node for {path}")
        self.path = path


class RootNodeNotFoundError(ResolutionError):
    """Exception raised when the configured root directory is not found."""

    def __init__(self) -> None:
        super().__init__("failed to get root node hash")


class BrowserNotInitializedError(ResolutionError):
    """Exception raised when a browser is queried before initialize() succeeded."""

    def __init__(self) -> None:
        super().__init__(
            "storage browser is not initialized",
            details="call initialize() before resolving paths",
        )


class BrowserAlreadyInitializedError(ResolutionError):
    """Exception raised when initialize() is called on an initialized browser."""

    def __init__(self) -> None:
        super().__init__(
            "storage browser is already initialized",
            details="create a new browser to initialize again",
        )
