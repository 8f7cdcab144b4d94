"""Custom exceptions for kubenav."""


class KubenavError(Exception):
    """Base exception for all kubenav errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class ClusterQueryError(KubenavError):
    """Exception raised when a listing or log fetch against the cluster fails."""

    pass


class ClusterExecError(KubenavError):
    """Exception raised when running a command inside a container fails."""

    pass


class ConnectionSetupError(KubenavError):
    """Exception raised when no usable cluster configuration can be loaded."""

    pass


class ConfigurationError(KubenavError):
    """Exception raised for configuration errors."""

    pass
