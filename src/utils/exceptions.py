class InvalidConfigurationError(ValueError):
    """Raised when simulation inputs are missing, non-positive or out of range."""


class ResourceUnavailableError(InvalidConfigurationError):
    """Raised when the parameters source cannot be read or is not a numeric stream."""
