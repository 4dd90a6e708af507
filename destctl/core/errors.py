"""Domain-specific errors for destctl."""


class DestctlError(Exception):
    """Base error for destctl."""


class ConfigValidationError(DestctlError):
    """Raised when the config file does not conform to schema or semantics."""


class ConfigLoadError(DestctlError):
    """Raised when reading the config file fails."""


class ContextUnsetError(DestctlError):
    """Raised when the manager is wired without workspace storage."""


class DestinationSelectionError(DestctlError):
    """Raised when a destination id given for selection cannot be resolved."""


class ProviderError(DestctlError):
    """Raised when a simulator or device provider fails to enumerate."""


class StorageError(DestctlError):
    """Base workspace storage error."""


class StorageReadError(StorageError):
    """Raised when the workspace state file cannot be read or parsed."""


class StorageWriteError(StorageError):
    """Raised when the workspace state file cannot be written."""
