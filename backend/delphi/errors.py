"""
Error taxonomy for the oracle.

Only configuration, authentication and reload failures leave a component
boundary. Lookup misses and access-denied control directives are ordinary
outcomes of the query path and are never raised.
"""


class OracleError(Exception):
    """Base class for all oracle errors."""


class ConfigurationError(OracleError):
    """A data source or setting is malformed or unreadable.

    Fatal at startup.
    """

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class AuthenticationError(OracleError):
    """The chat server rejected the bot's credentials.

    Fatal: reconnecting with the same token cannot succeed.
    """


class ReloadError(OracleError):
    """A runtime reload could not build a new snapshot.

    The previous snapshot stays authoritative.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)
