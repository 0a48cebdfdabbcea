"""Error types for the cross-chain tracker."""


class TrackerError(Exception):
    """Base exception for all tracker errors."""
    pass


class QueryError(TrackerError):
    """Errors from querying an external status service."""
    def __init__(self, message: str, service: str = "", details: str = ""):
        self.service = service
        self.details = details
        super().__init__(f"Query Error [{service}]: {message} - {details}")


class RelayQueryError(QueryError):
    """Errors from the LayerZero scan index."""
    def __init__(self, message: str, details: str = ""):
        super().__init__(message, service="layerzero", details=details)


class AttestationQueryError(QueryError):
    """Errors from the Circle attestation service."""
    def __init__(self, message: str, details: str = ""):
        super().__init__(message, service="circle", details=details)


class ConfigurationError(TrackerError):
    """Errors related to configuration."""
    pass


class UnknownChainError(TrackerError):
    """A chain id has no known CCTP domain."""
    pass


class OperationNotFoundError(TrackerError):
    """No tracked operation with the given id."""
    pass
