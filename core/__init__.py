"""Core types and errors for the cross-chain tracker."""

from core.errors import (
    TrackerError,
    QueryError,
    RelayQueryError,
    AttestationQueryError,
    ConfigurationError,
    UnknownChainError,
    OperationNotFoundError,
)
from core.types import (
    Status,
    StepId,
    MessageState,
    TransferState,
    StepUpdate,
    Attestation,
    MessageRecord,
    TransferRecord,
)

__all__ = [
    "TrackerError",
    "QueryError",
    "RelayQueryError",
    "AttestationQueryError",
    "ConfigurationError",
    "UnknownChainError",
    "OperationNotFoundError",
    "Status",
    "StepId",
    "MessageState",
    "TransferState",
    "StepUpdate",
    "Attestation",
    "MessageRecord",
    "TransferRecord",
]
