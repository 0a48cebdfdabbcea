"""Core types for the cross-chain tracker."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Status(Enum):
    """Lifecycle status of a step."""
    PENDING = "pending"
    ACTIVE = "active"
    SUCCESS = "success"
    FAILED = "failed"
    WARNING = "warning"

    @property
    def is_terminal(self) -> bool:
        return self in (Status.SUCCESS, Status.FAILED)


class StepId(Enum):
    """Identifies a stage of a cross-chain operation."""
    SOURCE_SUBMITTED = "source_submitted"
    MESSAGE_IN_FLIGHT = "message_in_flight"
    MESSAGE_DELIVERED = "message_delivered"
    TOKEN_APPROVED = "token_approved"
    BURN_OBSERVED = "burn_observed"
    ATTESTATION_PENDING = "attestation_pending"
    MINT_OBSERVED = "mint_observed"
    COMPLETE = "complete"


class MessageState(Enum):
    """Observed state of a LayerZero message."""
    IN_FLIGHT = "in_flight"
    DELIVERED = "delivered"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class TransferState(Enum):
    """Observed state of a CCTP attestation."""
    PENDING = "pending"
    SLOW = "slow"
    COMPLETE = "complete"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class StepUpdate:
    """One observation emitted by a tracker."""
    step: StepId
    status: Status
    message: str
    source_tx_hash: str
    external_link: Optional[str] = None
    destination_tx_hash: Optional[str] = None
    classification: Optional[str] = None  # Raw status name from the service
    delay_reason: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class Attestation:
    """Proof payload needed to mint on the destination chain."""
    message: bytes
    attestation: bytes

    def to_hex(self) -> dict:
        return {
            "message": "0x" + self.message.hex(),
            "attestation": "0x" + self.attestation.hex(),
        }


@dataclass
class MessageRecord:
    """First message record returned by the LayerZero scan index."""
    status: str
    src_tx_hash: Optional[str] = None
    dst_tx_hash: Optional[str] = None
    failure_reason: Optional[str] = None


@dataclass
class TransferRecord:
    """First message record returned by the Circle attestation service."""
    status: str
    delay_reason: Optional[str] = None
    message: Optional[str] = None  # Hex encoded
    attestation: Optional[str] = None  # Hex encoded
    mint_recipient: Optional[str] = None
    amount: Optional[str] = None
