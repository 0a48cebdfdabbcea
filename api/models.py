"""Pydantic models for API requests and responses."""

from typing import List, Optional
from pydantic import BaseModel


class StartOperationRequest(BaseModel):
    """Request to start tracking a confirmed source transaction."""
    source_tx_hash: str
    source_chain_id: Optional[int] = None
    message_destination_chain_id: Optional[int] = None  # Where the LayerZero message lands
    destination_chain_id: Optional[int] = None  # Where USDC is minted
    track_transfer: bool = False
    source_domain: Optional[int] = None  # CCTP domain of the burn chain
    token_approved: Optional[bool] = None


class MintReport(BaseModel):
    """Destination-chain mint submitted with an attestation."""
    tx_hash: str


class StepModel(BaseModel):
    """One row of the progress timeline."""
    id: str
    label: str
    status: str  # "pending", "active", "success", "failed", "warning"
    message: Optional[str] = None
    tx_hash: Optional[str] = None
    chain_id: Optional[int] = None
    explorer_url: Optional[str] = None
    destination_tx_hash: Optional[str] = None
    destination_chain_id: Optional[int] = None
    destination_explorer_url: Optional[str] = None
    external_link: Optional[str] = None


class AttestationModel(BaseModel):
    """Hex encoded CCTP attestation."""
    message: str
    attestation: str


class OperationResponse(BaseModel):
    """Current state of a tracked operation."""
    operation_id: str
    source_tx_hash: str
    status: str
    finished: bool
    cancelled: bool
    steps: List[StepModel]
    attestation: Optional[AttestationModel] = None


class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    service: str
    version: str
    operations: int
