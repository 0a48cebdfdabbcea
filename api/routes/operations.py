"""Operation tracking API endpoints."""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, Depends

from api.models import MintReport, OperationResponse, StartOperationRequest
from api.dependencies import get_registry
from core.errors import OperationNotFoundError, TrackerError
from explorer import cctp_domain_for_chain
from registry import OperationRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["operations"])


@router.post("/operations", response_model=OperationResponse, status_code=201)
async def start_operation(
    request: StartOperationRequest,
    registry: OperationRegistry = Depends(get_registry)
):
    """Start tracking a confirmed source transaction.

    Frontend calls this right after the user's transaction is mined.
    """
    source_domain = request.source_domain
    try:
        if request.track_transfer and source_domain is None:
            if request.message_destination_chain_id is None:
                raise TrackerError(
                    "source_domain or message_destination_chain_id is required to track a transfer"
                )
            source_domain = cctp_domain_for_chain(request.message_destination_chain_id)

        operation = registry.create(
            source_tx_hash=request.source_tx_hash,
            track_transfer=request.track_transfer,
            source_domain=source_domain,
            source_chain_id=request.source_chain_id,
            message_destination_chain_id=request.message_destination_chain_id,
            destination_chain_id=request.destination_chain_id,
            token_approved=request.token_approved,
        )
    except TrackerError as e:
        logger.warning(f"Rejected operation for {request.source_tx_hash}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return operation.snapshot()


@router.get("/operations", response_model=List[OperationResponse])
async def list_operations(registry: OperationRegistry = Depends(get_registry)):
    """List every operation tracked in this session."""
    return [operation.snapshot() for operation in registry.operations()]


@router.get("/operations/{operation_id}", response_model=OperationResponse)
async def get_operation(
    operation_id: str,
    registry: OperationRegistry = Depends(get_registry)
):
    """Get the current steps of an operation.

    Frontend polls this when it is not connected to the WebSocket.
    """
    try:
        return registry.get(operation_id).snapshot()
    except OperationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/operations/{operation_id}/mint", response_model=OperationResponse)
async def report_mint(
    operation_id: str,
    report: MintReport,
    registry: OperationRegistry = Depends(get_registry)
):
    """Record the destination-chain mint submitted with the attestation."""
    try:
        operation = registry.get(operation_id)
        await operation.record_mint(report.tx_hash)
    except OperationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TrackerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return operation.snapshot()


@router.delete("/operations/{operation_id}", response_model=OperationResponse)
async def cancel_operation(
    operation_id: str,
    registry: OperationRegistry = Depends(get_registry)
):
    """Stop tracking an operation."""
    try:
        operation = registry.cancel(operation_id)
    except OperationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return operation.snapshot()
