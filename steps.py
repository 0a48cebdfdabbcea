"""Build display steps from observed cross-chain state.

Everything here is a pure function of its input: no trackers are started and
nothing is fetched. Callers re-run the builders whenever a tracker reports a
change.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.types import MessageState, Status, StepId, TransferState
from explorer import explorer_tx_url

DEFAULT_BURN_CHAIN_ID = 42161  # Arbitrum One hosts the native job contract


@dataclass
class Step:
    """One row of the progress timeline."""
    id: StepId
    label: str
    status: Status
    message: Optional[str] = None
    tx_hash: Optional[str] = None
    chain_id: Optional[int] = None
    destination_tx_hash: Optional[str] = None
    destination_chain_id: Optional[int] = None
    external_link: Optional[str] = None

    @property
    def explorer_url(self) -> Optional[str]:
        return explorer_tx_url(self.tx_hash, self.chain_id)

    @property
    def destination_explorer_url(self) -> Optional[str]:
        return explorer_tx_url(self.destination_tx_hash, self.destination_chain_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "label": self.label,
            "status": self.status.value,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "chain_id": self.chain_id,
            "explorer_url": self.explorer_url,
            "destination_tx_hash": self.destination_tx_hash,
            "destination_chain_id": self.destination_chain_id,
            "destination_explorer_url": self.destination_explorer_url,
            "external_link": self.external_link,
        }


@dataclass
class MessageFlowState:
    """Observed facts for a message-only operation."""
    source_tx_hash: Optional[str] = None
    source_chain_id: Optional[int] = None
    message_state: Optional[MessageState] = None
    message_detail: Optional[str] = None
    message_link: Optional[str] = None
    destination_tx_hash: Optional[str] = None
    destination_chain_id: Optional[int] = None


@dataclass
class TransferFlowState:
    """Observed facts for an operation that also moves USDC over CCTP."""
    source_tx_hash: Optional[str] = None
    source_chain_id: Optional[int] = None
    token_approved: Optional[bool] = None  # None: no approval step
    message_state: Optional[MessageState] = None
    message_detail: Optional[str] = None
    message_link: Optional[str] = None
    message_destination_tx_hash: Optional[str] = None
    message_destination_chain_id: Optional[int] = None
    burn_tx_hash: Optional[str] = None
    source_domain: Optional[int] = None
    attestation_state: Optional[TransferState] = None
    attestation_detail: Optional[str] = None
    attestation_link: Optional[str] = None
    mint_tx_hash: Optional[str] = None
    destination_chain_id: Optional[int] = None


def _message_status(source_tx_hash: Optional[str], state: Optional[MessageState]) -> Status:
    if not source_tx_hash:
        return Status.PENDING
    if state == MessageState.DELIVERED:
        return Status.SUCCESS
    if state == MessageState.FAILED:
        return Status.FAILED
    if state == MessageState.TIMED_OUT:
        return Status.WARNING
    return Status.ACTIVE


def _message_text(state: Optional[MessageState], detail: Optional[str]) -> Optional[str]:
    if state == MessageState.FAILED:
        return detail or "Message delivery failed, check LayerZero scan."
    if state == MessageState.TIMED_OUT:
        return detail or "Message delivery is taking longer than expected, check LayerZero scan."
    return detail


def build_message_only_steps(state: MessageFlowState) -> List[Step]:
    """Steps for flows that only send a LayerZero message.

    Returns:
        submitted -> in flight -> delivered
    """
    submitted = Step(
        id=StepId.SOURCE_SUBMITTED,
        label="Transaction submitted",
        status=Status.SUCCESS if state.source_tx_hash else Status.PENDING,
        tx_hash=state.source_tx_hash,
        chain_id=state.source_chain_id,
    )

    in_flight = Step(
        id=StepId.MESSAGE_IN_FLIGHT,
        label="LayerZero message in flight",
        status=_message_status(state.source_tx_hash, state.message_state),
        message=_message_text(state.message_state, state.message_detail),
        destination_tx_hash=state.destination_tx_hash,
        destination_chain_id=state.destination_chain_id,
        external_link=state.message_link,
    )

    delivered = Step(
        id=StepId.MESSAGE_DELIVERED,
        label="Delivered to destination chain",
        status=Status.SUCCESS if state.destination_tx_hash else Status.PENDING,
        destination_tx_hash=state.destination_tx_hash,
        destination_chain_id=state.destination_chain_id,
    )

    return [submitted, in_flight, delivered]


def build_transfer_steps(state: TransferFlowState) -> List[Step]:
    """Steps for payment flows: message plus CCTP burn, attestation and mint.

    Missing facts are inferred from the ones that are present, e.g. a
    delivered message with no burn yet shows the burn as in progress.
    """
    steps = []
    delivered = state.message_state == MessageState.DELIVERED

    if state.token_approved is not None:
        approved = state.token_approved or bool(state.source_tx_hash)
        steps.append(Step(
            id=StepId.TOKEN_APPROVED,
            label="USDC approved",
            status=Status.SUCCESS if approved else Status.PENDING,
        ))

    steps.append(Step(
        id=StepId.SOURCE_SUBMITTED,
        label="Transaction submitted on source chain",
        status=Status.SUCCESS if state.source_tx_hash else Status.PENDING,
        tx_hash=state.source_tx_hash,
        chain_id=state.source_chain_id,
    ))

    steps.append(Step(
        id=StepId.MESSAGE_IN_FLIGHT,
        label="LayerZero message to destination chain",
        status=_message_status(state.source_tx_hash, state.message_state),
        message=_message_text(state.message_state, state.message_detail),
        destination_tx_hash=state.message_destination_tx_hash,
        destination_chain_id=state.message_destination_chain_id,
        external_link=state.message_link,
    ))

    if state.burn_tx_hash:
        burn_status = Status.SUCCESS
        burn_message = None
    elif delivered and state.attestation_state == TransferState.TIMED_OUT:
        burn_status = Status.WARNING
        burn_message = "Circle never indexed a burn for the delivery transaction."
    elif delivered:
        burn_status = Status.ACTIVE
        burn_message = "Destination contract received the message, initiating the CCTP burn..."
    else:
        burn_status = Status.PENDING
        burn_message = None
    steps.append(Step(
        id=StepId.BURN_OBSERVED,
        label="USDC sent via Circle CCTP",
        status=burn_status,
        message=burn_message,
        tx_hash=state.burn_tx_hash or state.message_destination_tx_hash,
        chain_id=state.message_destination_chain_id or DEFAULT_BURN_CHAIN_ID,
    ))

    steps.append(Step(
        id=StepId.ATTESTATION_PENDING,
        label="Circle attestation",
        status=_attestation_status(state),
        message=_attestation_text(state),
        external_link=state.attestation_link,
    ))

    complete = state.attestation_state == TransferState.COMPLETE
    if state.mint_tx_hash:
        mint_status = Status.SUCCESS
    elif complete:
        mint_status = Status.ACTIVE
    else:
        mint_status = Status.PENDING
    steps.append(Step(
        id=StepId.MINT_OBSERVED,
        label="USDC delivered to recipient",
        status=mint_status,
        message="Executing receive on the destination chain..."
        if complete and not state.mint_tx_hash else None,
        tx_hash=state.mint_tx_hash,
        chain_id=state.destination_chain_id,
    ))

    return steps


def _attestation_status(state: TransferFlowState) -> Status:
    attestation = state.attestation_state
    # Terminal outcomes hold even when no burn was ever seen
    if attestation == TransferState.FAILED:
        return Status.FAILED
    if attestation == TransferState.TIMED_OUT:
        return Status.WARNING
    if not state.burn_tx_hash:
        return Status.PENDING
    if attestation == TransferState.COMPLETE:
        return Status.SUCCESS
    # Slow path is expected behaviour, so it stays active
    return Status.ACTIVE


def _attestation_text(state: TransferFlowState) -> Optional[str]:
    attestation = state.attestation_state
    if attestation == TransferState.SLOW:
        return "Slow path active (~15-20 min). Monitoring..."
    if attestation == TransferState.COMPLETE:
        return "Attestation received"
    return state.attestation_detail


def rollup_status(steps: List[Step]) -> Status:
    """Overall status of a timeline.

    A failed step dominates everything, then a warning; the timeline is only
    successful when every step is.
    """
    if not steps:
        return Status.PENDING
    statuses = [step.status for step in steps]
    if Status.FAILED in statuses:
        return Status.FAILED
    if Status.WARNING in statuses:
        return Status.WARNING
    if all(status == Status.SUCCESS for status in statuses):
        return Status.SUCCESS
    return Status.ACTIVE
