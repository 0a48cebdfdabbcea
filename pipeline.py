"""Two-stage tracking of one cross-chain user action."""

import logging
from typing import Callable, List, Optional, Union

from core.errors import TrackerError
from core.types import Attestation, MessageState, Status, StepUpdate, TransferState
from cctp.transfer_tracker import SLOW_PATH, TransferTracker
from explorer import short_hash
from layerzero.message_tracker import MessageTracker
from steps import (
    MessageFlowState,
    Step,
    TransferFlowState,
    build_message_only_steps,
    build_transfer_steps,
    rollup_status,
)
from tracking import Tracking, invoke_callback

logger = logging.getLogger(__name__)


class TrackedOperation:
    """Follows one user action across the LayerZero and CCTP stages.

    The message stage always runs. When a transfer tracker is given, the
    transfer stage starts as soon as the message is delivered, using the
    delivery transaction (which performs the burn) and the burn chain's CCTP
    domain. Every observed change is folded into the flow state and reported
    to on_change.
    """

    def __init__(
        self,
        operation_id: str,
        source_tx_hash: str,
        message_tracker: MessageTracker,
        transfer_tracker: Optional[TransferTracker] = None,
        source_domain: Optional[int] = None,
        source_chain_id: Optional[int] = None,
        message_destination_chain_id: Optional[int] = None,
        destination_chain_id: Optional[int] = None,
        token_approved: Optional[bool] = None,
        on_change: Optional[Callable[["TrackedOperation"], None]] = None,
        on_attested: Optional[Callable[[Attestation], None]] = None,
    ):
        """Create an operation.

        Raises:
            TrackerError: If a transfer stage is requested without a domain
        """
        if transfer_tracker is not None and source_domain is None:
            raise TrackerError("A CCTP source domain is required to track a transfer")

        self.operation_id = operation_id
        self.source_tx_hash = source_tx_hash
        self.message_tracker = message_tracker
        self.transfer_tracker = transfer_tracker
        self.on_change = on_change
        self.on_attested = on_attested

        self.state: Union[MessageFlowState, TransferFlowState]
        if transfer_tracker is not None:
            self.state = TransferFlowState(
                source_tx_hash=source_tx_hash,
                source_chain_id=source_chain_id,
                token_approved=token_approved,
                message_state=MessageState.IN_FLIGHT,
                message_destination_chain_id=message_destination_chain_id,
                source_domain=source_domain,
                destination_chain_id=destination_chain_id,
            )
        else:
            self.state = MessageFlowState(
                source_tx_hash=source_tx_hash,
                source_chain_id=source_chain_id,
                message_state=MessageState.IN_FLIGHT,
                destination_chain_id=message_destination_chain_id,
            )

        self.attestation: Optional[Attestation] = None
        self.last_update: Optional[StepUpdate] = None
        self._message: Optional[Tracking] = None
        self._transfer: Optional[Tracking] = None
        self._cancelled = False

    @property
    def tracks_transfer(self) -> bool:
        return self.transfer_tracker is not None

    def start(self) -> None:
        """Start the message stage. Must be called from a running event loop."""
        if self._message is not None:
            return
        logger.info(f"Operation {self.operation_id}: tracking {short_hash(self.source_tx_hash)}")
        self._message = self.message_tracker.track(self.source_tx_hash, self._on_message_update)

    def cancel(self) -> None:
        """Cancel every running stage."""
        if self._cancelled:
            return
        self._cancelled = True
        for tracking in (self._message, self._transfer):
            if tracking is not None:
                tracking.cancel()
        logger.info(f"Operation {self.operation_id} cancelled")

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        """True once every configured stage has stopped."""
        if self._message is None or not self._message.done():
            return False
        if not self.tracks_transfer or self.state.message_state != MessageState.DELIVERED:
            return True
        # The transfer stage is started from the delivery callback, so it is
        # already attached by the time the message stage is done
        return self._transfer is None or self._transfer.done()

    async def wait(self) -> None:
        """Wait for both stages to stop."""
        if self._message is not None:
            await self._message.wait()
        if self._transfer is not None:
            await self._transfer.wait()

    def steps(self) -> List[Step]:
        if isinstance(self.state, TransferFlowState):
            return build_transfer_steps(self.state)
        return build_message_only_steps(self.state)

    @property
    def status(self) -> Status:
        return rollup_status(self.steps())

    async def record_mint(self, tx_hash: str) -> None:
        """Report the destination-chain mint submitted with the attestation.

        Raises:
            TrackerError: If this operation does not move tokens
        """
        if not isinstance(self.state, TransferFlowState):
            raise TrackerError(f"Operation {self.operation_id} has no token transfer")
        self.state.mint_tx_hash = tx_hash
        logger.info(f"Operation {self.operation_id}: mint recorded in {short_hash(tx_hash)}")
        await invoke_callback(self.on_change, self)

    async def _on_message_update(self, update: StepUpdate) -> None:
        self.last_update = update
        state = self.state
        state.message_link = update.external_link

        if update.status == Status.SUCCESS:
            state.message_state = MessageState.DELIVERED
            state.message_detail = update.message
            if isinstance(state, TransferFlowState):
                state.message_destination_tx_hash = update.destination_tx_hash
            else:
                state.destination_tx_hash = update.destination_tx_hash
        elif update.status == Status.FAILED:
            state.message_state = MessageState.FAILED
            state.message_detail = update.message
        elif update.status == Status.WARNING:
            state.message_state = MessageState.TIMED_OUT
            state.message_detail = update.message
        else:
            state.message_state = MessageState.IN_FLIGHT
            state.message_detail = update.message

        if update.status == Status.SUCCESS and self.tracks_transfer:
            self._start_transfer(update.destination_tx_hash)

        await invoke_callback(self.on_change, self)

    def _start_transfer(self, burn_tx_hash: Optional[str]) -> None:
        if self._cancelled or self._transfer is not None:
            return
        if not burn_tx_hash:
            logger.warning(
                f"Operation {self.operation_id}: message delivered without a destination "
                f"tx hash, cannot track the CCTP transfer"
            )
            return
        logger.info(
            f"Operation {self.operation_id}: starting CCTP tracking for {short_hash(burn_tx_hash)}"
        )
        self._transfer = self.transfer_tracker.track(
            burn_tx_hash,
            self.state.source_domain,
            self._on_transfer_update,
            self._on_attested,
        )

    async def _on_transfer_update(self, update: StepUpdate) -> None:
        self.last_update = update
        state = self.state
        state.attestation_link = update.external_link
        state.attestation_detail = update.message

        # Circle only indexes a message once the burn is on chain
        if update.classification is not None:
            state.burn_tx_hash = update.source_tx_hash

        if update.status == Status.SUCCESS:
            state.attestation_state = TransferState.COMPLETE
        elif update.status == Status.FAILED:
            state.attestation_state = TransferState.FAILED
        elif update.status == Status.WARNING:
            state.attestation_state = TransferState.TIMED_OUT
        elif update.classification == SLOW_PATH:
            state.attestation_state = TransferState.SLOW
        else:
            state.attestation_state = TransferState.PENDING

        await invoke_callback(self.on_change, self)

    async def _on_attested(self, attestation: Attestation) -> None:
        self.attestation = attestation
        logger.info(f"Operation {self.operation_id}: attestation ready")
        await invoke_callback(self.on_attested, attestation)

    def snapshot(self) -> dict:
        """Serializable view of the operation."""
        return {
            "operation_id": self.operation_id,
            "source_tx_hash": self.source_tx_hash,
            "status": self.status.value,
            "finished": self.finished,
            "cancelled": self.cancelled,
            "steps": [step.to_dict() for step in self.steps()],
            "attestation": self.attestation.to_hex() if self.attestation else None,
        }
