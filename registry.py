"""Session-scoped registry of tracked operations."""

import logging
import time
import uuid
from typing import Awaitable, Callable, List, Optional, Union

from cache import TTLCache
from cctp.transfer_tracker import TransferTracker
from core.errors import OperationNotFoundError
from core.types import Attestation
from layerzero.message_tracker import MessageTracker
from pipeline import TrackedOperation
from tracking import invoke_callback

logger = logging.getLogger(__name__)

Listener = Callable[[TrackedOperation], Union[None, Awaitable[None]]]


class OperationRegistry:
    """Keeps live operations in memory for the length of a session.

    Operations expire a fixed time after their last change; an expired
    operation is cancelled. Nothing is persisted.
    """

    def __init__(
        self,
        message_tracker: MessageTracker,
        transfer_tracker: TransferTracker,
        ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
        max_operations: Optional[int] = None,
    ):
        """Initialize registry.

        Args:
            message_tracker: Tracker used for every operation's message stage
            transfer_tracker: Tracker used for operations that move tokens
            ttl: Seconds an operation is kept after its last change
            clock: Time source for expiry
            max_operations: Optional cap on live operations
        """
        self.message_tracker = message_tracker
        self.transfer_tracker = transfer_tracker
        self._operations: TTLCache[str, TrackedOperation] = TTLCache(
            ttl=ttl,
            clock=clock,
            max_entries=max_operations,
            on_evict=self._on_evict,
        )
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Register a callback for every operation change."""
        self._listeners.append(listener)

    def create(
        self,
        source_tx_hash: str,
        track_transfer: bool = False,
        source_domain: Optional[int] = None,
        source_chain_id: Optional[int] = None,
        message_destination_chain_id: Optional[int] = None,
        destination_chain_id: Optional[int] = None,
        token_approved: Optional[bool] = None,
        on_attested: Optional[Callable[[Attestation], None]] = None,
    ) -> TrackedOperation:
        """Create and start tracking a new operation.

        Must be called from a running event loop.

        Raises:
            TrackerError: If a transfer is requested without a domain
        """
        operation = TrackedOperation(
            operation_id=uuid.uuid4().hex,
            source_tx_hash=source_tx_hash,
            message_tracker=self.message_tracker,
            transfer_tracker=self.transfer_tracker if track_transfer else None,
            source_domain=source_domain,
            source_chain_id=source_chain_id,
            message_destination_chain_id=message_destination_chain_id,
            destination_chain_id=destination_chain_id,
            token_approved=token_approved,
            on_change=self._on_change,
            on_attested=on_attested,
        )
        self._operations.set(operation.operation_id, operation)
        operation.start()
        logger.info(f"Registered operation {operation.operation_id}")
        return operation

    def get(self, operation_id: str) -> TrackedOperation:
        """Look up a live operation.

        Raises:
            OperationNotFoundError: If the id is unknown or expired
        """
        operation = self._operations.get(operation_id)
        if operation is None:
            raise OperationNotFoundError(f"Operation not found: {operation_id}")
        return operation

    def cancel(self, operation_id: str) -> TrackedOperation:
        """Cancel an operation and forget it.

        Raises:
            OperationNotFoundError: If the id is unknown or expired
        """
        operation = self.get(operation_id)
        self._operations.pop(operation_id)
        operation.cancel()
        return operation

    def operations(self) -> List[TrackedOperation]:
        return self._operations.values()

    def shutdown(self) -> None:
        """Cancel every live operation."""
        for operation in self._operations.values():
            operation.cancel()
        logger.info("Operation registry shut down")

    def __len__(self) -> int:
        return len(self._operations)

    async def _on_change(self, operation: TrackedOperation) -> None:
        if operation.cancelled:
            return
        self._operations.touch(operation.operation_id)
        for listener in self._listeners:
            await invoke_callback(listener, operation)

    def _on_evict(self, operation_id: str, operation: TrackedOperation) -> None:
        logger.info(f"Operation {operation_id} expired")
        operation.cancel()
