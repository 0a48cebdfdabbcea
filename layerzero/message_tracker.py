"""Track delivery of one LayerZero message."""

import asyncio
import logging
from typing import Callable, Optional

from core.types import MessageRecord, Status, StepId, StepUpdate
from explorer import layerzero_scan_url, short_hash
from layerzero.scan import LayerZeroScanClient
from tracking import PollPolicy, Tracking

logger = logging.getLogger(__name__)

DELIVERED_STATES = {"DELIVERED", "SUCCEEDED"}
FAILED_STATES = {"FAILED", "REVERTED"}
IN_FLIGHT = "INFLIGHT"

DEFAULT_POLICY = PollPolicy(poll_interval=6.0, max_attempts=60, startup_delay=3.0)


class MessageTracker:
    """Polls the LayerZero scan index until a message is delivered or failed."""

    def __init__(self, client: LayerZeroScanClient, policy: Optional[PollPolicy] = None):
        """Initialize message tracker.

        Args:
            client: Scan client used for each poll
            policy: Poll cadence and attempt budget
        """
        self.client = client
        self.policy = policy or DEFAULT_POLICY

    def track(
        self,
        source_tx_hash: str,
        on_update: Callable[[StepUpdate], None],
    ) -> Tracking:
        """Start tracking the message sent by a source transaction.

        Must be called from a running event loop.

        Args:
            source_tx_hash: Source chain transaction hash
            on_update: Called with every StepUpdate (sync or async)

        Returns:
            Tracking handle; call cancel() to stop
        """
        tracking = Tracking(f"message {short_hash(source_tx_hash)}")
        logger.info(f"Tracking LayerZero message for {short_hash(source_tx_hash)}")
        return tracking.attach(self._run(tracking, source_tx_hash, on_update))

    async def _run(self, tracking: Tracking, source_tx_hash: str, on_update) -> None:
        link = layerzero_scan_url(source_tx_hash)

        def update(step: StepId, status: Status, message: str, **extra) -> StepUpdate:
            return StepUpdate(
                step=step,
                status=status,
                message=message,
                source_tx_hash=source_tx_hash,
                external_link=link,
                **extra,
            )

        await tracking.emit(on_update, update(
            StepId.MESSAGE_IN_FLIGHT,
            Status.ACTIVE,
            "LayerZero message in flight, waiting for delivery on the destination chain...",
            classification=IN_FLIGHT,
        ))
        await asyncio.sleep(self.policy.startup_delay)

        attempts = 0
        last_classification = IN_FLIGHT

        while not tracking.stopped:
            if attempts >= self.policy.max_attempts:
                logger.warning(
                    f"LayerZero message for {short_hash(source_tx_hash)} "
                    f"not delivered after {attempts} checks"
                )
                await tracking.emit(on_update, update(
                    StepId.MESSAGE_IN_FLIGHT,
                    Status.WARNING,
                    f"LayerZero message not yet delivered after "
                    f"{self.policy.deadline_minutes} minutes. Check LayerZero scan manually.",
                    classification=last_classification,
                ))
                return

            record = await self._poll(source_tx_hash)
            if tracking.stopped:
                return

            if record is None:
                attempts += 1
                await asyncio.sleep(self.policy.poll_interval)
                continue

            classification = record.status or IN_FLIGHT

            if classification in DELIVERED_STATES:
                logger.info(
                    f"LayerZero message for {short_hash(source_tx_hash)} delivered "
                    f"in {short_hash(record.dst_tx_hash)}"
                )
                await tracking.emit(on_update, update(
                    StepId.MESSAGE_DELIVERED,
                    Status.SUCCESS,
                    "LayerZero message delivered to the destination chain",
                    destination_tx_hash=record.dst_tx_hash,
                    classification=classification,
                ))
                return

            if classification in FAILED_STATES:
                reason = record.failure_reason or classification
                logger.error(
                    f"LayerZero message for {short_hash(source_tx_hash)} failed: {reason}"
                )
                await tracking.emit(on_update, update(
                    StepId.MESSAGE_IN_FLIGHT,
                    Status.FAILED,
                    f"LayerZero delivery failed: {reason}. Check LayerZero scan for details.",
                    destination_tx_hash=record.dst_tx_hash,
                    classification=classification,
                ))
                return

            attempts += 1
            if classification != last_classification:
                last_classification = classification
                await tracking.emit(on_update, update(
                    StepId.MESSAGE_IN_FLIGHT,
                    Status.ACTIVE,
                    f"LayerZero: {classification} ({attempts} checks)...",
                    classification=classification,
                ))

            await asyncio.sleep(self.policy.poll_interval)

    async def _poll(self, source_tx_hash: str) -> Optional[MessageRecord]:
        # Query failures look the same as "not indexed yet"
        try:
            return await self.client.get_message(source_tx_hash)
        except Exception as e:
            logger.debug(f"LayerZero query for {short_hash(source_tx_hash)} failed: {e}")
            return None
