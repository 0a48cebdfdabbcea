"""Cross-chain tracking service wiring."""

import logging
from typing import Optional

from cctp.iris import IrisClient
from cctp.transfer_tracker import TransferTracker
from config import TrackerConfig
from layerzero.message_tracker import MessageTracker
from layerzero.scan import LayerZeroScanClient
from registry import OperationRegistry
from tracking import PollPolicy

logger = logging.getLogger(__name__)


class TrackerService:
    """Owns the HTTP clients, both trackers and the operation registry."""

    def __init__(self, config: TrackerConfig):
        """Initialize the service.

        Args:
            config: Tracker configuration
        """
        self.config = config
        self.running = False

        self.scan_client = LayerZeroScanClient(
            api_url=config.layerzero_scan_api,
            request_timeout=config.request_timeout,
        )
        self.iris_client = IrisClient(
            api_url=config.iris_api,
            request_timeout=config.request_timeout,
        )

        self.message_tracker = MessageTracker(
            self.scan_client,
            PollPolicy(
                poll_interval=config.message_poll_interval,
                max_attempts=config.message_max_attempts,
                startup_delay=config.message_startup_delay,
            ),
        )
        self.transfer_tracker = TransferTracker(
            self.iris_client,
            PollPolicy(
                poll_interval=config.transfer_poll_interval,
                max_attempts=config.transfer_max_attempts,
                startup_delay=config.transfer_startup_delay,
            ),
        )

        self.registry = OperationRegistry(
            message_tracker=self.message_tracker,
            transfer_tracker=self.transfer_tracker,
            ttl=config.operation_ttl,
        )

        logger.info("Initialized cross-chain tracker service")

    async def start(self) -> None:
        """Start the service."""
        if self.running:
            return
        logger.info("Starting cross-chain tracker service...")

        self.config.validate()

        await self.scan_client.start()
        await self.iris_client.start()

        self.running = True
        logger.info("Tracker service started successfully")

    async def stop(self) -> None:
        """Stop the service and cancel all tracking."""
        logger.info("Stopping tracker service...")
        self.running = False

        self.registry.shutdown()

        await self.scan_client.stop()
        await self.iris_client.stop()

        logger.info("Tracker service stopped")

    async def __aenter__(self) -> "TrackerService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


def load_service(config: Optional[TrackerConfig] = None) -> TrackerService:
    """Create a service from the given or environment configuration."""
    return TrackerService(config or TrackerConfig.from_env())
