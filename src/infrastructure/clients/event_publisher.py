"""EventPublisher implementations: structured log sink and HTTP webhook."""

import asyncio
from typing import Any, Dict

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import (
    track_event_latency,
    record_event_retry,
    record_event_success,
    record_event_failure,
)
from src.domain.entities import InstallmentEvent
from src.domain.interfaces import EventPublisher

logger = structlog.get_logger(__name__)


class LoggingEventPublisher(EventPublisher):
    """Writes every event to the structured log. Used when no webhook is set."""

    async def publish(self, event: InstallmentEvent) -> bool:
        logger.info("installment_event", **event.to_dict())
        return True


class HttpEventPublisher(EventPublisher):
    """
    HTTP client for the event webhook.

    Sends async notifications with retry logic and exponential backoff.
    Never raises: the operation behind the event has already committed.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float = 0.1,
    ):
        self._url = url or settings.event_webhook_url
        self._timeout = timeout or settings.event_webhook_timeout
        self._max_retries = max_retries or settings.event_webhook_max_retries
        self._backoff_base = backoff_base

    async def publish(self, event: InstallmentEvent) -> bool:
        return await self._send(event.to_dict(), event.event_type.value)

    async def _send(
        self,
        payload: Dict[str, Any],
        event_type: str,
    ) -> bool:
        """
        Send a webhook with retry logic.

        Uses exponential backoff: 0.1s, 0.2s, 0.4s, 0.8s, 1.6s
        """
        for attempt in range(self._max_retries):
            try:
                with track_event_latency():
                    async with httpx.AsyncClient(timeout=self._timeout) as client:
                        response = await client.post(
                            self._url,
                            json=payload,
                            headers={"Content-Type": "application/json"},
                        )

                        if response.status_code < 400:
                            logger.info(
                                "event_sent",
                                event_type=event_type,
                                status_code=response.status_code,
                            )
                            record_event_success()
                            return True

                        logger.warning(
                            "event_delivery_failed",
                            event_type=event_type,
                            status_code=response.status_code,
                            attempt=attempt + 1,
                            response=response.text[:200],
                        )

            except httpx.TimeoutException:
                logger.warning(
                    "event_delivery_timeout",
                    event_type=event_type,
                    attempt=attempt + 1,
                )
            except httpx.HTTPError as e:
                logger.error(
                    "event_delivery_error",
                    event_type=event_type,
                    attempt=attempt + 1,
                    error=str(e),
                )

            if attempt < self._max_retries - 1:
                record_event_retry()
                await asyncio.sleep(2 ** attempt * self._backoff_base)

        logger.error(
            "event_delivery_exhausted_retries",
            event_type=event_type,
            max_retries=self._max_retries,
        )
        record_event_failure()
        return False
