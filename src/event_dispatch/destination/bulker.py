"""
Bulker Destination.

Synthetic destination that sends laid-out event records to Bulker, the storage
gateway that writes them into database tables.

For each incoming event the destination:
- repairs GA4 client id data
- lays the event out into one or more (record, table) pairs
- POSTs every record, in order, to ``{endpoint}/post/{destinationId}``

Any failure aborts the remaining records and is raised as a single
RetryError. Records delivered before the failure are not rolled back.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from event_dispatch.errors import HTTPError, RetryError
from event_dispatch.layouts.base import DEFAULT_DATA_LAYOUT, DataLayout, MappedEvent
from event_dispatch.layouts.factory import get_layout
from event_dispatch.monitoring.logging import with_context
from event_dispatch.schemas.event import AnalyticsEvent

from .client_ids import repair_client_ids

logger = logging.getLogger(__name__)

FUNCTION_ID = "builtin.destination.bulker"
METRICS_META_HEADER = "metricsMeta"


@dataclass
class BulkerDestinationConfig:
    """
    Configuration of one Bulker destination.
    """

    bulker_endpoint: str
    destination_id: str
    auth_token: str
    data_layout: DataLayout | str = DEFAULT_DATA_LAYOUT
    request_timeout: float = 30.0

    def __post_init__(self):
        self.bulker_endpoint = self.bulker_endpoint.rstrip("/")

    @classmethod
    def from_props(cls, props: Mapping[str, Any]) -> "BulkerDestinationConfig":
        """
        Build a config from wire-style destination properties.

        Example:
            >>> BulkerDestinationConfig.from_props({
            ...     "bulkerEndpoint": "http://bulker:3042",
            ...     "destinationId": "dst1",
            ...     "authToken": "secret",
            ... }).data_layout
            <DataLayout.SEGMENT_SINGLE_TABLE: 'segment-single-table'>
        """
        return cls(
            bulker_endpoint=props["bulkerEndpoint"],
            destination_id=props["destinationId"],
            auth_token=props["authToken"],
            data_layout=props.get("dataLayout") or DEFAULT_DATA_LAYOUT,
        )


@dataclass(frozen=True)
class FunctionContext:
    """Ids of the invocation, attached to every delivery as metrics metadata."""

    workspace_id: str
    source_id: str
    destination_id: str
    connection_id: str

    def metrics_meta(self) -> dict[str, str]:
        return {
            "workspaceId": self.workspace_id,
            "streamId": self.source_id,
            "destinationId": self.destination_id,
            "connectionId": self.connection_id,
            "functionId": FUNCTION_ID,
        }


class BulkerDestination:
    """
    Delivers analytics events to Bulker.

    The HTTP client is injected (any ``httpx.AsyncClient``, including one with
    a mock transport). When none is given, one is created on first use with
    the configured timeout and closed by ``close()``.
    """

    display_name = "Bulker Destination"
    description = (
        "Synthetic destination to send data to Bulker, "
        "sub-system for storing data in databases"
    )

    def __init__(
        self,
        config: BulkerDestinationConfig,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the destination.

        Args:
            config: Destination configuration
            client: Optional HTTP client used for every delivery

        Raises:
            UnknownLayoutError: If the configured data layout does not exist
        """
        self.config = config
        self.layout = get_layout(config.data_layout)
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout)
            self._owns_client = True
        return self._client

    def map_event(self, event: AnalyticsEvent | Mapping[str, Any]) -> list[MappedEvent]:
        """
        Lay out an event without sending it.

        Returns:
            Ordered list of MappedEvent
        """
        parsed = repair_client_ids(AnalyticsEvent.from_payload(event))
        return self.layout.map_event(parsed)

    async def send(
        self,
        event: AnalyticsEvent | Mapping[str, Any],
        ctx: FunctionContext,
    ) -> AnalyticsEvent | Mapping[str, Any]:
        """
        Deliver one event.

        Args:
            event: Incoming event (payload mapping or parsed AnalyticsEvent)
            ctx: Invocation ids for metrics metadata

        Returns:
            The original event, unchanged, once every record is delivered

        Raises:
            RetryError: On any failure while delivering the records (transport
                errors, invalid URLs, non-success responses)
            InvalidEventError: If the event is not a JSON object
        """
        log = with_context(
            logger,
            workspace_id=ctx.workspace_id,
            source_id=ctx.source_id,
            destination_id=ctx.destination_id,
            connection_id=ctx.connection_id,
        )
        mapped_events = self.map_event(event)
        headers = {
            "Authorization": f"Bearer {self.config.auth_token}",
            "Content-Type": "application/json",
            METRICS_META_HEADER: json.dumps(ctx.metrics_meta()),
        }

        try:
            client = self._get_client()
            for mapped in mapped_events:
                await self._post(client, mapped, headers, log)
        except Exception as e:
            log.warning(f"Delivery to Bulker failed: {e}")
            raise RetryError(e) from e

        return event

    async def _post(
        self,
        client: httpx.AsyncClient,
        mapped: MappedEvent,
        headers: dict[str, str],
        log: logging.LoggerAdapter,
    ) -> None:
        """POST one record; raise HTTPError on a non-success status."""
        url = f"{self.config.bulker_endpoint}/post/{self.config.destination_id}"
        response = await client.post(
            url,
            params={"tableName": mapped.table},
            headers=headers,
            content=json.dumps(mapped.record, default=str),
        )
        if not response.is_success:
            raise HTTPError(
                f"HTTP Error: {response.status_code} {response.reason_phrase}",
                response.status_code,
                response.text,
            )
        log.debug(
            f"HTTP Status: {response.status_code} {response.reason_phrase} "
            f"Response: {response.text}",
            extra={"table": mapped.table},
        )

    async def close(self) -> None:
        """Close the HTTP client if this destination created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "BulkerDestination":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
