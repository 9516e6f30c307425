"""
Bitrix24 REST client for user profiles and listings.

Talks to the CRM through an inbound webhook URL. Only two methods are used:

- user.get       -> one employee profile
- crm.item.list  -> the listings of one agent, paginated 50 at a time

Every failure (network, HTTP status, Bitrix error payload, unexpected shape) is
raised as UpstreamFailure. Transport errors are retried a few times first.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from app.core import config
from app.core.errors import UpstreamFailure
from app.api.performance_utils.retry import async_retry
from app.models.bitrix import (
    CHANNEL_FIELDS,
    CREATED_FIELD,
    EmployeeProfile,
    ListingRecord,
)

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


class BitrixClient:
    def __init__(
        self,
        webhook_url: Optional[str] = None,
        entity_type_id: int = config.BITRIX_LISTING_ENTITY_TYPE_ID,
        field_prefix: str = config.BITRIX_LISTING_FIELD_PREFIX,
        timeout: float = config.BITRIX_TIMEOUT_SECONDS,
        max_retries: int = config.BITRIX_MAX_RETRIES,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        webhook_url = webhook_url or config.BITRIX_WEBHOOK_URL
        if not webhook_url:
            raise ValueError("BITRIX_WEBHOOK_URL must be set in the environment")

        self.webhook_url = webhook_url.rstrip("/") + "/"
        self.entity_type_id = entity_type_id
        self.field_prefix = field_prefix
        self.timeout = timeout
        self.transport = transport
        self._call = async_retry(
            httpx.TransportError, tries=max(1, max_retries), delay=retry_delay
        )(self._post)

    @property
    def listing_fields(self) -> list[str]:
        prefix = self.field_prefix
        fields = [f"{prefix}Status", f"{prefix}Price"]
        fields += [f"{prefix}{suffix}" for _, suffix in CHANNEL_FIELDS.values()]
        return fields

    async def fetch_user(self, user_id: str) -> Optional[EmployeeProfile]:
        """Return the employee profile, or None if Bitrix has no such user."""
        payload = await self.call("user.get", {"ID": user_id})
        result = payload.get("result")
        if not isinstance(result, list):
            raise UpstreamFailure("Unexpected user.get response from Bitrix")
        if not result:
            return None
        return EmployeeProfile.from_bitrix(result[0])

    async def fetch_listings(
        self,
        agent_email: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> list[ListingRecord]:
        """
        All listings of one agent. With year and month the query is narrowed to
        listings created in that calendar month.
        """
        filters: dict[str, Any] = {f"{self.field_prefix}AgentEmail": agent_email}
        select = self.listing_fields
        if year is not None and month is not None:
            start, end = month_bounds(year, month)
            filters[f">={CREATED_FIELD}"] = start.isoformat()
            filters[f"<{CREATED_FIELD}"] = end.isoformat()
            select = select + [CREATED_FIELD]

        items: list[dict] = []
        start_at: Optional[int] = 0
        while start_at is not None:
            payload = await self.call(
                "crm.item.list",
                {
                    "entityTypeId": self.entity_type_id,
                    "filter": filters,
                    "select": select,
                    "start": start_at,
                },
            )
            result = payload.get("result")
            page = result.get("items") if isinstance(result, dict) else None
            if not isinstance(page, list):
                raise UpstreamFailure("Unexpected crm.item.list response from Bitrix")
            items.extend(item for item in page if isinstance(item, dict))
            next_at = payload.get("next")
            # Bitrix offsets only move forward; anything else would loop forever
            if next_at is not None and (not isinstance(next_at, int) or next_at <= start_at):
                raise UpstreamFailure("Bitrix listing pagination did not advance")
            start_at = next_at

        logger.debug(
            "Fetched %d listings (%s)",
            len(items),
            f"{year}-{month:02d}" if year is not None and month is not None else "all time",
        )
        return [ListingRecord.from_bitrix(item, self.field_prefix) for item in items]

    async def call(self, method: str, params: dict) -> dict:
        try:
            response = await self._call(method, params)
        except httpx.HTTPError as e:
            logger.warning("Bitrix %s failed: %s", method, e)
            raise UpstreamFailure(f"Bitrix request failed: {method}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamFailure(f"Bitrix returned invalid JSON for {method}") from e

        if not isinstance(payload, dict):
            raise UpstreamFailure(f"Unexpected {method} response from Bitrix")
        if "error" in payload:
            detail = payload.get("error_description") or payload["error"]
            logger.warning("Bitrix %s returned an error: %s", method, detail)
            raise UpstreamFailure(f"Bitrix error on {method}: {detail}")
        return payload

    async def _post(self, method: str, params: dict) -> httpx.Response:
        url = f"{self.webhook_url}{method}.json"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(url, json=params)
            response.raise_for_status()
            return response

