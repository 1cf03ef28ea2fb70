"""Query Cloudflare GraphQL analytics for HTTP request counts."""
import json
import logging
from typing import Any, Optional

import httpx

from trafficwatch.errors import MalformedResponseError, TransportError
from trafficwatch.schemas.window import TimeWindow, TrafficObservation

logger = logging.getLogger(__name__)

QUERY_TEMPLATE = """
query Viewer {{
  viewer {{
    zones(filter: {{ zoneTag: {zone_tag} }}) {{
      httpRequestsAdaptiveGroups(
        filter: {{
          datetime_geq: {start}
          datetime_lt: {end}
          clientRequestHTTPHost: {host}
        }}
        limit: {limit}
      ) {{
        count
      }}
    }}
  }}
}}
"""


def build_query(zone_tag: str, window: TimeWindow, target_host: str, limit: int = 10000) -> str:
    # json.dumps yields a valid GraphQL string literal
    return QUERY_TEMPLATE.format(
        zone_tag=json.dumps(zone_tag),
        start=json.dumps(window.start_iso),
        end=json.dumps(window.end_iso),
        host=json.dumps(target_host),
        limit=int(limit),
    )


def parse_count(payload: Any) -> int:
    """
    Extract the request count from a GraphQL response body.
    No zones or no groups means zero; API errors and unexpected shapes raise.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("response body is not a JSON object")
    errors = payload.get("errors")
    if errors:
        if not isinstance(errors, list):
            raise MalformedResponseError(f"unexpected errors field: {errors!r}")
        messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
        raise TransportError("GraphQL API returned errors: " + "; ".join(messages))
    data = payload.get("data")
    viewer = data.get("viewer") if isinstance(data, dict) else None
    zones = viewer.get("zones") if isinstance(viewer, dict) else None
    if not isinstance(zones, list):
        raise MalformedResponseError("response lacks data.viewer.zones")
    if not zones:
        return 0
    zone = zones[0]
    groups = zone.get("httpRequestsAdaptiveGroups") if isinstance(zone, dict) else None
    if not isinstance(groups, list):
        raise MalformedResponseError("zone lacks httpRequestsAdaptiveGroups")
    if not groups:
        return 0
    count = groups[0].get("count") if isinstance(groups[0], dict) else None
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise MalformedResponseError(f"invalid group count: {count!r}")
    return count


class AnalyticsClient:
    """One authenticated POST per query, no retries."""

    def __init__(
        self,
        api_token: str,
        zone_tag: str,
        *,
        url: str = "https://api.cloudflare.com/client/v4/graphql",
        limit: int = 10000,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_token = api_token
        self.zone_tag = zone_tag
        self.url = url
        self.limit = limit
        self.timeout = timeout
        self._http_client = http_client

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.api_token}"}
        if self._http_client is not None:
            return await self._http_client.post(self.url, json=body, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.url, json=body, headers=headers)

    async def fetch_request_count(self, window: TimeWindow, target_host: str) -> TrafficObservation:
        query = build_query(self.zone_tag, window, target_host, self.limit)
        try:
            r = await self._post({"query": query})
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"analytics request failed: {e}") from e
        try:
            payload = r.json()
        except ValueError as e:
            raise TransportError("analytics response is not JSON") from e
        logger.debug("GraphQL response: %s", payload)
        return TrafficObservation(request_count=parse_count(payload))
