"""ZAP REST API client for pulling DAST alerts from a running daemon."""

import asyncio
from typing import Any, Dict, List, Optional
import logging

import aiohttp

from ..errors import SourceUnavailable
from ..parsers.zap import api_alert_to_finding
from ..results.finding import Finding

logger = logging.getLogger(__name__)


class ZAPClient:
    """
    Client for OWASP ZAP REST API.

    Only the read side needed by the gate is covered:
    - Version check
    - Alert retrieval (paginated)
    """

    def __init__(
        self,
        zap_url: str = "http://localhost:8080",
        api_key: Optional[str] = None,
        timeout: float = 30.0
    ):
        self.zap_url = zap_url.rstrip("/")
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        """Start the client session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

    async def close(self) -> None:
        """Close the client session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def _request(self, endpoint: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make API request to ZAP."""
        if self._session is None:
            await self.start()

        url = f"{self.zap_url}{endpoint}"

        if params is None:
            params = {}
        if self.api_key:
            params["apikey"] = self.api_key

        try:
            async with self._session.get(url, params=params) as resp:
                resp.raise_for_status()
                return await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"ZAP API error: {e}")
            raise SourceUnavailable(f"ZAP at {self.zap_url} unavailable: {e}") from e

    async def get_version(self) -> str:
        """Get ZAP version."""
        result = await self._request("/JSON/core/view/version/")
        return result.get("version", "unknown")

    async def get_alerts(
        self,
        base_url: Optional[str] = None,
        start: int = 0,
        count: int = 100
    ) -> List[Dict]:
        """Get one page of alerts from ZAP."""
        params = {"start": start, "count": count}
        if base_url:
            params["baseurl"] = base_url

        result = await self._request("/JSON/core/view/alerts/", params=params)
        return result.get("alerts", [])

    async def get_all_alerts(self, base_url: Optional[str] = None, page_size: int = 500) -> List[Dict]:
        """Page through all alerts."""
        alerts: List[Dict] = []
        start = 0
        while True:
            page = await self.get_alerts(base_url=base_url, start=start, count=page_size)
            alerts.extend(page)
            if len(page) < page_size:
                break
            start += page_size
        return alerts

    async def fetch_findings(self, base_url: Optional[str] = None) -> List[Finding]:
        """Fetch all alerts and convert them to findings."""
        alerts = await self.get_all_alerts(base_url=base_url)
        logger.info(f"Fetched {len(alerts)} alerts from ZAP")
        return [api_alert_to_finding(a) for a in alerts]
