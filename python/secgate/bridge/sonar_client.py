"""SonarQube Web API client for pulling SAST issues."""

import asyncio
from typing import Any, Dict, List, Optional
import logging

import aiohttp

from ..errors import SourceUnavailable
from ..parsers.sonarqube import issue_to_finding, quality_gate_finding
from ..results.finding import Finding

logger = logging.getLogger(__name__)

# SonarQube refuses to page past 10k results
MAX_RESULTS = 10000


class SonarClient:
    """
    Client for the SonarQube Web API.

    Authenticates with a user token sent as the basic-auth login.
    """

    def __init__(
        self,
        sonar_url: str = "http://localhost:9000",
        token: Optional[str] = None,
        timeout: float = 30.0
    ):
        self.sonar_url = sonar_url.rstrip("/")
        self.token = token
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        if self._session is None:
            auth = aiohttp.BasicAuth(self.token, "") if self.token else None
            self._session = aiohttp.ClientSession(timeout=self.timeout, auth=auth)

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def _request(self, endpoint: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        if self._session is None:
            await self.start()

        url = f"{self.sonar_url}{endpoint}"
        try:
            async with self._session.get(url, params=params or {}) as resp:
                resp.raise_for_status()
                return await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"SonarQube API error: {e}")
            raise SourceUnavailable(f"SonarQube at {self.sonar_url} unavailable: {e}") from e

    async def search_issues(self, project_key: str, page_size: int = 500) -> List[Dict]:
        """Get all unresolved issues of a project."""
        issues: List[Dict] = []
        page = 1
        while True:
            result = await self._request("/api/issues/search", params={
                "componentKeys": project_key,
                "resolved": "false",
                "p": page,
                "ps": page_size,
            })
            batch = result.get("issues", [])
            issues.extend(batch)

            total = result.get("paging", {}).get("total", result.get("total", 0))
            if not batch or len(issues) >= min(total, MAX_RESULTS):
                break
            page += 1
        return issues

    async def quality_gate_status(self, project_key: str) -> Dict[str, Any]:
        """Get the project's quality gate status (OK, WARN, ERROR, NONE)."""
        result = await self._request(
            "/api/qualitygates/project_status",
            params={"projectKey": project_key}
        )
        return result.get("projectStatus", {})

    async def fetch_findings(self, project_key: str, include_quality_gate: bool = True) -> List[Finding]:
        """Fetch issues, plus a finding for a failed quality gate."""
        issues = await self.search_issues(project_key)
        findings = [issue_to_finding(i) for i in issues]
        logger.info(f"Fetched {len(issues)} issues from SonarQube project {project_key}")

        if include_quality_gate:
            status = await self.quality_gate_status(project_key)
            if status.get("status") == "ERROR":
                logger.warning(f"SonarQube quality gate failed for {project_key}")
                findings.append(quality_gate_finding(project_key, status))

        return findings
