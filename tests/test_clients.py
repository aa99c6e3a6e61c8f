"""Tests for live ZAP and SonarQube clients."""

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

import aiohttp

from secgate.bridge import SonarClient, ZAPClient
from secgate.errors import SourceUnavailable
from secgate.parsers import QUALITY_GATE_RULE
from secgate.results import Category, Severity


def zap_alert(plugin_id, risk="Medium"):
    return {"pluginId": plugin_id, "alert": f"alert {plugin_id}", "risk": risk, "url": "http://app/"}


class TestZAPClient:
    """Tests for the ZAP API client."""

    @pytest.mark.asyncio
    async def test_pages_until_short_page(self):
        client = ZAPClient()
        client._request = AsyncMock(side_effect=[
            {"alerts": [zap_alert("1"), zap_alert("2")]},
            {"alerts": [zap_alert("3")]},
        ])

        alerts = await client.get_all_alerts(base_url="http://app", page_size=2)

        assert [a["pluginId"] for a in alerts] == ["1", "2", "3"]
        second_call = client._request.call_args_list[1]
        assert second_call.kwargs["params"] == {"start": 2, "count": 2, "baseurl": "http://app"}

    @pytest.mark.asyncio
    async def test_fetch_findings(self):
        client = ZAPClient()
        client._request = AsyncMock(return_value={"alerts": [zap_alert("40012", "High")]})

        findings = await client.fetch_findings()

        assert findings[0].rule_id == "40012"
        assert findings[0].severity is Severity.HIGH
        assert findings[0].category is Category.DAST

    @pytest.mark.asyncio
    async def test_connection_error(self):
        client = ZAPClient(zap_url="http://zap:8080/", api_key="k")
        client._session = MagicMock()
        client._session.get.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(SourceUnavailable):
            await client.get_version()

        _, kwargs = client._session.get.call_args
        assert kwargs["params"]["apikey"] == "k"


class TestSonarClient:
    """Tests for the SonarQube API client."""

    @pytest.mark.asyncio
    async def test_issue_pagination(self, sonar_report):
        issues = sonar_report["issues"]
        client = SonarClient()
        client._request = AsyncMock(side_effect=[
            {"paging": {"total": 3}, "issues": issues[:2]},
            {"paging": {"total": 3}, "issues": issues[2:]},
        ])

        result = await client.search_issues("my-app", page_size=2)

        assert len(result) == 3
        assert client._request.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_quality_gate_adds_finding(self, sonar_report):
        client = SonarClient(token="squ_x")
        client._request = AsyncMock(side_effect=[
            {"paging": {"total": 1}, "issues": sonar_report["issues"][:1]},
            {"projectStatus": {"status": "ERROR", "conditions": [
                {"metricKey": "new_security_rating", "status": "ERROR"},
            ]}},
        ])

        findings = await client.fetch_findings("my-app")

        assert [f.rule_id for f in findings] == ["python:S2077", QUALITY_GATE_RULE]

    @pytest.mark.asyncio
    async def test_passed_quality_gate(self):
        client = SonarClient()
        client._request = AsyncMock(side_effect=[
            {"paging": {"total": 0}, "issues": []},
            {"projectStatus": {"status": "OK"}},
        ])

        assert await client.fetch_findings("my-app") == []

    @pytest.mark.asyncio
    async def test_skip_quality_gate(self):
        client = SonarClient()
        client._request = AsyncMock(return_value={"paging": {"total": 0}, "issues": []})

        await client.fetch_findings("my-app", include_quality_gate=False)

        assert client._request.await_count == 1
