"""
tests/test_sources/test_market.py — Unit tests for MarketIndexSource.

HTTP is mocked with respx; the fixture mirrors a v8 chart response for ^AXJO
with one missing close.
"""

from __future__ import annotations

import copy
from typing import Any

import httpx
import pytest

from ausbiz_shared import constants as c
from ausbiz_shared.dataset import Dataset
from ausbiz_shared.errors import SchemaError, TransportError
from ausbiz_pipeline.sources.base import FetchFailure, FetchSuccess
from ausbiz_pipeline.sources.market import MarketIndexSource, parse_chart_payload

CHART_URL = r".*/v8/finance/chart/.*"


def _with_closes(payload: dict[str, Any], closes: list[Any]) -> dict[str, Any]:
    payload = copy.deepcopy(payload)
    result = payload["chart"]["result"][0]
    result["timestamp"] = result["timestamp"][: len(closes)]
    result["indicators"]["quote"][0]["close"] = closes
    return payload


# ---------------------------------------------------------------------------
# parse_chart_payload()
# ---------------------------------------------------------------------------

class TestParseChartPayload:
    def test_returns_parallel_arrays(self, market_payload: dict[str, Any]):
        timestamps, closes = parse_chart_payload(market_payload)
        assert len(timestamps) == len(closes) == 12
        assert closes[10] is None

    def test_chart_error(self):
        payload = {"chart": {"result": None, "error": {"code": "Not Found", "description": "No data found"}}}
        with pytest.raises(SchemaError, match="No data found"):
            parse_chart_payload(payload)

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"chart": {"result": []}},
            {"chart": {"result": [{"timestamp": [1]}]}},
            {"chart": {"result": [{"timestamp": 1, "indicators": {"quote": [{"close": 2}]}}]}},
        ],
    )
    def test_malformed(self, payload: dict[str, Any]):
        with pytest.raises(SchemaError):
            parse_chart_payload(payload)


# ---------------------------------------------------------------------------
# fetch()
# ---------------------------------------------------------------------------

class TestMarketFetch:
    @pytest.mark.asyncio
    async def test_remaps_quarterly_revenue_only(
        self, mock_http, market_payload: dict[str, Any], dataset: Dataset
    ):
        route = mock_http.get(url__regex=CHART_URL).mock(
            return_value=httpx.Response(200, json=market_payload)
        )
        result = await MarketIndexSource().fetch(dataset)

        assert isinstance(result, FetchSuccess)
        assert result.source_label == "SecondaryAPI"
        assert list(result.update) == [c.QUARTERLY_REVENUE]
        revenue = result.update[c.QUARTERLY_REVENUE]
        assert revenue.values == (162, 162, 165, 163, 163)
        assert revenue.labels == dataset.get(c.QUARTERLY_REVENUE).labels

        request = route.calls[0].request
        assert request.url.path.endswith("/%5EAXJO") or request.url.path.endswith("/^AXJO")
        assert request.url.params["interval"] == "1mo"
        assert request.url.params["range"] == "1y"

    @pytest.mark.asyncio
    async def test_too_few_closes_is_failure(
        self, mock_http, market_payload: dict[str, Any], dataset: Dataset
    ):
        payload = _with_closes(market_payload, [7700.0, None, 7800.0, 7850.0, None])
        mock_http.get(url__regex=CHART_URL).mock(return_value=httpx.Response(200, json=payload))

        result = await MarketIndexSource().fetch(dataset)

        assert isinstance(result, FetchFailure)
        assert isinstance(result.error, SchemaError)
        assert "3 valid closes" in result.reason

    @pytest.mark.asyncio
    async def test_exactly_five_closes_is_enough(
        self, mock_http, market_payload: dict[str, Any], dataset: Dataset
    ):
        payload = _with_closes(market_payload, [7500.0, 7600.0, 7700.0, 7800.0, 7900.0])
        mock_http.get(url__regex=CHART_URL).mock(return_value=httpx.Response(200, json=payload))

        result = await MarketIndexSource().fetch(dataset)

        assert isinstance(result, FetchSuccess)
        assert result.update[c.QUARTERLY_REVENUE].values == (150, 152, 154, 156, 158)

    @pytest.mark.asyncio
    async def test_http_error(self, mock_http, dataset: Dataset):
        mock_http.get(url__regex=CHART_URL).mock(return_value=httpx.Response(429))
        result = await MarketIndexSource().fetch(dataset)

        assert isinstance(result, FetchFailure)
        assert isinstance(result.error, TransportError)
        assert result.error.status_code == 429

    @pytest.mark.asyncio
    async def test_dataset_untouched(self, mock_http, market_payload: dict[str, Any], dataset: Dataset):
        mock_http.get(url__regex=CHART_URL).mock(
            return_value=httpx.Response(200, json=market_payload)
        )
        before = dataset.snapshot()
        await MarketIndexSource().fetch(dataset)
        assert dataset.snapshot() == before


@pytest.mark.asyncio
async def test_get_metadata():
    meta = await MarketIndexSource(symbol="^GSPC").get_metadata()
    assert meta["source_label"] == "SecondaryAPI"
    assert meta["symbol"] == "^GSPC"
