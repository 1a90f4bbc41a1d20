"""Tests for the provider client and quote parsing."""

import asyncio
from decimal import Decimal

import httpx
import pytest

from fxrates.core.errors import UpstreamFetchFailed
from fxrates.schemas.currency import RateSnapshot
from fxrates.services.provider import fetch_snapshot, parse_quotes


URL = "http://provider.test/live"


def fetch_with(handler) -> RateSnapshot:
    async def run() -> RateSnapshot:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_snapshot(client, URL)

    return asyncio.run(run())


class TestParseQuotes:
    def test_strips_base_prefix(self):
        snapshot = RateSnapshot(quotes={"USDEUR": 0.9, "USDJPY": 150.0})

        rates, skipped = parse_quotes(snapshot, "USD")

        assert rates == {"EUR": Decimal("0.9"), "JPY": Decimal("150")}
        assert skipped == []

    def test_discards_codes_that_are_not_three_letters(self):
        snapshot = RateSnapshot(quotes={"USDEUR": 0.9, "USDXX": 1.5, "USD": 1.0, "EURGBP": 0.85, "USDAB1": 2.0})

        rates, skipped = parse_quotes(snapshot, "USD")

        assert list(rates) == ["EUR"]
        assert sorted(skipped) == ["EURGBP", "USD", "USDAB1", "USDXX"]

    def test_discards_non_positive_rates(self):
        snapshot = RateSnapshot(quotes={"USDEUR": 0.0, "USDGBP": -1.2, "USDJPY": 150.0})

        rates, _ = parse_quotes(snapshot, "USD")

        assert list(rates) == ["JPY"]

    def test_rates_quantized_to_eight_digits(self):
        rates, _ = parse_quotes(RateSnapshot(quotes={"USDBTC": 0.0000123456789}), "USD")

        assert rates["BTC"] == Decimal("0.00001235")

    def test_other_base_currency(self):
        rates, _ = parse_quotes(RateSnapshot(quotes={"EURUSD": 1.1, "USDJPY": 150.0}), "EUR")

        assert rates == {"USD": Decimal("1.1")}


class TestFetchSnapshot:
    def test_decodes_payload(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == URL
            return httpx.Response(200, json={"success": True, "timestamp": 1700000000, "quotes": {"USDEUR": 0.9}})

        snapshot = fetch_with(handler)

        assert snapshot.timestamp == 1700000000
        assert snapshot.quotes == {"USDEUR": 0.9}

    def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFetchFailed):
            fetch_with(handler)

    def test_http_error_status(self):
        with pytest.raises(UpstreamFetchFailed):
            fetch_with(lambda request: httpx.Response(500, text="oops"))

    def test_malformed_body(self):
        with pytest.raises(UpstreamFetchFailed):
            fetch_with(lambda request: httpx.Response(200, text="<html>not json</html>"))

    def test_unexpected_shape(self):
        with pytest.raises(UpstreamFetchFailed):
            fetch_with(lambda request: httpx.Response(200, json={"quotes": {"USDEUR": "lots"}}))

    def test_provider_reports_failure(self):
        with pytest.raises(UpstreamFetchFailed):
            fetch_with(lambda request: httpx.Response(200, json={"success": False, "error": {"code": 101}}))
