"""
Unit tests for the Binance and CoinGecko adapters.

HTTP is served by httpx.MockTransport, so no request leaves the process.
"""

from datetime import datetime, timezone

import httpx
import pytest

from smcscan.domain.exceptions.domain_errors import (
    MalformedMarketDataError,
    SymbolNotFoundError,
    TransientMarketDataError,
)
from smcscan.infrastructure.external.binance_adapter import BinanceMarketDataAdapter
from smcscan.infrastructure.external.coingecko_universe import CoinGeckoUniverse
from smcscan.shared.config.settings import Settings

OPEN_TIME_MS = 1704067200000  # 2024-01-01T00:00:00Z
FOUR_HOURS_MS = 4 * 60 * 60 * 1000


def kline(index, o, h, l, c, v):
    open_time = OPEN_TIME_MS + index * FOUR_HOURS_MS
    return [open_time, str(o), str(h), str(l), str(c), str(v), open_time + FOUR_HOURS_MS - 1, "0", 10]


KLINES = [
    kline(0, 100, 101, 99, 100, 100),
    kline(1, 100, 105, 95, 90, 1000),
    kline(2, 90, 92, 88, 91, 500),
]

TICKER = {"symbol": "BTCUSDT", "lastPrice": "96.50", "volume": "1234.5", "closeTime": 1704196800000}


@pytest.fixture
def settings():
    return Settings(_env_file=None)


def binance(settings, handler, display_names=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BinanceMarketDataAdapter(settings, client, display_names=display_names)


def coingecko(settings, handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CoinGeckoUniverse(settings, client)


class TestBinanceAdapter:

    @pytest.mark.unit
    def test_pair_for(self, settings):
        adapter = binance(settings, lambda request: httpx.Response(200, json=[]))
        assert adapter.pair_for("btc") == "BTCUSDT"
        assert adapter.pair_for("ETHUSDT") == "ETHUSDT"
        assert adapter.pair_for("USDT") == "USDTUSDT"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_series(self, settings):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=KLINES)

        series = await binance(settings, handler).fetch_series("BTC")

        assert seen["path"] == "/api/v3/klines"
        assert seen["params"] == {"symbol": "BTCUSDT", "interval": "4h", "limit": "100"}
        assert series.symbol_id == "BTC"
        assert len(series) == 3
        assert series[1].open == 100.0
        assert series[1].close == 90.0
        assert series[1].volume == 1000.0
        assert series[0].timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_snapshot(self, settings):
        adapter = binance(
            settings,
            lambda request: httpx.Response(200, json=TICKER),
            display_names={"BTC": "Bitcoin"},
        )

        snapshot = await adapter.fetch_snapshot("BTC")

        assert snapshot.current_price == 96.5
        assert snapshot.current_volume == 1234.5
        assert snapshot.display_name == "Bitcoin"
        assert snapshot.as_of == datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_symbol(self, settings):
        adapter = binance(
            settings,
            lambda request: httpx.Response(400, json={"code": -1121, "msg": "Invalid symbol."}),
        )
        with pytest.raises(SymbolNotFoundError) as exc:
            await adapter.fetch_series("NOPE")
        assert exc.value.symbol_id == "NOPE"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [418, 429, 500, 503])
    async def test_transient_status(self, settings, status):
        adapter = binance(settings, lambda request: httpx.Response(status, json={}))
        with pytest.raises(TransientMarketDataError):
            await adapter.fetch_series("BTC")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_network_timeout_is_transient(self, settings):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(TransientMarketDataError):
            await binance(settings, handler).fetch_snapshot("BTC")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self, settings):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransientMarketDataError):
            await binance(settings, handler).fetch_series("BTC")

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"not": "a list"},
        [["bad-row"]],
        [kline(0, "x", 1, 1, 1, 1)],
        [KLINES[2], KLINES[0]],
    ])
    async def test_malformed_klines(self, settings, payload):
        adapter = binance(settings, lambda request: httpx.Response(200, json=payload))
        with pytest.raises(MalformedMarketDataError):
            await adapter.fetch_series("BTC")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_ticker(self, settings):
        adapter = binance(settings, lambda request: httpx.Response(200, json={"lastPrice": "1"}))
        with pytest.raises(MalformedMarketDataError):
            await adapter.fetch_snapshot("BTC")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_body(self, settings):
        adapter = binance(settings, lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(MalformedMarketDataError):
            await adapter.fetch_series("BTC")


class TestCoinGeckoUniverse:

    MARKETS = [
        {"symbol": "btc", "name": "Bitcoin"},
        {"symbol": "usdt", "name": "Tether"},
        {"symbol": "eth", "name": "Ethereum"},
        {"symbol": "usdc", "name": "USDC"},
        {"symbol": "sol", "name": "Solana"},
    ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_excludes_stablecoins_and_records_names(self, settings):
        seen = {}

        def handler(request):
            seen.update(dict(request.url.params))
            return httpx.Response(200, json=self.MARKETS)

        universe = coingecko(settings, handler)
        symbols = await universe.list_symbols(3)

        assert symbols == ["BTC", "ETH", "SOL"]
        assert universe.display_names == {"BTC": "Bitcoin", "ETH": "Ethereum", "SOL": "Solana"}
        assert seen["order"] == "market_cap_desc"
        assert seen["vs_currency"] == "usd"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_limit_is_respected(self, settings):
        universe = coingecko(settings, lambda request: httpx.Response(200, json=self.MARKETS))
        assert await universe.list_symbols(1) == ["BTC"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_short_listing_stops_paging(self, settings):
        pages = []

        def handler(request):
            pages.append(request.url.params["page"])
            return httpx.Response(200, json=self.MARKETS)

        symbols = await coingecko(settings, handler).list_symbols(50)

        assert symbols == ["BTC", "ETH", "SOL"]
        assert pages == ["1"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rate_limited(self, settings):
        universe = coingecko(settings, lambda request: httpx.Response(429, json={}))
        with pytest.raises(TransientMarketDataError):
            await universe.list_symbols(10)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unexpected_payload(self, settings):
        universe = coingecko(settings, lambda request: httpx.Response(200, json={"error": "x"}))
        with pytest.raises(MalformedMarketDataError):
            await universe.list_symbols(10)
