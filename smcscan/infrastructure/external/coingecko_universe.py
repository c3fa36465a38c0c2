"""
CoinGecko Universe Adapter.

Implementa ISymbolUniverse con el ranking por capitalización de CoinGecko
(GET /coins/markets, order=market_cap_desc).

Además mantiene el mapeo ticker → nombre legible que el adapter de
Binance usa como display_name de cada señal.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

import httpx

from smcscan.application.ports.market_data_provider import ISymbolUniverse
from smcscan.domain.exceptions.domain_errors import (
    MalformedMarketDataError,
    TransientMarketDataError,
)
from smcscan.domain.value_objects.scan_request import normalize_symbol
from smcscan.shared.config.settings import Settings
from smcscan.shared.logging.logger import get_logger

logger = get_logger("coingecko_universe")

MAX_PER_PAGE = 250


class CoinGeckoUniverse(ISymbolUniverse):
    """Top-N símbolos por capitalización de mercado."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self._settings = settings
        self._client = client
        self._base_url = settings.coingecko_base_url.rstrip("/")
        self._exclude = {normalize_symbol(s) for s in settings.universe_exclude}
        self.display_names: Dict[str, str] = {}

    async def list_symbols(self, limit: int) -> List[str]:
        symbols: List[str] = []
        page = 1
        # Se pide de más para compensar las stablecoins excluidas
        while len(symbols) < limit:
            per_page = min(MAX_PER_PAGE, limit + len(self._exclude))
            coins = await self._fetch_page(page, per_page)
            symbols.extend(self._accept(coins, limit - len(symbols)))
            if len(coins) < per_page:
                break
            page += 1

        logger.info("Universo CoinGecko: %d símbolos (top %d)", len(symbols), limit)
        return symbols

    def _accept(self, coins: Iterable[dict], remaining: int) -> List[str]:
        accepted: List[str] = []
        for coin in coins:
            if len(accepted) >= remaining:
                break
            try:
                symbol = normalize_symbol(coin["symbol"])
                name = str(coin.get("name") or symbol)
            except (KeyError, TypeError) as e:
                raise MalformedMarketDataError(f"moneda sin 'symbol' en CoinGecko: {e}") from e
            if not symbol or symbol in self._exclude:
                continue
            self.display_names[symbol] = name
            accepted.append(symbol)
        return accepted

    async def _fetch_page(self, page: int, per_page: int) -> list:
        params = {
            "vs_currency": self._settings.vs_currency,
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": page,
            "sparkline": "false",
        }
        try:
            response = await self._client.get(f"{self._base_url}/coins/markets", params=params)
        except httpx.TimeoutException as e:
            raise TransientMarketDataError("timeout consultando el universo en CoinGecko") from e
        except httpx.TransportError as e:
            raise TransientMarketDataError(f"error de red consultando CoinGecko: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise TransientMarketDataError(f"CoinGecko respondió {response.status_code}")
        if response.status_code >= 400:
            raise MalformedMarketDataError(
                f"CoinGecko rechazó la consulta ({response.status_code}): {response.text[:200]}"
            )

        try:
            coins = response.json()
        except ValueError as e:
            raise MalformedMarketDataError("respuesta no-JSON de CoinGecko") from e
        if not isinstance(coins, list):
            raise MalformedMarketDataError("CoinGecko: se esperaba una lista de monedas")
        return coins
