"""
Binance REST Adapter.

Adapta la API pública de Binance a la interfaz IMarketDataProvider.
Velas: GET /api/v3/klines · Snapshot: GET /api/v3/ticker/24hr.

MAPEO DE ERRORES:
- 429 / 418 / 5xx, errores de red, timeouts → TransientMarketDataError
- 400 con code -1121 ("Invalid symbol"), 404 → SymbolNotFoundError
- JSON inesperado                          → MalformedMarketDataError
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import httpx

from smcscan.application.ports.market_data_provider import IMarketDataProvider
from smcscan.domain.entities.candle import Candle, CandlestickSeries
from smcscan.domain.exceptions.domain_errors import (
    MalformedMarketDataError,
    SymbolNotFoundError,
    TransientMarketDataError,
    ValidationError,
)
from smcscan.domain.value_objects.symbol_snapshot import SymbolSnapshot
from smcscan.shared.config.settings import Settings
from smcscan.shared.logging.logger import get_logger

logger = get_logger("binance_adapter")

INVALID_SYMBOL_CODE = -1121
TRANSIENT_STATUS = {418, 429}


class BinanceMarketDataAdapter(IMarketDataProvider):
    """
    Implementación de IMarketDataProvider sobre Binance Spot REST.

    El symbol_id canónico ("BTC") se convierte al par "BTCUSDT" con el
    activo de cotización configurado.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        display_names: Optional[Mapping[str, str]] = None,
    ):
        self._settings = settings
        self._client = client
        # Compartido con el universo de CoinGecko (ticker → nombre legible)
        self._display_names: Mapping[str, str] = display_names if display_names is not None else {}
        self._base_url = settings.binance_base_url.rstrip("/")

    def pair_for(self, symbol_id: str) -> str:
        quote = self._settings.quote_asset.upper()
        symbol_id = symbol_id.upper()
        if symbol_id.endswith(quote) and symbol_id != quote:
            return symbol_id
        return f"{symbol_id}{quote}"

    # ════════════════════════════════════════════════════════════════
    #  IMarketDataProvider Implementation
    # ════════════════════════════════════════════════════════════════

    async def fetch_series(self, symbol_id: str) -> CandlestickSeries:
        payload = await self._get(
            symbol_id,
            "/api/v3/klines",
            {
                "symbol": self.pair_for(symbol_id),
                "interval": self._settings.kline_interval,
                "limit": self._settings.kline_limit,
            },
        )
        if not isinstance(payload, list):
            raise MalformedMarketDataError(
                f"klines de {symbol_id}: se esperaba una lista", symbol_id=symbol_id
            )

        try:
            candles = [self._parse_kline(row) for row in payload]
            return CandlestickSeries.of(symbol_id, candles)
        except (TypeError, ValueError, IndexError, ValidationError) as e:
            raise MalformedMarketDataError(
                f"klines de {symbol_id} inválidas: {e}", symbol_id=symbol_id
            ) from e

    async def fetch_snapshot(self, symbol_id: str) -> SymbolSnapshot:
        payload = await self._get(
            symbol_id, "/api/v3/ticker/24hr", {"symbol": self.pair_for(symbol_id)}
        )
        try:
            return SymbolSnapshot(
                symbol_id=symbol_id,
                current_price=float(payload["lastPrice"]),
                current_volume=float(payload["volume"]),
                as_of=_from_millis(payload["closeTime"]) if "closeTime" in payload else _utcnow(),
                display_name=self._display_names.get(symbol_id, symbol_id),
            )
        except (TypeError, ValueError, KeyError) as e:
            raise MalformedMarketDataError(
                f"ticker 24h de {symbol_id} inválido: {e}", symbol_id=symbol_id
            ) from e

    # ════════════════════════════════════════════════════════════════
    #  HTTP
    # ════════════════════════════════════════════════════════════════

    async def _get(self, symbol_id: str, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise TransientMarketDataError(
                f"timeout consultando {path} para {symbol_id}", symbol_id=symbol_id
            ) from e
        except httpx.TransportError as e:
            raise TransientMarketDataError(
                f"error de red consultando {path} para {symbol_id}: {e}", symbol_id=symbol_id
            ) from e

        status = response.status_code
        if status in TRANSIENT_STATUS or status >= 500:
            raise TransientMarketDataError(
                f"Binance respondió {status} en {path} para {symbol_id}", symbol_id=symbol_id
            )
        if status == 404:
            raise SymbolNotFoundError(f"símbolo desconocido: {symbol_id}", symbol_id=symbol_id)
        if status >= 400:
            body = _safe_json(response)
            code = body.get("code") if isinstance(body, dict) else None
            if code == INVALID_SYMBOL_CODE:
                raise SymbolNotFoundError(
                    f"símbolo desconocido en Binance: {self.pair_for(symbol_id)}",
                    symbol_id=symbol_id,
                )
            raise MalformedMarketDataError(
                f"Binance rechazó {path} para {symbol_id} ({status}): {body}",
                symbol_id=symbol_id,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedMarketDataError(
                f"respuesta no-JSON de {path} para {symbol_id}", symbol_id=symbol_id
            ) from e

    @staticmethod
    def _parse_kline(row: list) -> Candle:
        # [open_time, open, high, low, close, volume, close_time, ...]
        return Candle(
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
            timestamp=_from_millis(row[0]),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _from_millis(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:200]
