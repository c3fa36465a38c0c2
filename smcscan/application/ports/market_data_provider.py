"""
SMC Scanner – Application Ports: Market Data
==============================================
Interfaces para obtener datos de mercado y el universo de símbolos.

Los use cases solicitan datos; la infraestructura decide CÓMO
obtenerlos (Binance REST, CoinGecko, fakes deterministas en tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from smcscan.domain.entities.candle import CandlestickSeries
from smcscan.domain.value_objects.symbol_snapshot import SymbolSnapshot


class IMarketDataProvider(ABC):
    """
    Interfaz para proveer velas y snapshot de un símbolo.

    IMPLEMENTACIONES POSIBLES:
    - BinanceMarketDataAdapter (REST)
    - Fakes deterministas (testing)

    ERRORES:
    Las implementaciones lanzan subclases de MarketDataError:
    TransientMarketDataError (reintentable), SymbolNotFoundError o
    MalformedMarketDataError (permanentes).
    """

    @abstractmethod
    async def fetch_series(self, symbol_id: str) -> CandlestickSeries:
        """
        Obtiene las velas recientes de un símbolo.

        Args:
            symbol_id: Ticker canónico (e.g. "BTC")

        Returns:
            Serie ordenada, índice 0 = vela más antigua
        """
        pass

    @abstractmethod
    async def fetch_snapshot(self, symbol_id: str) -> SymbolSnapshot:
        """
        Obtiene el precio y volumen actuales de un símbolo.

        Args:
            symbol_id: Ticker canónico (e.g. "BTC")

        Returns:
            Snapshot con as_of = instante de la consulta
        """
        pass


class ISymbolUniverse(ABC):
    """Interfaz para enumerar el universo fijo de símbolos a escanear."""

    @abstractmethod
    async def list_symbols(self, limit: int) -> List[str]:
        """
        Lista los símbolos del universo.

        Args:
            limit: Máximo de símbolos (top-N por capitalización)

        Returns:
            Tickers canónicos en mayúsculas
        """
        pass
