"""External systems - market data APIs."""

from smcscan.infrastructure.external.binance_adapter import BinanceMarketDataAdapter
from smcscan.infrastructure.external.coingecko_universe import CoinGeckoUniverse

__all__ = [
    "BinanceMarketDataAdapter",
    "CoinGeckoUniverse",
]
