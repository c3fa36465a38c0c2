"""Application ports - Interfaces to infrastructure."""
from smcscan.application.ports.market_data_provider import IMarketDataProvider, ISymbolUniverse
from smcscan.application.ports.signal_publisher import ISignalPublisher

__all__ = [
    "IMarketDataProvider",
    "ISymbolUniverse",
    "ISignalPublisher",
]
