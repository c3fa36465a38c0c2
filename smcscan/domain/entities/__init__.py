"""Domain entities."""
from smcscan.domain.entities.candle import Candle, CandlestickSeries
from smcscan.domain.entities.signal import OrderBlockType, Signal

__all__ = ["Candle", "CandlestickSeries", "OrderBlockType", "Signal"]
