"""
SMC Scanner – Domain Entity: Candle / CandlestickSeries
=========================================================
Vela OHLCV inmutable recibida del proveedor de mercado y la serie
ordenada sobre la que corre el detector de order blocks.

Decisiones de diseño:
- frozen=True → inmutable una vez obtenida; se comparte entre coroutines
  sin locks.
- Se usa dataclass por rendimiento (más ligera que Pydantic).
- La serie valida su orden al construirse: índice 0 = vela más antigua,
  timestamps no decrecientes. Una serie desordenada nunca llega al detector.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Sequence

from smcscan.domain.exceptions.domain_errors import ValidationError


@dataclass(frozen=True, slots=True)
class Candle:
    """Vela OHLCV con timestamp de apertura."""

    open: float
    high: float
    low: float
    close: float
    volume: float
    timestamp: datetime   # apertura de la vela (UTC)

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    def to_dict(self) -> dict:
        """Serialización para API / logs."""
        return {
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class CandlestickSeries:
    """Secuencia ordenada de velas de un símbolo (índice 0 = más antigua)."""

    symbol_id: str
    candles: tuple[Candle, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.candles, tuple):
            object.__setattr__(self, "candles", tuple(self.candles))
        for older, newer in zip(self.candles, self.candles[1:]):
            if newer.timestamp < older.timestamp:
                raise ValidationError(
                    f"Serie de {self.symbol_id} desordenada: "
                    f"{newer.timestamp.isoformat()} < {older.timestamp.isoformat()}",
                    field="candles",
                )

    @classmethod
    def of(cls, symbol_id: str, candles: Sequence[Candle]) -> "CandlestickSeries":
        return cls(symbol_id=symbol_id, candles=tuple(candles))

    def __len__(self) -> int:
        return len(self.candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self.candles)

    def __getitem__(self, index: int) -> Candle:
        return self.candles[index]

    @property
    def average_volume(self) -> float:
        """Volumen medio de toda la serie (0.0 si está vacía)."""
        if not self.candles:
            return 0.0
        return sum(c.volume for c in self.candles) / len(self.candles)
