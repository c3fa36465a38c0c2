"""
SMC Scanner – Domain Service: Order Block Detector
====================================================
Lógica pura de detección de order blocks (zonas de oferta/demanda).

Este servicio contiene SOLO lógica de negocio sin dependencias
externas. Mismos inputs → misma Signal. Sin I/O, sin reloj, sin estado.

VENTANA EVALUADA (tres velas más recientes):
  latest   = serie[-1]
  prev     = serie[-2]   ← candidata a order block
  two_prev = serie[-3]   ← solo exige el largo mínimo

REGLAS:
1. BuyingZone (demanda): prev bajista y fuerte, con volumen alto,
   el precio actual sigue por encima de prev.low, y latest es alcista
   o de cuerpo pequeño.
2. SellingZone (oferta): simétrica. prev alcista y fuerte, volumen alto,
   precio actual bajo prev.high, latest bajista o de cuerpo pequeño.
3. BuyingZone se evalúa primero; es el desempate definido.
"""

from __future__ import annotations

from dataclasses import dataclass

from smcscan.domain.entities.candle import Candle, CandlestickSeries
from smcscan.domain.entities.signal import OrderBlockType, Signal
from smcscan.domain.value_objects.symbol_snapshot import SymbolSnapshot

MIN_CANDLES = 3


@dataclass(frozen=True)
class DetectorConfig:
    """Configuración del detector."""

    strong_body_ratio: float = 0.01   # cuerpo / open
    volume_multiplier: float = 1.5    # volumen / promedio
    interval_label: str = "4h"        # solo para la explicación


class OrderBlockDetector:
    """
    Servicio de dominio para clasificar la última ventana de velas.

    USO:
        detector = OrderBlockDetector(DetectorConfig())
        signal = detector.detect(series, snapshot)
    """

    def __init__(self, config: DetectorConfig = None):
        self._config = config or DetectorConfig()

    @property
    def config(self) -> DetectorConfig:
        return self._config

    def detect(self, series: CandlestickSeries, snapshot: SymbolSnapshot) -> Signal:
        if len(series) < MIN_CANDLES:
            return self._build(
                snapshot,
                OrderBlockType.NONE,
                None,
                f"insufficient data: {len(series)} candles, need at least {MIN_CANDLES}",
            )

        latest = series[-1]
        prev = series[-2]
        threshold = series.average_volume * self._config.volume_multiplier
        price = snapshot.current_price

        if self._is_buying_zone(prev, latest, threshold, price):
            return self._build(
                snapshot,
                OrderBlockType.BUYING_ZONE,
                prev.open,
                f"Potential {self._config.interval_label} buying order block near "
                f"${prev.open:.2f}: strong bearish candle on high volume marks a demand zone.",
            )

        if self._is_selling_zone(prev, latest, threshold, price):
            return self._build(
                snapshot,
                OrderBlockType.SELLING_ZONE,
                prev.open,
                f"Potential {self._config.interval_label} selling order block near "
                f"${prev.open:.2f}: strong bullish candle on high volume marks a supply zone.",
            )

        return self._build(snapshot, OrderBlockType.NONE, None, "no pattern detected")

    # ════════════════════════════════════════════════════════════════
    #  REGLAS
    # ════════════════════════════════════════════════════════════════

    def _is_buying_zone(
        self, prev: Candle, latest: Candle, volume_threshold: float, price: float
    ) -> bool:
        if not prev.is_bearish:
            return False
        body = _body_ratio(prev.open, prev.open - prev.close)
        if body is None or body <= self._config.strong_body_ratio:
            return False
        if prev.volume <= volume_threshold:
            return False
        if price <= prev.low:
            return False
        return latest.is_bullish or self._is_small_body(latest, latest.open - latest.close)

    def _is_selling_zone(
        self, prev: Candle, latest: Candle, volume_threshold: float, price: float
    ) -> bool:
        if not prev.is_bullish:
            return False
        body = _body_ratio(prev.open, prev.close - prev.open)
        if body is None or body <= self._config.strong_body_ratio:
            return False
        if prev.volume <= volume_threshold:
            return False
        if price >= prev.high:
            return False
        return latest.is_bearish or self._is_small_body(latest, latest.close - latest.open)

    def _is_small_body(self, candle: Candle, signed_body: float) -> bool:
        # Cuerpo con signo: una vela a favor de la zona da ratio negativo
        # y siempre cuenta como pequeña.
        ratio = _body_ratio(candle.open, signed_body)
        return ratio is not None and ratio < self._config.strong_body_ratio

    @staticmethod
    def _build(
        snapshot: SymbolSnapshot,
        classification: OrderBlockType,
        reference_price: float | None,
        explanation: str,
    ) -> Signal:
        return Signal(
            symbol_id=snapshot.symbol_id,
            display_name=snapshot.name,
            current_price=snapshot.current_price,
            current_volume=snapshot.current_volume,
            timestamp=snapshot.as_of,
            classification=classification,
            reference_price=reference_price,
            explanation=explanation,
        )


def _body_ratio(open_price: float, body: float) -> float | None:
    """Cuerpo relativo al open; None si open == 0 (ratio indefinido)."""
    if open_price == 0:
        return None
    return body / open_price
