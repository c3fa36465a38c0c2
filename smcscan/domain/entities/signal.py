"""
SMC Scanner – Domain Entity: Signal
=====================================
Resultado inmutable del detector de order blocks para un símbolo.

DECISIONES DE DISEÑO:
- frozen=True → se crea exactamente una vez por (símbolo, escaneo) y nadie
  la altera después. Viaja Worker → Orchestrator → Hub por referencia.
- classification es un str Enum → se serializa directo a JSON.
- reference_price solo existe cuando classification != None.

CAMPOS (wire format en camelCase, ver to_dict()):
- symbol_id:       Ticker canónico (e.g. "BTC")
- display_name:    Nombre legible (e.g. "Bitcoin")
- current_price:   Último precio del snapshot
- current_volume:  Volumen 24h del snapshot
- timestamp:       Instante del snapshot analizado (UTC)
- classification:  BuyingZone | SellingZone | None
- reference_price: Precio de la zona (open de la vela order block)
- explanation:     Texto legible para el dashboard
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class OrderBlockType(str, Enum):
    """Clasificación de un order block."""

    BUYING_ZONE = "BuyingZone"
    SELLING_ZONE = "SellingZone"
    NONE = "None"


@dataclass(frozen=True, slots=True)
class Signal:
    """Señal de order block inmutable."""

    symbol_id: str
    display_name: str
    current_price: float
    current_volume: float
    timestamp: datetime
    classification: OrderBlockType
    reference_price: Optional[float]
    explanation: str

    @property
    def is_zone(self) -> bool:
        return self.classification is not OrderBlockType.NONE

    def to_dict(self) -> dict:
        """Serialización para WebSocket / API."""
        return {
            "symbolId": self.symbol_id,
            "displayName": self.display_name,
            "currentPrice": self.current_price,
            "currentVolume": self.current_volume,
            "timestamp": self.timestamp.isoformat(),
            "classification": self.classification.value,
            "referencePrice": self.reference_price,
            "explanation": self.explanation,
        }
