"""
SMC Scanner – Domain Value Object: ScanRequest
================================================
Petición de escaneo: todo el universo o un símbolo concreto.

El símbolo se normaliza a su forma canónica (sin espacios, mayúsculas)
antes de llegar al orquestador. Un símbolo vacío es una petición inválida.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from smcscan.domain.exceptions.domain_errors import InvalidRequestError

UNIVERSE = "universe"


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """Objetivo de un escaneo: UNIVERSE o un symbol_id canónico."""

    target: str

    @classmethod
    def universe(cls) -> "ScanRequest":
        return cls(target=UNIVERSE)

    @classmethod
    def for_symbol(cls, symbol: Optional[str]) -> "ScanRequest":
        normalized = normalize_symbol(symbol)
        if not normalized:
            raise InvalidRequestError("Symbol is required", field="symbol", value=symbol)
        return cls(target=normalized)

    @property
    def is_universe(self) -> bool:
        return self.target == UNIVERSE


def normalize_symbol(symbol: Optional[str]) -> str:
    """'  btc ' → 'BTC'. Devuelve '' para None o blancos."""
    if not isinstance(symbol, str):
        return ""
    return symbol.strip().upper()
