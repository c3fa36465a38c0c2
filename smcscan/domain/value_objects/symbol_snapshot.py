"""
SMC Scanner – Domain Value Object: SymbolSnapshot
===================================================
Estado de mercado más reciente de un símbolo, entregado junto a su serie.

- frozen=True → inmutable, thread-safe para pasar entre coroutines.
- as_of → instante del snapshot; pasa a ser el timestamp de la Signal,
  así el detector no consulta el reloj y es determinista.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SymbolSnapshot:
    """Último precio y volumen conocidos de un símbolo."""

    symbol_id: str         # ticker canónico (e.g. "BTC")
    current_price: float
    current_volume: float
    as_of: datetime        # instante del snapshot (UTC)
    display_name: str = ""

    @property
    def name(self) -> str:
        """Nombre legible; cae al ticker si el proveedor no lo informa."""
        return self.display_name or self.symbol_id
