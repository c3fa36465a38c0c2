"""
SMC Scanner – Domain Value Object: FetchFailure
=================================================
Fallo aislado de un símbolo dentro de un escaneo.

Nunca se emite a los suscriptores: solo se registra en logs y en el
progreso del escaneo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from smcscan.domain.entities.signal import Signal


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """Resultado fallido de fetch + detección para un símbolo."""

    symbol_id: str
    reason: str
    transient: bool = False
    attempts: int = 1

    def to_dict(self) -> dict:
        return {
            "symbolId": self.symbol_id,
            "reason": self.reason,
            "transient": self.transient,
            "attempts": self.attempts,
        }


# Resultado de un worker: señal (camino feliz) o fallo aislado
ScanOutcome = Union[Signal, FetchFailure]
