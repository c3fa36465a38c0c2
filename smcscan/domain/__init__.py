"""
SMC Scanner – Domain Layer
===========================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Entidades (Candle, CandlestickSeries, Signal)
- value_objects/: Objetos inmutables (SymbolSnapshot, ScanRequest, FetchFailure)
- services/: Servicios de dominio puros (OrderBlockDetector)
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (FastAPI, httpx, etc.)
"""

from smcscan.domain.entities.candle import Candle, CandlestickSeries
from smcscan.domain.entities.signal import OrderBlockType, Signal
from smcscan.domain.value_objects.fetch_failure import FetchFailure, ScanOutcome
from smcscan.domain.value_objects.scan_request import ScanRequest
from smcscan.domain.value_objects.symbol_snapshot import SymbolSnapshot

__all__ = [
    "Candle",
    "CandlestickSeries",
    "OrderBlockType",
    "Signal",
    "FetchFailure",
    "ScanOutcome",
    "ScanRequest",
    "SymbolSnapshot",
]
