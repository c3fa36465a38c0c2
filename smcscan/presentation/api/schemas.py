"""
SMC Scanner – API Schemas (Pydantic)
=====================================
Schemas de validación para request/response de la API REST.
"""

from __future__ import annotations

from pydantic import BaseModel
from typing import Optional


class ScanSymbolRequest(BaseModel):
    """
    Body de POST /scan/symbol.
    symbol es opcional a nivel de schema: su ausencia se responde con 400
    (no 422), igual que el servicio que consumen los dashboards existentes.
    """
    symbol: Optional[str] = None


class ScanAcceptedResponse(BaseModel):
    message: str
    scanId: str
    target: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    service: str
