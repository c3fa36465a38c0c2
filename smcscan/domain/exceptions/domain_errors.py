"""
SMC Scanner – Domain Exceptions
================================
Excepciones específicas del dominio de escaneo.

JERARQUÍA:
    DomainError (base)
    ├── ValidationError
    │   └── InvalidRequestError
    └── MarketDataError
        ├── TransientMarketDataError   (timeout, rate limit → se reintenta)
        ├── SymbolNotFoundError        (permanente)
        └── MalformedMarketDataError   (permanente)

NOTA: "datos insuficientes" NO es una excepción. El detector devuelve una
señal con classification=None y el batch sigue su curso.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainError):
    """Error de validación general de datos de dominio."""

    def __init__(self, message: str, field: str = None, value: Any = None, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)
        self.field = field
        self.value = value


class InvalidRequestError(ValidationError):
    """Petición de escaneo mal formada (se rechaza en el endpoint)."""

    def __init__(self, message: str, field: str = None, value: Any = None):
        super().__init__(message, field=field, value=value, code="INVALID_REQUEST")


class MarketDataError(DomainError):
    """Fallo obteniendo datos de mercado de un símbolo."""

    transient: bool = False

    def __init__(self, message: str, symbol_id: str = None, code: str = "MARKET_DATA_ERROR"):
        super().__init__(message, code=code)
        self.symbol_id = symbol_id


class TransientMarketDataError(MarketDataError):
    """Timeout, rate limit o error de red: vale la pena reintentar."""

    transient = True

    def __init__(self, message: str, symbol_id: str = None):
        super().__init__(message, symbol_id=symbol_id, code="MARKET_DATA_UNAVAILABLE")


class SymbolNotFoundError(MarketDataError):
    """El proveedor no conoce el símbolo."""

    def __init__(self, message: str, symbol_id: str = None):
        super().__init__(message, symbol_id=symbol_id, code="SYMBOL_NOT_FOUND")


class MalformedMarketDataError(MarketDataError):
    """Respuesta del proveedor imposible de interpretar."""

    def __init__(self, message: str, symbol_id: str = None):
        super().__init__(message, symbol_id=symbol_id, code="MALFORMED_MARKET_DATA")
