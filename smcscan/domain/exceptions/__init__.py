"""Domain exceptions."""
from smcscan.domain.exceptions.domain_errors import (
    DomainError,
    ValidationError,
    InvalidRequestError,
    MarketDataError,
    TransientMarketDataError,
    SymbolNotFoundError,
    MalformedMarketDataError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "InvalidRequestError",
    "MarketDataError",
    "TransientMarketDataError",
    "SymbolNotFoundError",
    "MalformedMarketDataError",
]
