"""Domain services - Pure business logic with no external dependencies."""
from smcscan.domain.services.order_block_detector import (
    DetectorConfig,
    OrderBlockDetector,
    MIN_CANDLES,
)

__all__ = [
    "DetectorConfig",
    "OrderBlockDetector",
    "MIN_CANDLES",
]
