"""Application DTOs - Data Transfer Objects for use cases."""
from smcscan.application.dto.scan_dto import ScanProgress, ScanStatus, ScanTicket

__all__ = [
    "ScanProgress",
    "ScanStatus",
    "ScanTicket",
]
