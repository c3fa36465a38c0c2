"""Application use cases - Business logic orchestration."""

from smcscan.application.use_cases.scan_orchestrator import ScanOrchestrator

__all__ = [
    "ScanOrchestrator",
]
