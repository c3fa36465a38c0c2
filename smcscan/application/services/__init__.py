"""Application services - orchestration helpers shared by use cases."""
from smcscan.application.services.scan_worker_pool import ScanWorkerPool

__all__ = ["ScanWorkerPool"]
