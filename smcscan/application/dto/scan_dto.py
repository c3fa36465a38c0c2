"""
SMC Scanner – Application DTO: Scan
=====================================
Data Transfer Objects del orquestador de escaneos.

- ScanTicket:   acuse inmediato que recibe quien pidió el escaneo.
- ScanProgress: registro en memoria del avance de cada escaneo
                (se expone por /api/scans, nunca se persiste).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from smcscan.domain.value_objects.fetch_failure import FetchFailure


class ScanStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanTicket:
    """Acuse de un escaneo aceptado."""

    scan_id: str
    target: str
    accepted_at: datetime

    def to_dict(self) -> dict:
        return {
            "scanId": self.scan_id,
            "target": self.target,
            "acceptedAt": self.accepted_at.isoformat(),
        }


@dataclass
class ScanProgress:
    """Avance de un escaneo. Solo lo muta el task del propio escaneo."""

    scan_id: str
    target: str
    started_at: datetime
    status: ScanStatus = ScanStatus.PENDING
    total: int = 0
    completed: int = 0
    signals: int = 0
    zones: int = 0
    failures: List[FetchFailure] = field(default_factory=list)
    error: Optional[str] = None
    finished_at: Optional[datetime] = None

    @property
    def is_finished(self) -> bool:
        return self.status in (ScanStatus.COMPLETED, ScanStatus.FAILED)

    def to_dict(self) -> dict:
        return {
            "scanId": self.scan_id,
            "target": self.target,
            "status": self.status.value,
            "startedAt": self.started_at.isoformat(),
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
            "total": self.total,
            "completed": self.completed,
            "signals": self.signals,
            "zones": self.zones,
            "failures": [f.to_dict() for f in self.failures],
            "error": self.error,
        }
