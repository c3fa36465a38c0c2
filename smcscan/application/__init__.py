"""
SMC Scanner – Application Layer
================================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: ScanOrchestrator (petición → señales difundidas)
- services/: ScanWorkerPool (fetch + detección con concurrencia acotada)
- ports/: Interfaces hacia infraestructura y presentación
- dto/: Data Transfer Objects

REGLA DE DEPENDENCIA:
Esta capa puede importar de:
- domain/ (entidades, servicios, excepciones)
- ports/ propios

NO puede importar de:
- infrastructure/ (implementaciones concretas)
- presentation/ (API)
"""

from smcscan.application.services.scan_worker_pool import ScanWorkerPool
from smcscan.application.use_cases.scan_orchestrator import ScanOrchestrator

__all__ = [
    "ScanWorkerPool",
    "ScanOrchestrator",
]
