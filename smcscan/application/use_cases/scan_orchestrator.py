"""
SMC Scanner – Use Case: Scan Orchestrator
===========================================
Convierte una petición de escaneo (universo o símbolo) en invocaciones
del Worker Pool y reenvía cada Signal al publicador en cuanto está lista.

FLUJO:
  run_scan(request) ──▸ task de fondo ──▸ [resolver símbolos]
       │                                      │
       ▼                                      ▼
  ScanTicket (inmediato)        pool.submit(símbolo) × N
                                              │  as_completed
                                              ▼
                             Signal ──▸ publisher.publish()
                             FetchFailure ──▸ solo logs + progreso

GARANTÍAS:
- run_scan() NUNCA espera al escaneo: crea el task y retorna.
- Sin orden entre símbolos: se publica en orden de finalización.
- Sin evento de "batch completo" y sin deduplicación entre escaneos
  concurrentes del mismo símbolo.
- Un escaneo nuevo no cancela uno anterior.
- Una excepción en el task de un símbolo se registra como fallo de ese
  símbolo; el resto del escaneo sigue.
- El historial solo descarta escaneos terminados.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from smcscan.application.dto.scan_dto import ScanProgress, ScanStatus, ScanTicket
from smcscan.application.ports.market_data_provider import ISymbolUniverse
from smcscan.application.ports.signal_publisher import ISignalPublisher
from smcscan.application.services.scan_worker_pool import ScanWorkerPool
from smcscan.domain.value_objects.fetch_failure import FetchFailure, ScanOutcome
from smcscan.domain.value_objects.scan_request import ScanRequest, normalize_symbol
from smcscan.shared.logging.logger import get_logger

logger = get_logger("scan_orchestrator")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanOrchestrator:
    """
    Caso de uso: escanear símbolos y difundir señales.

    DEPENDE SOLO DE:
    - ScanWorkerPool (fetch + detección acotados)
    - ISymbolUniverse (lista del universo)
    - ISignalPublisher (Broadcast Hub)
    """

    def __init__(
        self,
        worker_pool: ScanWorkerPool,
        universe: ISymbolUniverse,
        publisher: ISignalPublisher,
        universe_size: int = 100,
        recent_scans_buffer: int = 50,
    ) -> None:
        self._pool = worker_pool
        self._universe = universe
        self._publisher = publisher
        self._universe_size = universe_size
        self._recent_scans_buffer = recent_scans_buffer

        self._scans: "OrderedDict[str, ScanProgress]" = OrderedDict()
        self._tasks: Dict[str, asyncio.Task] = {}
        self._scans_started: int = 0
        self._signals_published: int = 0
        self._failures_logged: int = 0

    # ──────────────────────── Entrada ───────────────────────────────────

    def run_scan(self, request: ScanRequest) -> ScanTicket:
        """
        Acepta un escaneo y retorna de inmediato (fire-and-forget).
        Debe llamarse dentro de un event loop activo.
        """
        loop = asyncio.get_running_loop()
        scan_id = uuid.uuid4().hex[:12]
        accepted_at = _utcnow()

        progress = ScanProgress(scan_id=scan_id, target=request.target, started_at=accepted_at)
        self._remember(progress)
        self._scans_started += 1

        task = loop.create_task(self._execute(request, progress), name=f"scan-run-{scan_id}")
        self._tasks[scan_id] = task
        task.add_done_callback(lambda _t, sid=scan_id: self._tasks.pop(sid, None))

        logger.info("Escaneo %s aceptado (objetivo=%s)", scan_id, request.target)
        return ScanTicket(scan_id=scan_id, target=request.target, accepted_at=accepted_at)

    # ──────────────────────── Ejecución ─────────────────────────────────

    async def _execute(self, request: ScanRequest, progress: ScanProgress) -> None:
        progress.status = ScanStatus.RUNNING
        try:
            symbols = await self._resolve_symbols(request)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            progress.status = ScanStatus.FAILED
            progress.error = str(e)
            progress.finished_at = _utcnow()
            logger.error("Escaneo %s: no se pudo obtener el universo: %s", progress.scan_id, e)
            return

        progress.total = len(symbols)
        pending = [self._outcome_of(symbol, self._pool.submit(symbol)) for symbol in symbols]
        logger.info("Escaneo %s: %d símbolos enviados al pool", progress.scan_id, len(pending))

        for next_done in asyncio.as_completed(pending):
            outcome = await next_done
            await self._forward(outcome, progress)

        progress.status = ScanStatus.COMPLETED
        progress.finished_at = _utcnow()
        logger.info(
            "Escaneo %s terminado: %d señales, %d zonas, %d fallos",
            progress.scan_id, progress.signals, progress.zones, len(progress.failures),
        )

    async def _resolve_symbols(self, request: ScanRequest) -> List[str]:
        if not request.is_universe:
            return [request.target]
        raw = await self._universe.list_symbols(self._universe_size)
        # Orden estable, sin duplicados ni vacíos
        symbols = [s for s in dict.fromkeys(normalize_symbol(s) for s in raw) if s]
        return symbols[: self._universe_size]

    @staticmethod
    async def _outcome_of(symbol_id: str, task: asyncio.Task) -> ScanOutcome:
        """Resultado de un task del pool; una excepción se vuelve FetchFailure."""
        try:
            return await task
        except Exception as e:
            logger.error("Task de %s terminó con excepción: %s", symbol_id, e, exc_info=True)
            return FetchFailure(
                symbol_id=symbol_id,
                reason=f"error inesperado: {e}",
                transient=False,
            )

    async def _forward(self, outcome: ScanOutcome, progress: ScanProgress) -> None:
        progress.completed += 1

        if isinstance(outcome, FetchFailure):
            progress.failures.append(outcome)
            self._failures_logged += 1
            logger.warning(
                "Escaneo %s: %s falló tras %d intento(s) (%s)%s",
                progress.scan_id,
                outcome.symbol_id,
                outcome.attempts,
                outcome.reason,
                " [transitorio]" if outcome.transient else "",
            )
            return

        progress.signals += 1
        if outcome.is_zone:
            progress.zones += 1
            logger.info(
                "Escaneo %s: %s → %s @ %.4f",
                progress.scan_id,
                outcome.symbol_id,
                outcome.classification.value,
                outcome.reference_price,
            )

        try:
            await self._publisher.publish(outcome)
            self._signals_published += 1
        except Exception as e:
            logger.error(
                "Escaneo %s: error publicando señal de %s: %s",
                progress.scan_id, outcome.symbol_id, e, exc_info=True,
            )

    # ──────────────────────── Consultas ─────────────────────────────────

    def _remember(self, progress: ScanProgress) -> None:
        self._scans[progress.scan_id] = progress
        # Solo se descartan escaneos terminados, del más antiguo al más nuevo
        overflow = len(self._scans) - self._recent_scans_buffer
        if overflow <= 0:
            return
        finished = [sid for sid, p in self._scans.items() if p.is_finished]
        for scan_id in finished[:overflow]:
            del self._scans[scan_id]

    def get_scan(self, scan_id: str) -> Optional[ScanProgress]:
        return self._scans.get(scan_id)

    def recent_scans(self, count: int = 20) -> List[ScanProgress]:
        """Escaneos más recientes primero."""
        return list(reversed(self._scans.values()))[:count]

    async def wait_for(self, scan_id: str, timeout: Optional[float] = None) -> Optional[ScanProgress]:
        """Espera a que un escaneo termine (tests / herramientas internas)."""
        task = self._tasks.get(scan_id)
        if task is not None:
            await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        return self._scans.get(scan_id)

    # ──────────────────────── Lifecycle ──────────────────────────────────

    async def shutdown(self) -> None:
        """Cancelar escaneos en curso (shutdown del servidor)."""
        pending = [t for t in self._tasks.values() if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("ScanOrchestrator detenido (%d escaneos cancelados)", len(pending))

    @property
    def active_scans(self) -> int:
        return sum(1 for t in self._tasks.values() if not t.done())

    @property
    def stats(self) -> dict:
        return {
            "scans_started": self._scans_started,
            "active_scans": self.active_scans,
            "signals_published": self._signals_published,
            "failures_logged": self._failures_logged,
        }
