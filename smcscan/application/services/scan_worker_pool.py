"""
SMC Scanner – Application Service: Scan Worker Pool
=====================================================
Ejecutor de concurrencia acotada: por cada símbolo obtiene velas +
snapshot del proveedor de mercado y corre el detector.

CONCURRENCIA:
- Un asyncio.Semaphore limita los fetches en vuelo (rate limits externos).
- Cada símbolo corre en su propio task → un símbolo lento o fallido
  no frena ni contamina a los demás.
- El detector es síncrono y puro; corre fuera del semáforo, una vez que
  ambos fetches terminaron.

POLÍTICA DE FALLOS:
- Cada fetch tiene timeout (asyncio.wait_for) → timeout = fallo transitorio.
- Transitorio (timeout, rate limit, red) → reintento tras backoff.
- Permanente (símbolo desconocido, datos corruptos) → sin reintento.
- Ningún fallo se propaga: se devuelve FetchFailure (también si el
  detector lanza).
"""

from __future__ import annotations

import asyncio
from typing import Set

from smcscan.application.ports.market_data_provider import IMarketDataProvider
from smcscan.domain.exceptions.domain_errors import MarketDataError, ValidationError
from smcscan.domain.services.order_block_detector import OrderBlockDetector
from smcscan.domain.value_objects.fetch_failure import FetchFailure, ScanOutcome
from smcscan.shared.logging.logger import get_logger

logger = get_logger("scan_worker_pool")


class ScanWorkerPool:
    """Pool de workers asyncio para fetch + detección por símbolo."""

    def __init__(
        self,
        market_data: IMarketDataProvider,
        detector: OrderBlockDetector,
        max_concurrency: int = 5,
        fetch_timeout: float = 10.0,
        retry_attempts: int = 1,
        retry_backoff: float = 1.0,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency debe ser >= 1")
        self._market_data = market_data
        self._detector = detector
        self._max_concurrency = max_concurrency
        self._fetch_timeout = fetch_timeout
        self._retry_attempts = max(0, retry_attempts)
        self._retry_backoff = retry_backoff
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: Set[asyncio.Task] = set()

        # Estadísticas de monitoreo
        self._submitted: int = 0
        self._succeeded: int = 0
        self._failed: int = 0
        self._retried: int = 0
        self._in_flight: int = 0

    # ──────────────────────── Submission ────────────────────────────────

    def submit(self, symbol_id: str) -> asyncio.Task:
        """
        Encola un símbolo. Retorna de inmediato con el task que
        eventualmente resuelve a Signal | FetchFailure.
        """
        task = asyncio.get_running_loop().create_task(
            self.run(symbol_id), name=f"scan-{symbol_id}"
        )
        self._submitted += 1
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, symbol_id: str) -> ScanOutcome:
        """Fetch (con reintento) + detección de un símbolo. Nunca lanza por fallos del símbolo."""
        attempts = 0
        while True:
            attempts += 1
            try:
                async with self._semaphore:
                    self._in_flight += 1
                    try:
                        series = await self._bounded(self._market_data.fetch_series(symbol_id))
                        snapshot = await self._bounded(self._market_data.fetch_snapshot(symbol_id))
                    finally:
                        self._in_flight -= 1
            except asyncio.TimeoutError:
                reason = f"timeout tras {self._fetch_timeout:.1f}s"
                transient = True
            except MarketDataError as e:
                reason = e.message
                transient = e.transient
            except ValidationError as e:
                reason = e.message
                transient = False
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Error inesperado escaneando %s: %s", symbol_id, e, exc_info=True)
                reason = f"error inesperado: {e}"
                transient = False
            else:
                try:
                    signal = self._detector.detect(series, snapshot)
                except Exception as e:
                    logger.error("Error del detector en %s: %s", symbol_id, e, exc_info=True)
                    self._failed += 1
                    return FetchFailure(
                        symbol_id=symbol_id,
                        reason=f"error del detector: {e}",
                        transient=False,
                        attempts=attempts,
                    )
                self._succeeded += 1
                return signal

            if transient and attempts <= self._retry_attempts:
                self._retried += 1
                logger.info(
                    "Fallo transitorio en %s (%s) – reintento #%d en %.1fs",
                    symbol_id, reason, attempts, self._retry_backoff,
                )
                await asyncio.sleep(self._retry_backoff)
                continue

            self._failed += 1
            return FetchFailure(
                symbol_id=symbol_id,
                reason=reason,
                transient=transient,
                attempts=attempts,
            )

    async def _bounded(self, awaitable):
        return await asyncio.wait_for(awaitable, timeout=self._fetch_timeout)

    # ──────────────────────── Lifecycle ──────────────────────────────────

    async def shutdown(self) -> None:
        """Cancelar todos los tasks en vuelo (shutdown del servidor)."""
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("ScanWorkerPool detenido (%d tasks cancelados)", len(pending))

    # ──────────────────────── Stats ─────────────────────────────────────

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._tasks if not t.done())

    @property
    def stats(self) -> dict:
        """Estadísticas del pool para monitoreo."""
        return {
            "max_concurrency": self._max_concurrency,
            "submitted": self._submitted,
            "succeeded": self._succeeded,
            "failed": self._failed,
            "retried": self._retried,
            "in_flight": self._in_flight,
            "pending": self.pending_count,
        }
