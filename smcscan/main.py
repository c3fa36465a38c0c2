"""
SMC Scanner – Main Application Entry Point
============================================
Orquesta todos los componentes: Universe + Market Data + Worker Pool +
Order Block Detector + Scan Orchestrator + Broadcast Hub.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. create_app(): crear el Container (DI) y dejarlo en app.state
  3. FastAPI lifespan startup: log de configuración
  4. FastAPI lifespan shutdown: cancelar escaneos, cerrar suscriptores
     y el cliente HTTP (en orden inverso)

FLUJO DE DATOS:
  POST /scan/* → ScanOrchestrator.run_scan() → 202 inmediato
       → ScanWorkerPool (≤ N fetches simultáneos)
       → Binance klines + ticker 24h → OrderBlockDetector → Signal
       → BroadcastHub.publish() → [suscriptores WS]

  uvicorn smcscan.main:app --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smcscan.container import Container, create_container
from smcscan.presentation.api.routes import router
from smcscan.shared.config.settings import Settings, settings as default_settings
from smcscan.shared.logging.logger import setup_logging, get_logger

logger = get_logger("main")


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """
    Fábrica de la aplicación.
    Los tests pasan su propio Container con colaboradores falsos.
    """
    settings = settings or (container.settings if container else default_settings)
    container = container or create_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle de la aplicación."""
        logger.info("=" * 60)
        logger.info("  SMC Scanner - Order Block Signals")
        logger.info("  Universo: top %d (excluye %s)",
                    settings.universe_size, ", ".join(settings.universe_exclude))
        logger.info("  Velas: %s x %d por símbolo (cotización %s)",
                    settings.kline_interval, settings.kline_limit, settings.quote_asset)
        logger.info("  Pool: %d fetches simultáneos, timeout %.1fs, %d reintento(s)",
                    settings.scan_max_concurrency,
                    settings.scan_fetch_timeout_seconds,
                    settings.scan_retry_attempts)
        logger.info("  Detector: cuerpo > %.2f%%, volumen > %.1fx promedio",
                    settings.detector_strong_body_ratio * 100,
                    settings.detector_volume_multiplier)
        logger.info("=" * 60)

        yield  # ← La app está corriendo aquí

        # ── SHUTDOWN ──
        logger.info("Iniciando shutdown...")
        await app.state.container.aclose()
        logger.info("✓ Shutdown completo")

    app = FastAPI(
        title="SMC Scanner",
        description="Escáner de order blocks con difusión de señales en tiempo real",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


def run() -> None:
    """Entry point de consola: levanta uvicorn con host/puerto de Settings."""
    import uvicorn

    setup_logging(default_settings.log_level)
    uvicorn.run(
        "smcscan.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )


# ─── Logging + App ──────────────────────────────────────────────────────
setup_logging(default_settings.log_level)
app = create_app()
