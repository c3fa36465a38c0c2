"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias
que gestiona todas las instancias de servicios, adapters y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas. Su instancia pertenece a la
app FastAPI (app.state.container) y vive lo mismo que el servidor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import httpx

from smcscan.application.ports.market_data_provider import IMarketDataProvider, ISymbolUniverse
from smcscan.application.services.scan_worker_pool import ScanWorkerPool
from smcscan.application.use_cases.scan_orchestrator import ScanOrchestrator
from smcscan.domain.services.order_block_detector import DetectorConfig, OrderBlockDetector
from smcscan.presentation.websocket.broadcast_hub import BroadcastHub
from smcscan.shared.config.settings import Settings
from smcscan.shared.logging.logger import get_logger

logger = get_logger("container")


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Gestiona el ciclo de vida de todas las dependencias de la aplicación.
    Los colaboradores externos (market data, universo) se pueden
    reemplazar con override() antes del primer uso, p.ej. por fakes en tests.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Infraestructura
    _http_client: Optional[httpx.AsyncClient] = None
    _market_data_provider: Optional[IMarketDataProvider] = None
    _symbol_universe: Optional[ISymbolUniverse] = None

    # Domain Services
    _order_block_detector: Optional[OrderBlockDetector] = None

    # Application / Presentation
    _scan_worker_pool: Optional[ScanWorkerPool] = None
    _broadcast_hub: Optional[BroadcastHub] = None
    _scan_orchestrator: Optional[ScanOrchestrator] = None

    # ==================== Infrastructure ====================

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Cliente HTTP compartido por los adapters de mercado."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.settings.http_timeout_seconds,
                headers={"Accept": "application/json"},
            )
        return self._http_client

    @property
    def symbol_universe(self) -> ISymbolUniverse:
        """Obtiene el proveedor del universo de símbolos."""
        if self._symbol_universe is None:
            from smcscan.infrastructure.external.coingecko_universe import CoinGeckoUniverse
            self._symbol_universe = CoinGeckoUniverse(self.settings, self.http_client)
        return self._symbol_universe

    @property
    def market_data_provider(self) -> IMarketDataProvider:
        """Obtiene el proveedor de datos de mercado."""
        if self._market_data_provider is None:
            from smcscan.infrastructure.external.binance_adapter import BinanceMarketDataAdapter
            display_names = getattr(self.symbol_universe, "display_names", None)
            self._market_data_provider = BinanceMarketDataAdapter(
                self.settings, self.http_client, display_names=display_names
            )
        return self._market_data_provider

    # ==================== Domain Services ====================

    @property
    def order_block_detector(self) -> OrderBlockDetector:
        """Obtiene o crea el detector (singleton, sin estado)."""
        if self._order_block_detector is None:
            self._order_block_detector = OrderBlockDetector(
                DetectorConfig(
                    strong_body_ratio=self.settings.detector_strong_body_ratio,
                    volume_multiplier=self.settings.detector_volume_multiplier,
                    interval_label=self.settings.kline_interval,
                )
            )
        return self._order_block_detector

    # ==================== Application ====================

    @property
    def scan_worker_pool(self) -> ScanWorkerPool:
        if self._scan_worker_pool is None:
            self._scan_worker_pool = ScanWorkerPool(
                market_data=self.market_data_provider,
                detector=self.order_block_detector,
                max_concurrency=self.settings.scan_max_concurrency,
                fetch_timeout=self.settings.scan_fetch_timeout_seconds,
                retry_attempts=self.settings.scan_retry_attempts,
                retry_backoff=self.settings.scan_retry_backoff_seconds,
            )
        return self._scan_worker_pool

    @property
    def broadcast_hub(self) -> BroadcastHub:
        if self._broadcast_hub is None:
            self._broadcast_hub = BroadcastHub(
                send_timeout=self.settings.ws_send_timeout_seconds,
                greeting=self.settings.ws_greeting,
            )
        return self._broadcast_hub

    @property
    def scan_orchestrator(self) -> ScanOrchestrator:
        if self._scan_orchestrator is None:
            self._scan_orchestrator = ScanOrchestrator(
                worker_pool=self.scan_worker_pool,
                universe=self.symbol_universe,
                publisher=self.broadcast_hub,
                universe_size=self.settings.universe_size,
                recent_scans_buffer=self.settings.recent_scans_buffer,
            )
        return self._scan_orchestrator

    # ==================== Lifecycle ====================

    async def aclose(self) -> None:
        """Detener todo en orden inverso al arranque."""
        if self._scan_orchestrator is not None:
            await self._scan_orchestrator.shutdown()
        if self._scan_worker_pool is not None:
            await self._scan_worker_pool.shutdown()
        if self._broadcast_hub is not None:
            await self._broadcast_hub.close_all()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        logger.info("Container cerrado")

    def override(self, name: str, instance) -> None:
        """
        Override una dependencia (útil para tests con fakes).

        Args:
            name: Nombre de la dependencia (ej: 'market_data_provider')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


def create_container(settings: Optional[Settings] = None, **overrides) -> Container:
    """
    Crea un contenedor con configuración y overrides opcionales.

    Ejemplo:
        container = create_container(
            market_data_provider=FakeMarketData(),
            symbol_universe=FakeUniverse(["BTC", "ETH"]),
        )
    """
    container = Container(settings=settings or Settings())
    for name, instance in overrides.items():
        container.override(name, instance)
    return container
