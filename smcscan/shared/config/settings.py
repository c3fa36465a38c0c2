"""
SMC Scanner – Settings (Pydantic BaseSettings)
===============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.

Los únicos parámetros que el núcleo exige del entorno son el puerto de
escucha y el límite de concurrencia del pool de escaneo; el resto son
detalles de los colaboradores externos (Binance, CoinGecko) y del hub.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, description="Puerto HTTP + WebSocket")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO", description="Nivel del root logger")
    cors_origins: List[str] = Field(
        default=["*"], description="Orígenes permitidos para el dashboard",
    )

    # ─── Scan Worker Pool ───────────────────────────────────────────────
    scan_max_concurrency: int = Field(
        default=5, ge=1,
        description="Máximo de fetches simultáneos contra el proveedor de mercado",
    )
    scan_fetch_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout por fetch (velas o snapshot)",
    )
    scan_retry_attempts: int = Field(
        default=1, ge=0, description="Reintentos ante fallos transitorios",
    )
    scan_retry_backoff_seconds: float = Field(
        default=1.0, ge=0, description="Espera antes de reintentar un fetch",
    )

    # ─── Universo de símbolos ───────────────────────────────────────────
    universe_size: int = Field(
        default=100, ge=1, description="Top-N por capitalización de mercado",
    )
    universe_exclude: List[str] = Field(
        default=["USDT", "USDC", "DAI", "FDUSD", "TUSD", "USDE", "BUSD"],
        description="Stablecoins sin par contra la moneda de cotización",
    )
    quote_asset: str = Field(default="USDT", description="Activo de cotización en Binance")
    vs_currency: str = Field(default="usd", description="Moneda de referencia en CoinGecko")

    # ─── Market data (HTTP) ─────────────────────────────────────────────
    binance_base_url: str = Field(default="https://api.binance.com")
    coingecko_base_url: str = Field(default="https://api.coingecko.com/api/v3")
    kline_interval: str = Field(default="4h", description="Intervalo de vela analizado")
    kline_limit: int = Field(default=100, ge=3, le=1000, description="Velas por símbolo")
    http_timeout_seconds: float = Field(default=15.0, gt=0)

    # ─── Order Block Detector ───────────────────────────────────────────
    detector_strong_body_ratio: float = Field(
        default=0.01, description="Cuerpo mínimo como fracción del open",
    )
    detector_volume_multiplier: float = Field(
        default=1.5, description="Volumen mínimo como múltiplo del promedio",
    )

    # ─── Broadcast Hub ──────────────────────────────────────────────────
    ws_send_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Timeout por envío a un suscriptor",
    )
    ws_greeting: str = Field(
        default="Successfully connected to SMC Bot WebSocket",
        description="Mensaje del evento 'connection'",
    )

    # ─── Orchestrator ───────────────────────────────────────────────────
    recent_scans_buffer: int = Field(
        default=50, ge=1, description="Escaneos recientes retenidos en memoria",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
