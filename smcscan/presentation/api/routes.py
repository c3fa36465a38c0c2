"""
SMC Scanner – API Routes (FastAPI)
===================================
Endpoints REST y WebSocket para dashboards y bots.

Endpoints disponibles:
  WS   /  y  /ws            → canal de señales en tiempo real
  POST /scan/all            → escanear el universo completo (202)
  POST /scan/symbol         → escanear un símbolo {"symbol": "btc"} (202)
  GET  /api/health          → health check
  GET  /api/status          → estado de hub, pool y orquestador
  GET  /api/scans           → escaneos recientes
  GET  /api/scans/{scan_id} → progreso de un escaneo

Los handlers de escaneo solo ENCOLAN: responden con el acuse y el
trabajo sigue fuera del request.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from smcscan.container import Container
from smcscan.domain.exceptions.domain_errors import InvalidRequestError
from smcscan.domain.value_objects.scan_request import ScanRequest
from smcscan.presentation.api.schemas import (
    ErrorResponse,
    HealthResponse,
    ScanAcceptedResponse,
    ScanSymbolRequest,
)
from smcscan.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()


def get_container(request: Request) -> Container:
    """El container vive en app.state; lo instala create_app()."""
    return request.app.state.container


# ─── WebSocket endpoint para suscriptores ─────────────────────────────

async def signal_stream(websocket: WebSocket) -> None:
    """
    WebSocket de señales.
    El broadcast lo maneja BroadcastHub - este handler solo gestiona
    el ciclo de vida de la conexión.
    """
    container: Optional[Container] = getattr(websocket.app.state, "container", None)
    if container is None:
        await websocket.close(code=1011, reason="Server not ready")
        return

    hub = container.broadcast_hub
    subscriber = await hub.connect(websocket)
    try:
        # El hub cierra el socket si un envío falla; ahí termina el loop
        while subscriber.is_open:
            try:
                data = await websocket.receive_text()
                logger.debug("Mensaje de suscriptor %d: %s", subscriber.id, data[:100])
            except WebSocketDisconnect:
                break
    finally:
        await hub.unregister(subscriber)


# El path raíz se mantiene para los clientes que se conectan a ws://host:port
router.add_api_websocket_route("/", signal_stream, name="signal_stream_root")
router.add_api_websocket_route("/ws", signal_stream, name="signal_stream")


# ─── Escaneos ─────────────────────────────────────────────────────────

@router.post("/scan/all", status_code=202, response_model=ScanAcceptedResponse)
async def scan_all(container: Container = Depends(get_container)) -> dict:
    """Inicia un escaneo del universo completo."""
    logger.info("Petición de escaneo del universo (top %d)", container.settings.universe_size)
    ticket = container.scan_orchestrator.run_scan(ScanRequest.universe())
    return {
        "message": "Full scan initiated. Signals will be broadcasted via WebSocket.",
        "scanId": ticket.scan_id,
        "target": ticket.target,
    }


@router.post(
    "/scan/symbol",
    status_code=202,
    response_model=ScanAcceptedResponse,
    responses={400: {"model": ErrorResponse}},
)
async def scan_symbol(
    body: Optional[ScanSymbolRequest] = None,
    container: Container = Depends(get_container),
):
    """Inicia el escaneo de un símbolo (normalizado a mayúsculas)."""
    try:
        request = ScanRequest.for_symbol(body.symbol if body else None)
    except InvalidRequestError as e:
        logger.info("Petición de escaneo rechazada: %s", e.message)
        return JSONResponse(status_code=400, content={"error": e.message})

    logger.info("Petición de escaneo del símbolo %s", request.target)
    ticket = container.scan_orchestrator.run_scan(request)
    return {
        "message": f"Scan initiated for {ticket.target}. Signals will be broadcasted.",
        "scanId": ticket.scan_id,
        "target": ticket.target,
    }


@router.get("/api/scans")
async def recent_scans(
    count: int = Query(default=20, ge=1, le=100, description="Número de escaneos"),
    container: Container = Depends(get_container),
) -> dict:
    """Escaneos recientes, más nuevos primero."""
    scans = container.scan_orchestrator.recent_scans(count)
    return {"count": len(scans), "scans": [s.to_dict() for s in scans]}


@router.get("/api/scans/{scan_id}", responses={404: {"model": ErrorResponse}})
async def get_scan(scan_id: str, container: Container = Depends(get_container)):
    """Progreso de un escaneo concreto."""
    progress = container.scan_orchestrator.get_scan(scan_id)
    if progress is None:
        return JSONResponse(status_code=404, content={"error": f"Scan '{scan_id}' not found"})
    return progress.to_dict()


# ─── REST endpoints de estado ──────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {"status": "ok", "service": "smcscan"}


@router.get("/api/status")
async def system_status(container: Container = Depends(get_container)) -> dict:
    """Estado completo del sistema."""
    return {
        "broadcast_hub": container.broadcast_hub.stats,
        "worker_pool": container.scan_worker_pool.stats,
        "orchestrator": container.scan_orchestrator.stats,
    }
