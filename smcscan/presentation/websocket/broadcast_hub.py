"""
SMC Scanner – Broadcast Hub (fan-out de señales a clientes WebSocket)
======================================================================
Registro de suscriptores en vivo y difusión de cada Signal a todos ellos.

ARQUITECTURA:
  ScanOrchestrator ──(Signal)──▸ BroadcastHub.publish()
       │
       ▼
  [Suscriptor WS 1, Suscriptor WS 2, ...]

CICLO DE VIDA DE UN SUSCRIPTOR:
  CONNECTING ──accept()──▸ OPEN ──desconexión / envío fallido──▸ CLOSED
  Un suscriptor CLOSED se elimina para siempre (no se reutiliza el handle).

CONCURRENCIA:
- El set de suscriptores es el único estado mutable compartido.
  Altas, bajas y la foto usada por publish() pasan por un asyncio.Lock.
- publish() itera sobre una COPIA → una desconexión durante el
  broadcast no corrompe la iteración.
- Cada envío usa asyncio.wait_for con timeout y corre en paralelo
  (asyncio.gather) → un cliente lento no congela a los demás.
- Un envío fallido da de baja a ese suscriptor, cierra su socket y
  NUNCA se propaga al publicador.
"""

from __future__ import annotations

import asyncio
import itertools
import json
from enum import Enum
from typing import Any, Optional, Set

from fastapi import WebSocket

from smcscan.application.ports.signal_publisher import ISignalPublisher
from smcscan.domain.entities.signal import Signal
from smcscan.shared.logging.logger import get_logger

logger = get_logger("broadcast_hub")

CONNECTION_EVENT = "connection"
NEW_SIGNAL_EVENT = "new_signal"

_subscriber_ids = itertools.count(1)


class SubscriberState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Subscriber:
    """Canal saliente hacia un cliente conectado."""

    def __init__(self, websocket: WebSocket | Any) -> None:
        self.id: int = next(_subscriber_ids)
        self.websocket = websocket
        self.state = SubscriberState.CONNECTING

    @property
    def is_open(self) -> bool:
        return self.state is SubscriberState.OPEN

    async def send_text(self, payload: str) -> None:
        await self.websocket.send_text(payload)

    def __repr__(self) -> str:
        return f"Subscriber(id={self.id}, state={self.state.value})"


def encode_event(event_type: str, **fields: Any) -> str:
    """Serializa un evento del canal en tiempo real."""
    return json.dumps({"type": event_type, **fields})


class BroadcastHub(ISignalPublisher):
    """Gestiona suscriptores WebSocket y el broadcast de señales."""

    def __init__(
        self,
        send_timeout: float = 5.0,
        greeting: str = "Successfully connected to SMC Bot WebSocket",
    ) -> None:
        self._send_timeout = send_timeout
        self._greeting = greeting
        self._subscribers: Set[Subscriber] = set()
        self._lock = asyncio.Lock()

        self._published: int = 0
        self._delivered: int = 0
        self._dropped: int = 0

    # ──────────────────────── Conexiones ────────────────────────────────

    async def connect(self, websocket: WebSocket) -> Subscriber:
        """Aceptar un WebSocket, registrarlo y enviar el evento de bienvenida."""
        subscriber = Subscriber(websocket)
        await websocket.accept()
        await self.register(subscriber)

        greeting = encode_event(CONNECTION_EVENT, message=self._greeting)
        if not await self._safe_send(subscriber, greeting):
            await self.unregister(subscriber)
            await self._close_transport(subscriber)
        return subscriber

    async def register(self, subscriber: Subscriber) -> None:
        """Alta de un suscriptor ya aceptado por el transporte."""
        if subscriber.state is SubscriberState.CLOSED:
            logger.warning("Intento de registrar %r ya cerrado, ignorando", subscriber)
            return
        async with self._lock:
            subscriber.state = SubscriberState.OPEN
            self._subscribers.add(subscriber)
            total = len(self._subscribers)
        logger.info("Suscriptor %d conectado. Total: %d", subscriber.id, total)

    async def unregister(self, subscriber: Subscriber) -> None:
        """Baja idempotente: explícita, por desconexión o por envío fallido."""
        async with self._lock:
            was_registered = subscriber in self._subscribers
            self._subscribers.discard(subscriber)
            subscriber.state = SubscriberState.CLOSED
            total = len(self._subscribers)
        if was_registered:
            logger.info("Suscriptor %d desconectado. Total: %d", subscriber.id, total)

    # ──────────────────────── Broadcast ─────────────────────────────────

    async def publish(self, signal: Signal) -> int:
        """
        Difundir una señal a todos los suscriptores OPEN.
        Retorna cuántos la recibieron. Nunca lanza por fallos de entrega.
        """
        payload = encode_event(NEW_SIGNAL_EVENT, payload=signal.to_dict())
        self._published += 1

        async with self._lock:
            targets = [s for s in self._subscribers if s.is_open]

        if not targets:
            return 0

        results = await asyncio.gather(
            *(self._safe_send(s, payload) for s in targets)
        )

        delivered = 0
        for subscriber, ok in zip(targets, results):
            if ok:
                delivered += 1
            elif ok is False:
                self._dropped += 1
                await self.unregister(subscriber)
                await self._close_transport(subscriber)
            # None: dado de baja por otra vía durante el broadcast

        self._delivered += delivered
        return delivered

    async def _safe_send(self, subscriber: Subscriber, payload: str) -> Optional[bool]:
        """
        Enviar payload a un suscriptor con timeout.
        No lanza excepciones → no rompe el gather de broadcast.
        Retorna None si el suscriptor ya no estaba OPEN (no es un fallo de envío).
        """
        if not subscriber.is_open:
            return None
        try:
            await asyncio.wait_for(subscriber.send_text(payload), timeout=self._send_timeout)
            return True
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            logger.warning("Suscriptor %d no respondió en %.1fs", subscriber.id, self._send_timeout)
            return False
        except Exception as e:
            logger.info("Envío fallido a suscriptor %d: %s", subscriber.id, e)
            return False

    # ──────────────────────── Lifecycle ──────────────────────────────────

    async def close_all(self) -> None:
        """Cerrar todas las conexiones (shutdown)."""
        async with self._lock:
            subscribers = list(self._subscribers)
            self._subscribers.clear()
        for subscriber in subscribers:
            subscriber.state = SubscriberState.CLOSED
            await self._close_transport(subscriber)
        logger.info("BroadcastHub detenido (%d suscriptores cerrados)", len(subscribers))

    @staticmethod
    async def _close_transport(subscriber: Subscriber) -> None:
        """Cerrar el socket para que el cliente vea la desconexión y reconecte."""
        try:
            await subscriber.websocket.close()
        except Exception as e:
            logger.debug("Error cerrando suscriptor %d: %s", subscriber.id, e)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def stats(self) -> dict:
        return {
            "subscribers": self.subscriber_count,
            "published": self._published,
            "delivered": self._delivered,
            "dropped": self._dropped,
        }
