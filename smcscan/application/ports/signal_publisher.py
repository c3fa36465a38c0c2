"""
SMC Scanner – Application Port: Signal Publisher
==================================================
Interfaz para entregar señales a los suscriptores en vivo.

El orquestador publica; la presentación decide CÓMO entregarlas
(WebSocket hoy, cualquier otro canal mañana).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from smcscan.domain.entities.signal import Signal


class ISignalPublisher(ABC):
    """Interfaz para difundir señales."""

    @abstractmethod
    async def publish(self, signal: Signal) -> int:
        """
        Difunde una señal a todos los suscriptores abiertos.

        No lanza excepciones por fallos de entrega individuales.

        Returns:
            Número de suscriptores que recibieron la señal
        """
        pass
