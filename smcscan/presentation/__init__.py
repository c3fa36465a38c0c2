"""
SMC Scanner – Presentation Layer
=================================
API HTTP y WebSocket.

Este módulo contiene:
- api/: FastAPI routes y schemas
- websocket/: BroadcastHub (suscriptores + fan-out)

REGLA DE DEPENDENCIA:
Esta capa SOLO llama a use cases de application/.
"""
