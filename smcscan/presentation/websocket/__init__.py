"""WebSocket fan-out."""
from smcscan.presentation.websocket.broadcast_hub import BroadcastHub, Subscriber, SubscriberState

__all__ = ["BroadcastHub", "Subscriber", "SubscriberState"]
