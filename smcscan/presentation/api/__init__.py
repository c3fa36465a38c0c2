"""REST + WebSocket routes."""
