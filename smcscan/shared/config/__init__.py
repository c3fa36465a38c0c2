"""Configuración centralizada."""
from smcscan.shared.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
