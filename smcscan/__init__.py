"""SMC Scanner – escáner de order blocks con difusión de señales en tiempo real."""

__version__ = "1.0.0"
