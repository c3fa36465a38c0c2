"""
SMC Scanner – Infrastructure Layer
====================================
Implementaciones concretas de interfaces.

Este módulo contiene:
- external/: APIs externas (Binance, CoinGecko)

REGLA DE DEPENDENCIA:
Esta capa implementa interfaces definidas en application/ports/.

Puede importar de:
- domain/ (entidades, excepciones)
- application/ (ports)
- shared/ (config, logging)
"""
