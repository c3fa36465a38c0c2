"""Domain value objects."""
from smcscan.domain.value_objects.fetch_failure import FetchFailure, ScanOutcome
from smcscan.domain.value_objects.scan_request import ScanRequest, normalize_symbol
from smcscan.domain.value_objects.symbol_snapshot import SymbolSnapshot

__all__ = ["FetchFailure", "ScanOutcome", "ScanRequest", "normalize_symbol", "SymbolSnapshot"]
