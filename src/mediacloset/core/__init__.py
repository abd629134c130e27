"""Core lookup logic.

Classes:
    BarcodeCandidate: Scanned barcode plus its cleaned form.
    RateGovernor: Per-provider token buckets.
    Settings: Environment-based configuration.

The resolver lives in mediacloset.core.resolver and is imported from there.
"""

from mediacloset.core.barcode import BarcodeCandidate, clean_barcode
from mediacloset.core.rate_limit import RateGovernor
from mediacloset.core.config import Settings, load_settings

__all__ = ["BarcodeCandidate", "RateGovernor", "Settings", "clean_barcode", "load_settings"]
