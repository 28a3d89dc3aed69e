"""
Parsers sub-package for omie-ingest.

Contains document parsers that convert decoded OMIE text files into
canonical (date, hour, field, value) records.

Design: Strategy Pattern
- base.py defines the BaseParser ABC, CanonicalRecord and the ParseResult
  variants.
- marginal_price.py implements MarginalPriceParser for labeled-row
  documents (one series per line, hours across columns).
- energy_by_technology.py implements EnergyByTechnologyParser for
  tabular-row documents (one hour per line, technologies across columns).

The detector (detect.py) selects the appropriate parser at runtime when
the document family is not known in advance.
"""

from omie_ingest.parsers.base import (
    BaseParser,
    CanonicalRecord,
    MarginalPriceDay,
    ParseResult,
    TechnologyEnergyDay,
)
from omie_ingest.parsers.energy_by_technology import EnergyByTechnologyParser
from omie_ingest.parsers.marginal_price import MarginalPriceParser

__all__ = [
    "BaseParser",
    "CanonicalRecord",
    "EnergyByTechnologyParser",
    "MarginalPriceDay",
    "MarginalPriceParser",
    "ParseResult",
    "TechnologyEnergyDay",
]
