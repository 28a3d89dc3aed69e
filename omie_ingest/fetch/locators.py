"""
Locator (URL) templates for OMIE daily files.

OMIE files live under ``AGNO_<year>/MES_<month>/TXT/`` and repeat the
date twice in the file name (start and end of the covered range, which
are equal for daily files).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from omie_ingest.config import DEFAULT_BASE_URL
from omie_ingest.types import Dataset, SystemType

_DAY = "{d:%d}_{d:%m}_{d:%Y}"
_MARGINAL_PRICE_PATH = "AGNO_{d:%Y}/MES_{d:%m}/TXT/INT_PBC_EV_H_1_" + _DAY + "_" + _DAY + ".TXT"
_TECHNOLOGY_PATH = (
    "AGNO_{d:%Y}/MES_{d:%m}/TXT/INT_PBC_TECNOLOGIAS_H_{system}_" + _DAY + "_" + _DAY + ".TXT"
)


@dataclass(frozen=True)
class LocatorTemplate:
    """Builds the URL of one dataset's daily file.

    Instances are callables so they can be passed straight to the
    orchestrator as its ``locate`` argument.
    """
    path: str
    base_url: str = DEFAULT_BASE_URL
    system: SystemType = SystemType.IBERIAN

    def __call__(self, day: date) -> str:
        return self.base_url.rstrip("/") + "/" + self.path.format(d=day, system=self.system.value)


def locator_for(
    dataset: Dataset,
    base_url: str = DEFAULT_BASE_URL,
    system: SystemType = SystemType.IBERIAN,
) -> LocatorTemplate:
    """Return the locator template for a dataset."""
    if dataset is Dataset.MARGINAL_PRICE:
        return LocatorTemplate(_MARGINAL_PRICE_PATH, base_url=base_url)
    if dataset is Dataset.ENERGY_BY_TECHNOLOGY:
        return LocatorTemplate(_TECHNOLOGY_PATH, base_url=base_url, system=system)
    raise ValueError(f"Unsupported dataset: {dataset!r}")
