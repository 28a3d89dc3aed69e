"""
Concept mapping for omie-ingest.

Maps the free-text labels found in OMIE documents to canonical field
identifiers, together with the multiplier that brings the value to the
library's base unit (EUR/MWh for prices, MWh for energy).

Labeled-row documents (marginal prices):
  The lookup is keyed by the **exact** label text, unit annotation
  included. Older files quote prices in Cent/kWh; newer ones in EUR/MWh.
  Because the suffix is part of the key, unit conversion happens as a side
  effect of the lookup:

    "Precio marginal (Cent/kWh)"  -> PRICE_SP, x10
    "Precio marginal (EUR/MWh)"   -> PRICE_SP, x1

Tabular-row documents (energy by technology):
  Column headers are matched against a fixed vocabulary of technology
  names, case-insensitively and by substring, because headers have picked
  up extra words and spacing over the years.

Both tables are read-only module constants, safe to share across threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from omie_ingest.types import Concept, SystemType, Technology

__all__ = [
    "ConceptMapping",
    "LABEL_CONCEPTS",
    "TECHNOLOGY_NAMES",
    "map_label",
    "match_category",
    "detect_system",
]

# Cent/kWh -> EUR/MWh
_CENT_PER_KWH = 10.0
_BASE = 1.0


@dataclass(frozen=True)
class ConceptMapping:
    """One entry of the label table."""
    label: str
    field: Concept
    multiplier: float


def _build_label_table(
    entries: list[tuple[str, Concept, float]],
) -> Mapping[str, ConceptMapping]:
    return MappingProxyType({
        label: ConceptMapping(label=label, field=field, multiplier=multiplier)
        for label, field, multiplier in entries
    })


LABEL_CONCEPTS: Mapping[str, ConceptMapping] = _build_label_table([
    # Cent/kWh era
    ("Precio marginal (Cent/kWh)", Concept.PRICE_SPAIN, _CENT_PER_KWH),
    ("Precio marginal en el sistema español (Cent/kWh)", Concept.PRICE_SPAIN, _CENT_PER_KWH),
    ("Precio marginal en el sistema portugués (Cent/kWh)", Concept.PRICE_PORTUGAL, _CENT_PER_KWH),
    # EUR/MWh era
    ("Precio marginal (EUR/MWh)", Concept.PRICE_SPAIN, _BASE),
    ("Precio marginal en el sistema español (EUR/MWh)", Concept.PRICE_SPAIN, _BASE),
    ("Precio marginal en el sistema portugués (EUR/MWh)", Concept.PRICE_PORTUGAL, _BASE),
    ("Precio de ajuste en el sistema español (EUR/MWh)", Concept.PRICE_SPAIN, _BASE),
    ("Precio de ajuste en el sistema portugués (EUR/MWh)", Concept.PRICE_PORTUGAL, _BASE),
    # Energy
    ("Demanda+bombeos (MWh)", Concept.ENERGY_IBERIAN, _BASE),
    ("Energía en el programa resultante de la casación (MWh)", Concept.ENERGY_IBERIAN, _BASE),
    ("Energía total del mercado Ibérico (MWh)", Concept.ENERGY_IBERIAN, _BASE),
    ("Energía total con bilaterales del mercado Ibérico (MWh)", Concept.ENERGY_IBERIAN_WITH_BILATERAL, _BASE),
    ("Energía total de compra sistema español (MWh)", Concept.ENERGY_BUY_SPAIN, _BASE),
    ("Energía total de venta sistema español (MWh)", Concept.ENERGY_SELL_SPAIN, _BASE),
    (
        "Energía horaria sujeta al mecanismo de ajuste a los consumidores MIBEL (MWh)",
        Concept.ENERGY_IBERIAN,
        _BASE,
    ),
])

TECHNOLOGY_NAMES: Mapping[str, Technology] = MappingProxyType({
    "CARBÓN": Technology.COAL,
    "FUEL-GAS": Technology.FUEL_GAS,
    "AUTOPRODUCTOR": Technology.SELF_PRODUCER,
    "NUCLEAR": Technology.NUCLEAR,
    "HIDRÁULICA": Technology.HYDRO,
    "CICLO COMBINADO": Technology.COMBINED_CYCLE,
    "EÓLICA": Technology.WIND,
    "SOLAR TÉRMICA": Technology.THERMAL_SOLAR,
    "SOLAR FOTOVOLTAICA": Technology.PHOTOVOLTAIC_SOLAR,
    "COGENERACIÓN/RESIDUOS/MINI HIDRA": Technology.RESIDUALS,
    "IMPORTACIÓN INTER.": Technology.IMPORT,
    "IMPORTACIÓN INTER. SIN MIBEL": Technology.IMPORT_WITHOUT_MIBEL,
})

# Longest first, so "IMPORTACIÓN INTER. SIN MIBEL" is tried before "IMPORTACIÓN INTER."
_NAMES_BY_LENGTH = tuple(sorted(TECHNOLOGY_NAMES, key=len, reverse=True))

_SYSTEM_KEYWORDS: tuple[tuple[str, SystemType], ...] = (
    ("español", SystemType.SPAIN),
    ("portugués", SystemType.PORTUGAL),
)


def map_label(label: str) -> ConceptMapping | None:
    """Look up a row label in the concept table.

    Only surrounding whitespace is ignored; the rest of the label,
    including case and the unit suffix, must match exactly.

    Returns:
        The mapping, or ``None`` for descriptive rows that carry no
        known series (this is not an error).
    """
    return LABEL_CONCEPTS.get(label.strip())


def match_category(header: str) -> Technology | None:
    """Match a column header against the technology vocabulary.

    An exact case-insensitive match wins. Otherwise the longest vocabulary
    name contained in the header is used.

    Returns:
        The technology, or ``None`` if the column is not a technology column.
    """
    text = header.strip().upper()
    if not text:
        return None
    exact = TECHNOLOGY_NAMES.get(text)
    if exact is not None:
        return exact
    for name in _NAMES_BY_LENGTH:
        if name in text:
            return TECHNOLOGY_NAMES[name]
    return None


def detect_system(text: str) -> SystemType:
    """Infer the market scope from a header line (defaults to IBERIAN)."""
    lowered = text.lower()
    for keyword, system in _SYSTEM_KEYWORDS:
        if keyword in lowered:
            return system
    return SystemType.IBERIAN
