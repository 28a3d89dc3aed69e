"""
Enumerations shared across omie-ingest.

Values double as the canonical field identifiers carried by
``CanonicalRecord.field`` and as column names in ``ParseResult.to_frame()``.
"""

from __future__ import annotations

from enum import Enum


class Concept(str, Enum):
    """Series found in the marginal price (labeled-row) documents."""

    PRICE_SPAIN = "PRICE_SP"
    PRICE_PORTUGAL = "PRICE_PT"
    ENERGY_IBERIAN = "ENER_IB"
    ENERGY_IBERIAN_WITH_BILATERAL = "ENER_IB_BILLAT"
    ENERGY_BUY_SPAIN = "ENER_BUY_SP"
    ENERGY_SELL_SPAIN = "ENER_SELL_SP"


class Technology(str, Enum):
    """Generation technologies found in the energy-by-technology documents."""

    COAL = "COAL"
    FUEL_GAS = "FUEL_GAS"
    SELF_PRODUCER = "SELF_PRODUCER"
    NUCLEAR = "NUCLEAR"
    HYDRO = "HYDRO"
    COMBINED_CYCLE = "COMBINED_CYCLE"
    WIND = "WIND"
    THERMAL_SOLAR = "THERMAL_SOLAR"
    PHOTOVOLTAIC_SOLAR = "PHOTOVOLTAIC_SOLAR"
    RESIDUALS = "RESIDUALS"
    IMPORT = "IMPORT"
    IMPORT_WITHOUT_MIBEL = "IMPORT_WITHOUT_MIBEL"


class SystemType(int, Enum):
    """Market scope of a document. Values are the codes used in file names."""

    SPAIN = 1
    PORTUGAL = 2
    IBERIAN = 9


class Dataset(str, Enum):
    """Document families the importer knows how to fetch and parse."""

    MARGINAL_PRICE = "marginal_price"
    ENERGY_BY_TECHNOLOGY = "energy_by_technology"


class FailureKind(str, Enum):
    """Why a date produced a FetchFailure instead of a document."""

    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    CANCELLED = "cancelled"
    # No locator could be built for the date; nothing was fetched
    INVALID_LOCATOR = "invalid_locator"
