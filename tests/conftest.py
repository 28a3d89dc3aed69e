"""
Shared test fixtures and sample documents for omie-ingest tests.

Sample documents are modelled on real OMIE files from each
publication era. They are defined here as module-level constants and
exposed as fixtures, so tests never depend on the network.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import date

import pytest

from omie_ingest.fetch.client import FetchResponse
from omie_ingest.transforms.text import DOCUMENT_ENCODING, split_lines

# ---------------------------------------------------------------------------
# Sample documents -- edit here if a new publication era needs coverage
# ---------------------------------------------------------------------------

# 2006: single Spanish price in Cent/kWh, energy with a single-dot separator
PRICES_2006 = "\n".join([
    "OMIE - Mercado de electricidad;Fecha Emisión :31/12/2005 - 12:00;;01/01/2006;"
    "Precio del mercado diario (Cent/kWh);;;;",
    ";1;2;3;4;5;6;7;8;9;10;11;12;13;14;15;16;17;18;19;20;21;22;23;24;;",
    "Precio marginal (Cent/kWh);  6,694;  4,888;  4,525;  4,371;  4,200;  4,100;"
    "  4,000;  4,050;  4,300;  5,000;  5,500;  5,800;  6,000;  6,100;  5,900;"
    "  5,700;  5,600;  5,800;  6,500;  7,000;  7,200;  7,100;  7,300;  7,617;",
    "Energía en el programa resultante de la casación (MWh);  26.377;  26.070;  25.123;",
    "Precio medio aritmético (Cent/kWh);  5,500;",
])

# 2009: separate Spanish and Portuguese prices in Cent/kWh
PRICES_2009 = "\n".join([
    "OMIE - Mercado de electricidad;Fecha Emisión :31/12/2008 - 11:00;;01/01/2009;"
    "Precio del mercado diario (Cent/kWh);;;;",
    "Precio marginal en el sistema español (Cent/kWh);3,997;3,760;3,560;",
    "Precio marginal en el sistema portugués (Cent/kWh);3,997;3,760;3,731;",
    "Energía total de compra sistema español (MWh);24326,2;22477,4;21142,8;",
])

# 2020: EUR/MWh, dots as thousands separators
PRICES_2020 = "\n".join([
    "OMIE - Mercado de electricidad;Fecha Emisión :13/11/2020 - 13:00;;14/11/2020;"
    "Precio del mercado diario (EUR/MWh);;;;",
    "",
    "Precio marginal en el sistema español (EUR/MWh);40,12;38,00;",
    "Precio marginal en el sistema portugués (EUR/MWh);40,12;38,00;",
    "Energía total del mercado Ibérico (MWh);27.123,4;25.000,0;",
    "Energía total con bilaterales del mercado Ibérico (MWh);30.001,2;28.500,5;",
])

TECHNOLOGY_HEADER = (
    "Fecha;Hora;CARBÓN;FUEL-GAS;AUTOPRODUCTOR;NUCLEAR;HIDRÁULICA;CICLO COMBINADO;"
    "EÓLICA;SOLAR TÉRMICA;SOLAR FOTOVOLTAICA;COGENERACIÓN/RESIDUOS/MINI HIDRA;"
    "IMPORTACIÓN INTER.;IMPORTACIÓN INTER. SIN MIBEL;"
)

TECHNOLOGY_2020_SPAIN = "\n".join([
    "OMIE - Mercado de electricidad;Fecha Emisión :12/11/2020 - 14:00;;13/11/2020;"
    "Energía total por tecnologías en el sistema español (MWh);;;",
    "",
    TECHNOLOGY_HEADER,
    "13/11/2020;1;1.432,0;;;6.088,9;2.405,9;3.191,6;7.371,1;25,7;3,7;6.292,4;;2.400,0;",
    "13/11/2020;2;1.400,0;;;6.088,9;2.300,0;3.000,0;7.000,0;20,0;0,0;6.200,0;;2.300,0;",
])

TECHNOLOGY_2020_IBERIAN = "\n".join([
    "OMIE - Mercado de electricidad;Fecha Emisión :12/11/2020 - 14:00;;13/11/2020;"
    "Energía total por tecnologías en el mercado Ibérico (MWh);;;",
    TECHNOLOGY_HEADER,
    "13/11/2020;1;1.900,5;;;7.011,0;3.000,0;4.100,2;9.000,0;25,7;3,7;7.100,0;;;",
])


def encode_document(text: str) -> bytes:
    """Encode a sample document the way OMIE serves it."""
    return text.encode(DOCUMENT_ENCODING)


@pytest.fixture
def prices_2006_lines() -> list[str]:
    return split_lines(PRICES_2006)


@pytest.fixture
def prices_2009_lines() -> list[str]:
    return split_lines(PRICES_2009)


@pytest.fixture
def prices_2020_lines() -> list[str]:
    return split_lines(PRICES_2020)


@pytest.fixture
def technology_spain_lines() -> list[str]:
    return split_lines(TECHNOLOGY_2020_SPAIN)


@pytest.fixture
def technology_iberian_lines() -> list[str]:
    return split_lines(TECHNOLOGY_2020_IBERIAN)


# ---------------------------------------------------------------------------
# Fake fetcher
# ---------------------------------------------------------------------------

class FakeFetcher:
    """Thread-safe in-memory fetcher.

    ``respond`` maps a locator to a FetchResponse (or raises). Every call
    is recorded, and the peak number of simultaneous calls is tracked.
    """

    def __init__(self, respond: Callable[[str], FetchResponse]) -> None:
        self._respond = respond
        self._lock = threading.Lock()
        self._in_flight = 0
        self.calls: list[str] = []
        self.max_in_flight = 0

    def __call__(self, locator: str) -> FetchResponse:
        with self._lock:
            self.calls.append(locator)
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            return self._respond(locator)
        finally:
            with self._lock:
                self._in_flight -= 1

    def calls_for(self, locator: str) -> int:
        with self._lock:
            return self.calls.count(locator)


def iso_locator(day: date) -> str:
    """Locator used by orchestrator tests: the ISO date itself."""
    return day.isoformat()


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the full fetch-and-parse path)",
    )
