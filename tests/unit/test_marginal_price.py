"""
Unit tests for the labeled-row parser (omie_ingest.parsers.marginal_price).

Tests header date extraction, unit conversion by label across eras,
concept filtering, row-level recovery and document-level failures.
"""

from __future__ import annotations

from datetime import date

import pytest

from omie_ingest.exceptions import ParseError
from omie_ingest.parsers.base import MarginalPriceDay
from omie_ingest.parsers.marginal_price import MarginalPriceParser
from omie_ingest.types import Concept

_HEADER = "OMIE - Mercado de electricidad;Fecha Emisión :13/11/2020 - 13:00;;14/11/2020;"


class TestCentEra:
    """2006-style documents: prices in Cent/kWh, single-dot energy values."""

    def test_date_is_second_header_date(self, prices_2006_lines):
        result = MarginalPriceParser().parse(prices_2006_lines)
        assert isinstance(result, MarginalPriceDay)
        assert result.date == date(2006, 1, 1)

    def test_prices_scaled_to_eur_mwh(self, prices_2006_lines):
        prices = MarginalPriceParser().parse(prices_2006_lines).values(Concept.PRICE_SPAIN)
        assert prices[1] == pytest.approx(66.94)
        assert prices[2] == pytest.approx(48.88)
        assert prices[3] == pytest.approx(45.25)
        assert prices[4] == pytest.approx(43.71)
        assert prices[24] == pytest.approx(76.17)
        assert len(prices) == 24

    def test_energy_single_dot_is_decimal(self, prices_2006_lines):
        energy = MarginalPriceParser().parse(prices_2006_lines).values(Concept.ENERGY_IBERIAN)
        assert energy == {1: pytest.approx(26.377), 2: pytest.approx(26.07), 3: pytest.approx(25.123)}

    def test_unknown_labels_skipped(self, prices_2006_lines):
        result = MarginalPriceParser().parse(prices_2006_lines)
        assert {r.field for r in result.records} == {Concept.PRICE_SPAIN, Concept.ENERGY_IBERIAN}
        assert len(result.records) == 24 + 3

    def test_records_carry_document_date(self, prices_2006_lines):
        result = MarginalPriceParser().parse(prices_2006_lines)
        assert all(r.date == date(2006, 1, 1) for r in result.records)


class TestSplitSystemsEra:
    """2009-style documents: Spanish and Portuguese prices on separate rows."""

    def test_both_prices(self, prices_2009_lines):
        result = MarginalPriceParser().parse(prices_2009_lines)
        assert result.date == date(2009, 1, 1)
        assert result.values(Concept.PRICE_SPAIN) == {
            1: pytest.approx(39.97), 2: pytest.approx(37.6), 3: pytest.approx(35.6),
        }
        assert result.values(Concept.PRICE_PORTUGAL)[3] == pytest.approx(37.31)

    def test_energy_comma_decimal(self, prices_2009_lines):
        energy = MarginalPriceParser().parse(prices_2009_lines).values(Concept.ENERGY_BUY_SPAIN)
        assert energy[1] == pytest.approx(24326.2)
        assert energy[3] == pytest.approx(21142.8)


class TestEurEra:
    """2020-style documents: EUR/MWh, dot thousands separators."""

    def test_prices_unscaled(self, prices_2020_lines):
        result = MarginalPriceParser().parse(prices_2020_lines)
        assert result.date == date(2020, 11, 14)
        assert result.values(Concept.PRICE_SPAIN)[1] == pytest.approx(40.12)

    def test_energy_with_thousands(self, prices_2020_lines):
        result = MarginalPriceParser().parse(prices_2020_lines)
        assert result.values(Concept.ENERGY_IBERIAN)[1] == pytest.approx(27123.4)
        assert result.values(Concept.ENERGY_IBERIAN_WITH_BILATERAL)[2] == pytest.approx(28500.5)


class TestConceptFilter:

    def test_only_requested_concepts(self, prices_2009_lines):
        parser = MarginalPriceParser(concepts=[Concept.PRICE_PORTUGAL])
        result = parser.parse(prices_2009_lines)
        assert {r.field for r in result.records} == {Concept.PRICE_PORTUGAL}

    def test_no_filter_means_all(self, prices_2009_lines):
        result = MarginalPriceParser(concepts=None).parse(prices_2009_lines)
        assert len({r.field for r in result.records}) == 3

    @pytest.mark.parametrize("concepts", [[], (), set()])
    def test_empty_filter_rejected(self, concepts):
        with pytest.raises(ValueError, match="empty"):
            MarginalPriceParser(concepts=concepts)

    def test_filter_excluding_everything_fails(self, prices_2006_lines):
        parser = MarginalPriceParser(concepts=[Concept.ENERGY_SELL_SPAIN])
        with pytest.raises(ParseError, match="no valid data"):
            parser.parse(prices_2006_lines)


class TestHourPositions:

    def test_minimal_legacy_document(self):
        lines = ["OMIE;01/01/2006;01/01/2006;", "Precio marginal (Cent/kWh);6,694;4,888"]
        result = MarginalPriceParser().parse(lines)
        assert result.values(Concept.PRICE_SPAIN) == {1: pytest.approx(66.94), 2: pytest.approx(48.88)}

    @pytest.mark.parametrize("hours", [23, 24, 25])
    def test_dst_day_lengths(self, hours):
        cells = ";".join(["50,0"] * hours)
        lines = [_HEADER, f"Precio marginal (EUR/MWh);{cells};", f"Demanda+bombeos (MWh);{cells};"]
        result = MarginalPriceParser().parse(lines)
        assert len(result.values(Concept.PRICE_SPAIN)) == hours
        assert len(result.values(Concept.ENERGY_IBERIAN)) == hours
        assert result.hours() == list(range(1, hours + 1))


class TestRowRecovery:

    def test_invalid_cell_skipped(self):
        lines = [_HEADER, "Precio marginal (EUR/MWh);40,12;n/a;38,00;"]
        prices = MarginalPriceParser().parse(lines).values(Concept.PRICE_SPAIN)
        assert prices == {1: pytest.approx(40.12), 3: pytest.approx(38.0)}

    def test_blank_cells_are_missing_hours(self):
        lines = [_HEADER, "Precio marginal (EUR/MWh);40,12;;38,00;;"]
        prices = MarginalPriceParser().parse(lines).values(Concept.PRICE_SPAIN)
        assert sorted(prices) == [1, 3]

    def test_fully_invalid_row_skipped(self):
        lines = [
            _HEADER,
            "Precio marginal en el sistema portugués (EUR/MWh);x;y;z;",
            "Precio marginal en el sistema español (EUR/MWh);40,12;",
        ]
        result = MarginalPriceParser().parse(lines)
        assert {r.field for r in result.records} == {Concept.PRICE_SPAIN}

    def test_line_without_delimiter_skipped(self):
        lines = [_HEADER, "Precio marginal (EUR/MWh)", "Precio marginal (EUR/MWh);40,12;"]
        assert len(MarginalPriceParser().parse(lines).records) == 1

    def test_values_beyond_hour_25_ignored(self):
        cells = ";".join(["1,0"] * 30)
        lines = [_HEADER, f"Precio marginal (EUR/MWh);{cells};"]
        result = MarginalPriceParser().parse(lines)
        assert result.hours() == list(range(1, 26))

    def test_duplicate_label_later_row_wins_in_values(self):
        lines = [
            _HEADER,
            "Precio marginal (EUR/MWh);10,0;",
            "Precio marginal en el sistema español (EUR/MWh);20,0;",
        ]
        result = MarginalPriceParser().parse(lines)
        assert len(result.records) == 2
        assert result.values(Concept.PRICE_SPAIN) == {1: 20.0}


class TestDocumentFailures:

    def test_empty_document(self):
        with pytest.raises(ParseError, match="empty"):
            MarginalPriceParser().parse([])

    def test_header_with_one_date(self):
        lines = ["OMIE;14/11/2020;", "Precio marginal (EUR/MWh);40,12;"]
        with pytest.raises(ParseError, match="missing date"):
            MarginalPriceParser().parse(lines)

    def test_header_only(self):
        with pytest.raises(ParseError, match="no valid data"):
            MarginalPriceParser().parse([_HEADER])

    def test_only_descriptive_rows(self):
        lines = [_HEADER, "Precio medio aritmético (EUR/MWh);40,12;"]
        with pytest.raises(ParseError):
            MarginalPriceParser().parse(lines)


class TestEntryPoints:

    def test_parse_bytes_decodes_latin1(self, prices_2009_lines):
        content = "\r\n".join(prices_2009_lines).encode("iso-8859-1")
        result = MarginalPriceParser().parse_bytes(content)
        assert result.values(Concept.PRICE_PORTUGAL)[1] == pytest.approx(39.97)

    def test_parse_file(self, tmp_path, prices_2006_lines):
        path = tmp_path / "INT_PBC_EV_H_1_01_01_2006_01_01_2006.TXT"
        path.write_bytes("\n".join(prices_2006_lines).encode("iso-8859-1"))
        assert MarginalPriceParser().parse_file(path).date == date(2006, 1, 1)


class TestToFrame:

    def test_long_frame(self, prices_2009_lines):
        df = MarginalPriceParser().parse(prices_2009_lines).to_frame()
        assert list(df.columns) == ["date", "hour", "field", "value"]
        assert len(df) == 9
        assert set(df["field"]) == {"PRICE_SP", "PRICE_PT", "ENER_BUY_SP"}

    def test_wide_frame(self, prices_2009_lines):
        df = MarginalPriceParser().parse(prices_2009_lines).to_frame(wide=True)
        assert len(df) == 3
        assert {"date", "hour", "PRICE_SP", "PRICE_PT", "ENER_BUY_SP"} <= set(df.columns)
        row = df[df["hour"] == 3].iloc[0]
        assert row["PRICE_PT"] == pytest.approx(37.31)
