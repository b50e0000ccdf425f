"""Tests for the CsvMapper builder and parser."""

import math
from dataclasses import dataclass
from enum import Enum

import pytest

from csvmapper.exceptions import ConfigurationError, DuplicateColumnError
from csvmapper.mapper import CsvMapper


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass
class Trade:
    symbol: str = ""
    price: float = 0.0
    quantity: int = 0
    side: Side | None = None


def _single(mapper, cell, header="f"):
    return mapper.parse_string(f"{header}\n{cell}")[0]["x"]


class TestRegistration:
    def test_chaining_returns_same_mapper(self):
        mapper = CsvMapper()
        assert mapper.text("a", "a") is mapper
        assert mapper.float("b", "b").int("c", "c") is mapper

    def test_duplicate_source_raises(self):
        mapper = CsvMapper().text("name", "name")
        with pytest.raises(DuplicateColumnError):
            mapper.text("name", "other")

    def test_duplicate_after_trimming_raises(self):
        mapper = CsvMapper().column(" name", "name")
        with pytest.raises(ConfigurationError):
            mapper.float("name  ", "other")

    def test_duplicate_does_not_corrupt_existing(self):
        mapper = CsvMapper().text("a", "x")
        with pytest.raises(DuplicateColumnError):
            mapper.int("a", "y")
        assert len(mapper.columns) == 1
        assert mapper.parse_string("a\nhello") == [{"x": "hello"}]

    def test_same_target_from_different_sources(self):
        mapper = CsvMapper().text("a", "x").text("b", "x")
        assert mapper.parse_string("a\tb\n1\t2") == [{"x": "2"}]

    def test_source_is_case_sensitive(self):
        mapper = CsvMapper().text("Name", "upper").text("name", "lower")
        assert len(mapper.columns) == 2

    def test_unknown_option_raises(self):
        with pytest.raises(ConfigurationError):
            CsvMapper(separator=";")


class TestParseString:
    @pytest.mark.parametrize("delimiter", ["\t", ",", ";", "|", "::"])
    def test_unmapped_column_dropped(self, delimiter):
        mapper = CsvMapper(delimiter=delimiter).text("h1", "a").text("h3", "c")
        text = delimiter.join(["h1", "h2", "h3"]) + "\n" + delimiter.join(["v1", "v2", "v3"])
        assert mapper.parse_string(text) == [{"a": "v1", "c": "v3"}]

    def test_default_delimiter_is_tab(self):
        mapper = CsvMapper().text("a", "a")
        assert mapper.options.delimiter == "\t"
        assert mapper.parse_string("a\tb\n1\t2") == [{"a": "1"}]

    def test_options_mapping(self):
        mapper = CsvMapper({"delimiter": ";"}).text("a", "a")
        assert mapper.parse_string("a;b\n1;2") == [{"a": "1"}]

    def test_header_names_trimmed_for_lookup(self):
        mapper = CsvMapper(delimiter=",").text("name", "name")
        assert mapper.parse_string(" name ,x\nBob,1") == [{"name": "Bob"}]

    def test_transform_receives_full_row(self):
        mapper = CsvMapper(delimiter=",").column(
            "first", "full", lambda raw, row: f"{raw} {row['last']}"
        )
        assert mapper.parse_string("first,last\nAda,Lovelace") == [{"full": "Ada Lovelace"}]

    def test_mapping_for_absent_column_never_invoked(self):
        calls = []
        mapper = CsvMapper(delimiter=",").text("a", "a").column("zz", "z", lambda raw, row: calls.append(raw))
        assert mapper.parse_string("a\n1") == [{"a": "1"}]
        assert calls == []

    def test_missing_cell_passes_none(self):
        mapper = CsvMapper(delimiter=",").text("a", "a").text("b", "b")
        assert mapper.parse_string("a,b\n1") == [{"a": "1", "b": None}]

    def test_trailing_newline_adds_record(self):
        mapper = CsvMapper(delimiter=",").text("a", "a").text("b", "b")
        records = mapper.parse_string("a,b\n1,2\n")
        assert records == [{"a": "1", "b": "2"}, {"a": "", "b": None}]

    def test_parsing_twice_is_stable(self):
        mapper = CsvMapper(delimiter=",").text("a", "a").int("b", "b")
        text = "a,b\nx,1\ny,2"
        assert mapper.parse_string(text) == mapper.parse_string(text)
        assert len(mapper.columns) == 2

    def test_registration_after_parse_affects_later_parses(self):
        mapper = CsvMapper(delimiter=",").text("a", "a")
        text = "a,b\n1,2"
        assert mapper.parse_string(text) == [{"a": "1"}]
        mapper.text("b", "b")
        assert mapper.parse_string(text) == [{"a": "1", "b": "2"}]

    def test_fingerprint_tracks_configuration(self):
        base = CsvMapper(delimiter=",").text("a", "a")
        assert base.fingerprint() == CsvMapper(delimiter=",").text("a", "a").fingerprint()
        assert base.fingerprint() != CsvMapper(delimiter=";").text("a", "a").fingerprint()
        assert base.fingerprint() != CsvMapper(delimiter=",").int("a", "a").fingerprint()
        assert base.fingerprint() != CsvMapper(delimiter=",").text("a", "b").fingerprint()

    def test_build_is_cached_until_registration(self):
        mapper = CsvMapper().text("a", "a")
        plan = mapper.build()
        assert mapper.build() is plan
        mapper.text("b", "b")
        assert mapper.build() is not plan
        assert mapper.build().lookup(" b ").target == "b"

    def test_record_factory(self):
        mapper = (
            CsvMapper(record_factory=Trade, delimiter=";")
            .text("Symbol", "symbol")
            .float("Price", "price")
            .int("Qty", "quantity")
            .enum_text("Side", "side", Side)
        )
        trades = mapper.parse_string("Symbol;Price;Qty;Side\nACME;12,5;10;buy")
        assert trades == [Trade("ACME", 12.5, 10, Side.BUY)]


class TestNumericColumns:
    def test_float_comma(self):
        assert _single(CsvMapper().float("f", "x"), "3,14") == 3.14

    def test_float_invalid_is_nan(self):
        assert math.isnan(_single(CsvMapper().float("f", "x"), "abc"))

    def test_float_transform_arguments(self):
        seen = []

        def _capture(number, raw, row):
            seen.append((number, raw, row))
            return number * 2

        assert _single(CsvMapper().float("f", "x", _capture), "1,5") == 3.0
        assert seen == [(1.5, "1,5", {"f": "1,5"})]

    def test_float_transform_handles_nan(self):
        mapper = CsvMapper().float("f", "x", lambda n, raw, row: 0.0 if math.isnan(n) else n)
        assert _single(mapper, "n/a") == 0.0

    def test_int_floors(self):
        assert _single(CsvMapper().int("f", "x"), "3,99") == 3
        assert _single(CsvMapper().int("f", "x"), "-0,5") == -1

    def test_int_nan(self):
        assert math.isnan(_single(CsvMapper().int("f", "x"), "abc"))

    def test_int_transform_receives_floored_value(self):
        mapper = CsvMapper().int("f", "x", lambda n, raw, row: (n, raw))
        assert _single(mapper, "7,9") == (7, "7,9")

    def test_float_missing_cell_is_nan(self):
        mapper = CsvMapper(delimiter=",").float("b", "x")
        assert math.isnan(mapper.parse_string("a,b\n1")[0]["x"])


class TestEnumColumns:
    def test_enum_text(self):
        mapper = CsvMapper().enum_text("f", "x", {"A": 1, "B": 2})
        assert _single(mapper, "A") == 1
        assert _single(mapper, "a") == 1
        assert _single(mapper, " B ") == 2
        assert _single(mapper, "Z") is None

    def test_enum_value_resolves_value(self):
        mapper = CsvMapper().enum_value("f", "x", {"A": "low", "B": "high"})
        assert _single(mapper, "low") == "low"
        assert _single(mapper, "HIGH") == "high"
        assert _single(mapper, "A") is None

    def test_enum_value_with_enum_class(self):
        mapper = CsvMapper().enum_value("f", "x", Side)
        assert _single(mapper, "sell") is Side.SELL

    def test_enum_transform_receives_original(self):
        mapper = CsvMapper().enum_text("f", "x", {"A": 1}, lambda v, raw, row: (v, raw))
        assert _single(mapper, " z ") == (None, " z ")


class TestParseFile:
    @pytest.mark.asyncio
    async def test_parse_file(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a,b\n1,2", encoding="utf-8")
        mapper = CsvMapper(delimiter=",").int("a", "a").text("b", "b")
        assert await mapper.parse_file(path) == [{"a": 1, "b": "2"}]

    @pytest.mark.asyncio
    async def test_parse_file_keeps_carriage_returns(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\r\n1,2\r\n")
        mapper = CsvMapper(delimiter=",").text("a", "a").text("b", "b")
        records = await mapper.parse_file(str(path))
        assert records[0] == {"a": "1", "b": "2\r"}

    @pytest.mark.asyncio
    async def test_parse_file_missing_path(self, tmp_path):
        mapper = CsvMapper().text("a", "a")
        with pytest.raises(FileNotFoundError):
            await mapper.parse_file(tmp_path / "missing.csv")

    def test_parse_path(self, tmp_path):
        path = tmp_path / "data.tsv"
        path.write_text("a\tb\nx\ty", encoding="utf-8")
        assert CsvMapper().text("b", "b").parse_path(path) == [{"b": "y"}]
