"""
Unit tests for quoting, column sizing and loop rendering
"""

import gzip
import os.path as op
from collections import namedtuple

import pytest

from atomsite.structure.mmciffile import (
    MMCIF_MISSING_VALUE,
    EmptyInputError,
    LoopSchema,
    ShapeMismatchError,
    block_header,
    field_sizes,
    format_loop,
    format_row,
    quote_value,
    to_mmcif,
    write_file,
)

from .base_test_case import UnitBase

Cell = namedtuple("Cell", ["length_a", "length_b", "space_group"])
CELL_SCHEMA = LoopSchema("cell", Cell._fields)


class TestQuoting(UnitBase):
    def test_quote_plain_value(self):
        assert quote_value("CA") == "CA"
        assert quote_value("1.000") == "1.000"
        assert quote_value("") == ""

    def test_quote_single_quote(self):
        assert quote_value("O5'") == '"O5\'"'

    def test_quote_space(self):
        assert quote_value("CA ") == "'CA '"
        assert quote_value("P 1 21 1") == "'P 1 21 1'"

    def test_quote_space_and_single_quote_is_diagnosed(self):
        with self.assertLogs("atomsite.structure.mmciffile", level="WARNING") as cm:
            quoted = quote_value("O5' A")
        assert quoted == '"O5\' A"'
        assert len(cm.output) == 1
        assert "both spaces and single quotes" in cm.output[0]

    def test_quote_multi_line_value_is_not_quoted(self):
        with self.assertLogs("atomsite.structure.mmciffile", level="WARNING"):
            assert quote_value("a\nb") == "a\nb"


class TestFieldSizes(UnitBase):
    def test_field_sizes(self):
        rows = [("ATOM", "1", "CA "), ("HETATM", "10", "O")]
        assert field_sizes(rows) == [6, 2, 5]

    def test_field_sizes_missing_value_floor(self):
        assert field_sizes([(None, "")]) == [len(MMCIF_MISSING_VALUE)] * 2

    def test_field_sizes_empty(self):
        with pytest.raises(EmptyInputError):
            field_sizes([])

    def test_field_sizes_shape_mismatch(self):
        rows = [tuple(["x"] * 20), tuple(["x"] * 19)]
        with pytest.raises(ShapeMismatchError):
            field_sizes(rows)

    def test_field_sizes_unexpected_type(self):
        with self.assertLogs("atomsite.structure.mmciffile", level="WARNING") as cm:
            sizes = field_sizes([("ATOM", 12345)], fields=("group_PDB", "id"))
        assert sizes == [4, 1]
        assert "id" in cm.output[0]


class TestLoopFormatting(UnitBase):
    def test_format_row(self):
        assert format_row(("ATOM", "CA "), [6, 6]) == "ATOM   'CA '  \n"

    def test_format_row_sizes_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            format_row(("ATOM", "CA"), [4])

    def test_format_loop_empty(self):
        with pytest.raises(EmptyInputError):
            format_loop(CELL_SCHEMA, [], [])

    def test_to_mmcif_empty(self):
        with pytest.raises(EmptyInputError):
            to_mmcif(CELL_SCHEMA, [])

    def test_to_mmcif(self):
        records = [
            Cell("8.000", "12.000", "P 1"),
            Cell("100.500", None, "P21"),
        ]
        text = to_mmcif(CELL_SCHEMA, records)
        assert text == (
            "loop_\n"
            "_cell.length_a\n"
            "_cell.length_b\n"
            "_cell.space_group\n"
            "8.000   12.000 'P 1' \n"
            "100.500 ?      P21   \n"
            "#\n"
        )

    def test_header_and_row_order(self):
        Reversed = namedtuple("Reversed", list(reversed(Cell._fields)))
        record = Reversed("P21", "12.000", "8.000")
        text = to_mmcif(CELL_SCHEMA, [record])
        lines = text.splitlines()
        assert lines[1:4] == CELL_SCHEMA.tags()
        # values follow the schema, not the field order of the record type
        assert lines[4].split() == ["8.000", "12.000", "P21"]

    def test_to_mmcif_empty_string_keeps_columns(self):
        text = to_mmcif(CELL_SCHEMA, [Cell("8.000", "", "P1")])
        row = text.splitlines()[4]
        assert row.split() == ["8.000", MMCIF_MISSING_VALUE, "P1"]

    def test_to_mmcif_plain_sequences(self):
        text = to_mmcif(CELL_SCHEMA, [("8.000", "12.000", "P1")])
        assert text.splitlines()[4].split() == ["8.000", "12.000", "P1"]

    def test_to_mmcif_rejects_record_without_schema_field(self):
        Partial = namedtuple("Partial", ["length_a", "length_b"])
        records = [Cell("8.000", "12.000", "P1"), Partial("1.0", "2.0")]
        with pytest.raises(ShapeMismatchError):
            to_mmcif(CELL_SCHEMA, records)

    def test_to_mmcif_rejects_record_with_foreign_field(self):
        Other = namedtuple("Other", ["length_a", "length_b", "length_c"])
        with pytest.raises(ShapeMismatchError):
            to_mmcif(CELL_SCHEMA, [Other("1.0", "2.0", "3.0")])

    def test_to_mmcif_rejects_short_plain_sequence(self):
        with pytest.raises(ShapeMismatchError):
            to_mmcif(CELL_SCHEMA, [("8.000", "12.000", "P1"), ("a", "b")])


class TestWriteFile(UnitBase):
    def test_block_header(self):
        assert block_header("1ABC") == "data_1ABC\n"
        with self.assertLogs("atomsite.structure.mmciffile", level="WARNING"):
            header = block_header("x" * 40)
        assert header == "data_" + "x" * 32 + "\n"

    def test_write_file(self):
        loop = to_mmcif(CELL_SCHEMA, [Cell("8.000", "12.000", "P1")])
        for fname in ("cell.cif", "cell.cif.gz"):
            write_file(fname, "cell", [loop])
            assert op.isfile(fname)
            opener = gzip.open if fname.endswith(".gz") else open
            with opener(fname, "rt") as f:
                content = f.read()
            assert content == "data_cell\n#\n" + loop
