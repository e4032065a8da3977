"""Writing of mmCIF loop tables.

See http://www.iucr.org/__data/assets/pdf_file/0019/22618/cifguide.pdf
"""

import gzip
import logging
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

## printed where a value is not assigned
MMCIF_MISSING_VALUE = "?"

## printed as a default value, e.g. for the default alt_locs
MMCIF_DEFAULT_VALUE = "."

## a data block starts with this, followed by a block code
MMCIF_TOP_HEADER = "data_"
MAX_BLOCK_CODE = 32

LOOP_START = "loop_"
LOOP_END = "#"


class mmCIFError(Exception):
    """Base class of errors raised while writing mmCIF data."""
    pass


class ShapeMismatchError(mmCIFError):
    """Records of one loop do not all have the same number of fields."""
    pass


class EmptyInputError(mmCIFError):
    """A loop was requested for an empty list of records."""
    pass


class FieldAccessError(mmCIFError):
    """A single field value could not be rendered as a string."""

    def __init__(self, field, value):
        mmCIFError.__init__(self)
        self.field = field
        self.value = value

    def __str__(self):
        return "Could not cast value %r to str for field %s" % (self.value, self.field)


def quote_value(value: str) -> str:
    """Add quoting to a value according to the STAR format rules.

    Values containing a single quote are wrapped in double quotes, values
    containing a space in single quotes. Multi-line quoting is not
    supported, and tabs or other whitespace besides the space character do
    not trigger quoting.
    """
    if "\n" in value or "\r" in value:
        logger.warning("Multi-line values are not supported, writing it out as is: %r", value)
        return value
    if "'" in value:
        if " " in value:
            # TODO semicolon-delimited text field for values with both a space and a single quote
            logger.warning(
                "Value contains both spaces and single quotes, it may not be read back correctly: %s",
                value,
            )
        return '"%s"' % value
    if " " in value:
        return "'%s'" % value
    return value


def _field_name(fields, i):
    if fields is None:
        return str(i)
    return fields[i]


def _as_cif_string(value, field) -> str:
    if value is not None and not isinstance(value, str):
        raise FieldAccessError(field, value)
    if not value:
        logger.debug("Field %s is empty, will write it out as %s", field, MMCIF_MISSING_VALUE)
        return MMCIF_MISSING_VALUE
    return value


def _render_value(value, field) -> str:
    try:
        return quote_value(_as_cif_string(value, field))
    except FieldAccessError as e:
        logger.warning(str(e))
        return MMCIF_MISSING_VALUE


class LoopSchema:
    """Category name plus ordered field names of a loop table.

    The header and every row of a loop are both derived from ``fields``,
    so their order can not diverge.
    """

    def __init__(self, category: str, fields: Sequence[str]):
        assert category is not None
        self.category = category
        self.fields = tuple(fields)

    def __repr__(self):
        return "LoopSchema(category=%s, fields=%d)" % (self.category, len(self.fields))

    def __len__(self):
        return len(self.fields)

    def tag(self, field):
        return "_%s.%s" % (self.category, field)

    def tags(self):
        return [self.tag(field) for field in self.fields]

    def header(self) -> str:
        lines = [LOOP_START] + self.tags()
        return "\n".join(lines) + "\n"

    def row(self, record) -> tuple:
        """Values of ``record`` in schema order.

        Named records (namedtuples) are read by field name and must carry
        exactly the schema's fields, in any order. Plain sequences are read
        by position and must have one value per field.
        """
        names = getattr(record, "_fields", None)
        if names is None:
            if len(record) != len(self.fields):
                raise ShapeMismatchError(
                    "Record has %d fields, schema %s declares %d"
                    % (len(record), self.category, len(self.fields))
                )
            return tuple(record)
        if set(names) != set(self.fields):
            missing = sorted(set(self.fields) - set(names))
            extra = sorted(set(names) - set(self.fields))
            raise ShapeMismatchError(
                "Record %s does not match schema %s (missing: %s, unexpected: %s)"
                % (type(record).__name__, self.category, missing, extra)
            )
        return tuple(getattr(record, field) for field in self.fields)


def field_sizes(rows: Sequence[Sequence], fields: Optional[Sequence[str]] = None) -> List[int]:
    """Find the maximum quoted length of each field over all rows.

    Useful for producing loop data that is aligned for all columns.

    Parameters
    ----------
    rows : Sequence[Sequence]
        Rows of field values. Values are str or None.
    fields : Optional[Sequence[str]]
        Field names, only used in log messages.

    Returns
    -------
    List[int]
        One width per field position.
    """
    if len(rows) == 0:
        raise EmptyInputError("List of records is empty")

    nfields = len(rows[0])
    sizes = [0] * nfields
    for n, row in enumerate(rows):
        if len(row) != nfields:
            raise ShapeMismatchError(
                "Record %d has %d fields, expected %d" % (n, len(row), nfields)
            )
        for i, value in enumerate(row):
            length = len(_render_value(value, _field_name(fields, i)))
            if length > sizes[i]:
                sizes[i] = length
    return sizes


def format_row(row: Sequence, sizes: Sequence[int], fields: Optional[Sequence[str]] = None) -> str:
    """Render one row as a single loop line padded to ``sizes``."""
    if len(sizes) != len(row):
        raise ShapeMismatchError(
            "The given sizes of fields (%d) differ from the number of fields (%d)"
            % (len(sizes), len(row))
        )
    l = []
    for i, (value, size) in enumerate(zip(row, sizes)):
        l.append(_render_value(value, _field_name(fields, i)).ljust(size))
        l.append(" ")
    l.append("\n")
    return "".join(l)


def format_loop(schema: LoopSchema, rows: Sequence[Sequence], sizes: Sequence[int]) -> str:
    """Render a complete loop: header, one line per row, and the end marker."""
    if len(rows) == 0:
        raise EmptyInputError("List of records is empty")
    listx = [schema.header()]
    for row in rows:
        if len(row) != len(schema):
            raise ShapeMismatchError(
                "Record has %d fields, schema %s declares %d"
                % (len(row), schema.category, len(schema))
            )
        listx.append(format_row(row, sizes, schema.fields))
    listx.append(LOOP_END + "\n")
    return "".join(listx)


def to_mmcif(schema: LoopSchema, records: Sequence) -> str:
    """Convert a list of records to a string in mmCIF loop format.

    Every record is read through ``schema``; all rows are materialized and
    sized before the first line is rendered.
    """
    rows = [schema.row(record) for record in records]
    sizes = field_sizes(rows, schema.fields)
    return format_loop(schema, rows, sizes)


def block_header(block_name: str) -> str:
    block_name = "".join(str(block_name).split())
    if len(block_name) > MAX_BLOCK_CODE:
        logger.warning(
            "Block code %s is longer than %d characters, truncating it",
            block_name,
            MAX_BLOCK_CODE,
        )
        block_name = block_name[:MAX_BLOCK_CODE]
    return "%s%s\n" % (MMCIF_TOP_HEADER, block_name)


def write_file(fname: str, block_name: str, loops: Sequence[str]) -> None:
    """Write a data block made of already rendered ``loops`` to ``fname``.

    File names ending in .gz are gzip-compressed.
    """
    if fname.endswith(".gz"):
        fileobj = gzip.open(fname, "wt")
    else:
        fileobj = open(fname, "w")
    with fileobj as f:
        f.write(block_header(block_name))
        f.write(LOOP_END + "\n")
        for loop in loops:
            f.write(loop)
    logger.info("Wrote %d loop(s) to %s", len(loops), fname)
