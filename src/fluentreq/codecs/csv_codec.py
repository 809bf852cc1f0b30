"""Codec for ``text/csv``.

Parsing yields the raw rows, header included, as lists of strings.  With
``as_records=True`` the first row is taken as the header and every other
row becomes a ``dict`` keyed by it, which makes the codec symmetric with
:meth:`CsvCodec.serialize`.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Mapping
from typing import Any, Iterable

from fluentreq.codecs.base import Body, Codec, as_text
from fluentreq.exceptions import CsvParseError


class CsvCodec(Codec):
    """Parse and serialize CSV bodies using standard CSV quoting.

    Args:
        as_records: Parse into a list of dicts keyed by the header row
            instead of a list of raw rows.
        delimiter: Field separator, ``","`` by default.
    """

    def __init__(self, as_records: bool = False, delimiter: str = ",") -> None:
        self.as_records = as_records
        self.delimiter = delimiter

    def parse(self, body: Body) -> Any:
        """Split *body* into rows of fields.

        Returns:
            ``None`` for an empty body, otherwise a list of rows (or of
            records when ``as_records`` is set).  Blank lines are skipped
            rather than returned as empty rows, so a body made only of line
            breaks has no rows and is rejected.

        Raises:
            CsvParseError: If the body holds no rows at all, or the CSV
                reader rejects it.
        """
        text = as_text(body)
        if not text:
            return None

        try:
            rows = [row for row in csv.reader(io.StringIO(text), delimiter=self.delimiter) if row]
        except csv.Error as exc:
            raise CsvParseError(f"Unable to parse response as CSV: {exc}") from exc
        if not rows:
            raise CsvParseError("Unable to parse response as CSV")

        if self.as_records:
            header, *data = rows
            return [dict(zip(header, row)) for row in data]
        return rows

    def serialize(self, payload: Iterable[Any]) -> str:
        """Write *payload*, a sequence of records, as CSV text.

        The first line is a header made of the first record's keys (its
        indices when records are plain sequences).  Each record is then
        written with its values in header order.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator="\n")

        keys: list[Any] = []
        for i, record in enumerate(payload):
            if not isinstance(record, Mapping):
                record = dict(enumerate(record))
            if i == 0:
                keys = list(record.keys())
                writer.writerow(keys)
            writer.writerow([record.get(key, "") for key in keys])
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"CsvCodec(as_records={self.as_records!r})"
